import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables at the very beginning
load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from verisight.api import analysis, session, system  # noqa: E402
from verisight.config import settings  # noqa: E402
from verisight.integrations import http_client  # noqa: E402
from verisight.services.session import SessionRegistry  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    app.state.sessions = SessionRegistry()
    await http_client.initialize()
    logger.info(f"[STARTUP] VeriSight ready (model: {settings.gemini_model})")

    yield

    await http_client.close()
    logger.info("[SHUTDOWN] VeriSight stopped")


app = FastAPI(title="VeriSight Media Forensics API", lifespan=lifespan)


# Error responses must carry CORS headers too, or the browser hides the
# JSON body behind a generic network error.
@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    headers = dict(getattr(exc, "headers", None) or {})
    headers["Access-Control-Allow-Origin"] = "*"
    headers["Access-Control-Allow-Credentials"] = "true"
    headers["Access-Control-Allow-Methods"] = "*"
    headers["Access-Control-Allow-Headers"] = "*"

    # Drain the upload so an early rejection doesn't drop the connection.
    try:
        async for _ in request.stream():
            pass
    except Exception as e:
        logger.warning(f"Error draining request stream in exception handler: {e}")

    response_data = {"detail": exc.detail}
    logger.info(f"[ERROR HANDLER] Returning {exc.status_code} to client. Body: {response_data}")

    return JSONResponse(
        status_code=exc.status_code,
        content=response_data,
        headers=headers
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system.router)
app.include_router(analysis.router)
app.include_router(session.router)
