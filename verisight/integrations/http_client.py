"""
Shared aiohttp ClientSession — initialized once during FastAPI lifespan.

Remote-URL ingestion is the only outbound HTTP this service makes itself
(Gemini goes through the genai SDK's own transport). Media hosts are often
hit repeatedly (a CDN serving several clips), so one pooled session keeps
connections alive between /analyze calls. Its total timeout
(`http_session_timeout_sec`) bounds how long a slow host can stall an
/analyze request before it fails with IngestionError.

Usage:
    async with http_client.request_session() as sess:
        async with sess.get(url) as response:
            ...

The context manager yields the shared session when available, otherwise
creates and closes a temporary one (covers tests and pre-init calls).
"""

import logging
from contextlib import asynccontextmanager

import aiohttp

from verisight.config import settings

logger = logging.getLogger(__name__)

session: aiohttp.ClientSession | None = None


def _timeout() -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=settings.http_session_timeout_sec)


async def initialize() -> None:
    global session
    session = aiohttp.ClientSession(timeout=_timeout())
    logger.info("[STARTUP] Shared HTTP session initialized")


async def close() -> None:
    global session
    if session and not session.closed:
        await session.close()
        session = None
        logger.info("[SHUTDOWN] Shared HTTP session closed")


@asynccontextmanager
async def request_session():
    """
    Yield the shared session if available, otherwise a temporary one.

    Never closes the shared session — http_client.close() handles that.
    """
    if session and not session.closed:
        yield session
    else:
        tmp = aiohttp.ClientSession(timeout=_timeout())
        try:
            yield tmp
        finally:
            await tmp.close()
