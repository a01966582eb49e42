"""
Analysis route: /analyze

Accepts multipart/form-data with a 'file' field, or a JSON payload
{ "dataUrl": "data:...;base64,..." } / { "url": "https://..." }.

The session is checked before the file is read; one analysis per session.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from verisight.core.dependencies import get_session
from verisight.core.exceptions import AnalysisError, IngestionError, SessionBusyError
from verisight.core.logging_utils import sanitize_log_message
from verisight.integrations.gemini.client import analyze_media
from verisight.schemas.analysis import AnalysisReport, AnalyzeRequest, MediaFile
from verisight.services.ingestion import ingest, ingest_data_url, ingest_url
from verisight.services.session import AnalysisSession

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])

SESSION_RESET_MESSAGE = "The session was reset before the analysis completed."


async def _read_media(request: Request) -> MediaFile:
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            payload = AnalyzeRequest.model_validate(await request.json())
        except (ValueError, ValidationError):
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if payload.data_url:
            return ingest_data_url(payload.data_url)
        if payload.url:
            return await ingest_url(payload.url)
        raise HTTPException(status_code=400, detail="Must provide 'dataUrl' or 'url' in JSON body")

    if "multipart/form-data" in content_type:
        form = await request.form()
        file_obj = form.get("file")
        if not isinstance(file_obj, UploadFile):
            raise HTTPException(status_code=400, detail="Must provide 'file' in form data")
        return await ingest(file_obj)

    raise HTTPException(
        status_code=415,
        detail="Unsupported Media Type. Use multipart/form-data or application/json"
    )


@router.post("/analyze", response_model=AnalysisReport)
async def analyze(request: Request, session: AnalysisSession = Depends(get_session)):
    """
    Analyze one image, video or audio file for signs of AI generation.
    """
    try:
        session.ensure_idle()
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=e.message)

    try:
        media = await _read_media(request)
    except IngestionError as e:
        session.fail_ingestion(e.message)
        raise HTTPException(status_code=400, detail=e.message)

    try:
        token = session.begin(media)
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=e.message)

    try:
        result = await analyze_media(media)
    except AnalysisError as e:
        session.fail(token, e.message)
        raise HTTPException(status_code=502, detail=e.message)
    except asyncio.CancelledError:
        session.fail(token, "Analysis cancelled.")
        raise

    if not session.complete(token, result):
        logger.info(sanitize_log_message(f"[ROUTE] Discarded result for {media.file.name}: session reset"))
        raise HTTPException(status_code=409, detail=SESSION_RESET_MESSAGE)

    logger.info(sanitize_log_message(f"[ROUTE] Analysis complete for {media.file.name}: {result.verdict.value}"))
    return AnalysisReport(
        result=result,
        preview=media.preview,
        media_type=media.type,
        file_name=media.file.name,
    )
