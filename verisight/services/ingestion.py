"""
Media ingestion: uploaded files, pasted data URLs and remote URLs are read
fully into memory, encoded as a data URL and classified into a MediaKind.

No size or type validation is applied to uploads; any MIME type is accepted
and anything that is neither video nor audio is treated as an image.
"""

import asyncio
import base64
import binascii
import logging
import mimetypes
from urllib.parse import urlparse

import aiohttp
from fastapi import UploadFile

from verisight.config import settings
from verisight.core.exceptions import IngestionError
from verisight.core.logging_utils import log_memory
from verisight.integrations import http_client as http_module
from verisight.schemas.analysis import MediaFile, MediaKind, SourceFile

logger = logging.getLogger(__name__)

# Label browsers give to untyped blobs when reading them as data URLs
UNTYPED_MIME = "application/octet-stream"


def classify_media(mime_type: str) -> MediaKind:
    if mime_type.startswith("video"):
        return MediaKind.VIDEO
    if mime_type.startswith("audio"):
        return MediaKind.AUDIO
    return MediaKind.IMAGE


def encode_data_url(content: bytes, mime_type: str) -> str:
    payload = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type or UNTYPED_MIME};base64,{payload}"


def ingest_bytes(filename: str, mime_type: str, content: bytes) -> MediaFile:
    """Build the MediaFile for content that is already in memory."""
    media = MediaFile(
        file=SourceFile(name=filename, type=mime_type, size=len(content)),
        preview=encode_data_url(content, mime_type),
        type=classify_media(mime_type),
    )
    logger.info(f"[INGEST] {filename} ({mime_type or 'untyped'}, {len(content)} bytes) -> {media.type.value}")
    return media


async def ingest(upload: UploadFile) -> MediaFile:
    """Read an uploaded file into memory. The read is the only await."""
    filename = upload.filename or "uploaded_file"
    mime_type = upload.content_type or ""

    log_memory(f"Pre-Ingest: {filename}")
    try:
        content = await upload.read()
    except Exception as e:
        logger.error(f"[INGEST] Failed to read {filename}: {e}")
        raise IngestionError() from e

    media = ingest_bytes(filename, mime_type, content)
    log_memory(f"Post-Ingest: {filename}")
    return media


def _filename_for(stem: str, mime_type: str) -> str:
    ext = mimetypes.guess_extension(mime_type) if mime_type else None
    return f"{stem}{ext or ''}"


def ingest_data_url(data_url: str) -> MediaFile:
    """Ingest a pasted base64 data URL (data:<mime>;base64,<payload>)."""
    if not data_url.startswith("data:") or "," not in data_url:
        raise IngestionError("Invalid data URL.")

    header, data_str = data_url.split(",", 1)
    if ";base64" not in header:
        raise IngestionError("Only base64 data URLs are supported.")

    try:
        content = base64.b64decode(data_str, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error(f"[INGEST] Error decoding data URL: {e}")
        raise IngestionError("Invalid data URL.") from e

    mime_type = header[len("data:"):].split(";")[0]
    return ingest_bytes(_filename_for("pasted_media", mime_type), mime_type, content)


async def ingest_url(url: str, max_size: int = None) -> MediaFile:
    """Download remote media through the shared aiohttp session."""
    max_size = max_size or settings.max_download_bytes
    path = urlparse(url).path

    async with http_module.request_session() as session:
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise IngestionError(f"Failed to fetch media from URL: Status {response.status}")
                content = await response.read()
                if len(content) > max_size:
                    raise IngestionError(f"Media too large (max {max_size // (1024 * 1024)}MB)")
                content_type = response.headers.get("Content-Type", "")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"[INGEST] Error fetching {url}: {e!r}")
            raise IngestionError(f"Error fetching media: {str(e) or type(e).__name__}") from e

    mime_type = content_type.split(";")[0].strip().lower()
    if not mime_type or mime_type == UNTYPED_MIME:
        mime_type = mimetypes.guess_type(path)[0] or mime_type

    filename = path.rsplit("/", 1)[-1] or _filename_for("downloaded_media", mime_type)
    return ingest_bytes(filename, mime_type, content)
