"""
Gemini API client — initialization and the forensic analysis call.

The module-level `client` is created once on import from settings.
`analyze_media` is the public entry point used by the analyze route.
"""

import base64
import logging

from google import genai
from google.genai import types

from verisight.config import settings
from verisight.core.exceptions import AnalysisError
from verisight.integrations.gemini.prompts import build_request
from verisight.schemas.analysis import AnalysisResult, MediaFile

logger = logging.getLogger(__name__)

# No retry_options: a failed call is surfaced to the user, who resubmits.
client = genai.Client(
    api_key=settings.gemini_api_key,
    http_options=types.HttpOptions(timeout=settings.gemini_http_timeout_ms),
)


def split_data_url(data_url: str) -> tuple[str, str]:
    """Split at the first comma into (header, base64 payload)."""
    if "," not in data_url:
        raise ValueError("Preview is not a data URL")
    header, payload = data_url.split(",", 1)
    return header, payload


def parse_analysis_result(raw: str) -> AnalysisResult:
    """
    Strict decode: missing fields, out-of-enum values and wrong JSON types
    ("yes" for a bool, "87" for a number) raise ValidationError.
    """
    if not raw:
        raise ValueError("Empty response body")
    return AnalysisResult.model_validate_json(raw, strict=True)


def _log_usage(response) -> None:
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return
    logger.info(
        f"[GEMINI] Usage | prompt: {usage.prompt_token_count} | "
        f"completion: {usage.candidates_token_count} | total: {usage.total_token_count}"
    )


async def analyze_media(media_file: MediaFile) -> AnalysisResult:
    """
    One round-trip to Gemini for a single MediaFile.

    Any failure is logged and re-raised as AnalysisError with the generic
    user-facing message. Cancellation of the awaiting task propagates as-is.
    """
    try:
        _, payload = split_data_url(media_file.preview)
        media_bytes = base64.b64decode(payload)
        prompt, schema = build_request(media_file.type)

        config = types.GenerateContentConfig(
            thinking_config=types.ThinkingConfig(thinking_budget=settings.gemini_thinking_budget),
            response_mime_type="application/json",
            response_schema=schema,
        )

        response = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=[
                types.Part.from_bytes(data=media_bytes, mime_type=media_file.file.type),
                prompt,
            ],
            config=config,
        )

        _log_usage(response)
        result = parse_analysis_result(response.text)

    except Exception as e:
        logger.error(f"[GEMINI] analyze_media error for {media_file.file.name}: {e}")
        raise AnalysisError() from e

    logger.info(
        f"[GEMINI] {media_file.file.name}: verdict={result.verdict.value} "
        f"confidence={result.confidence_score} artifacts={len(result.artifacts)}"
    )
    return result
