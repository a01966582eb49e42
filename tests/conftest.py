"""
Shared pytest fixtures for all test modules.

IMPORTANT: GEMINI_API_KEY must be set before the app is imported.
The Gemini client is instantiated at module import time; a non-empty stub
prevents the SDK from raising ValueError before our mocks are in place.
Real API calls never happen in tests — the Gemini client is mocked.
"""

import json
import os

os.environ.setdefault("GEMINI_API_KEY", "stub-key-for-tests")

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# App import happens AFTER GEMINI_API_KEY is set above.
from verisight.main import app  # noqa: E402
from verisight.services.ingestion import ingest_bytes  # noqa: E402


# ---------------------------------------------------------------------------
# Shared test data
# ---------------------------------------------------------------------------

MOCK_MODEL_RESPONSE = {
    "isAiGenerated": True,
    "confidenceScore": 87,
    "summary": "Procedural brush patterns throughout the canvas.",
    "verdict": "AI_GENERATED",
    "artifacts": [
        {
            "title": "Neural brush strokes",
            "description": "Strokes repeat with no variation in pressure.",
            "severity": "high",
        },
        {
            "title": "Gradient banding",
            "description": "Sky gradient is mathematically uniform.",
            "severity": "low",
        },
    ],
}

FAKE_PNG = b"\x89PNG\r\n\x1a\nfake-png-bytes"


def make_gemini_response(payload) -> SimpleNamespace:
    """A stand-in for GenerateContentResponse exposing only `.text`."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return SimpleNamespace(text=text, usage_metadata=None)


def patch_gemini(response=None, side_effect=None):
    """
    Patch the module-level genai client so client.aio.models.generate_content
    is an AsyncMock. Returns the patcher; `.start()` or use as a context manager.
    """
    mock_client = MagicMock()
    mock_client.aio.models.generate_content = AsyncMock(
        return_value=response if response is not None else make_gemini_response(MOCK_MODEL_RESPONSE),
        side_effect=side_effect,
    )
    return patch("verisight.integrations.gemini.client.client", mock_client)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    """FastAPI TestClient; the lifespan creates a fresh SessionRegistry."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def image_media():
    return ingest_bytes("art.png", "image/png", FAKE_PNG)


@pytest.fixture
def audio_media():
    return ingest_bytes("song.mp3", "audio/mpeg", b"ID3fake-mp3")
