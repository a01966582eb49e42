"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    GEMINI_MODEL=gemini-2.5-pro uvicorn verisight.main:app
    export GEMINI_HTTP_TIMEOUT_MS=60000

A `.env` file at the project root is loaded automatically.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,   # GEMINI_MODEL == gemini_model
        extra="ignore",         # silently drop unknown env vars
    )

    # ------------------------------------------------------------------ #
    # Gemini Client                                                       #
    # ------------------------------------------------------------------ #
    gemini_api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
        description="Gemini API key, supplied out of band",
    )
    gemini_model: str = Field(
        "gemini-3-pro-preview", description="Multimodal model used for forensic analysis"
    )
    gemini_thinking_budget: int = Field(
        4_000, description="Fixed reasoning-token budget requested per analysis"
    )
    gemini_http_timeout_ms: int = Field(
        120_000, description="Deadline for one analysis round-trip (ms)"
    )

    # ------------------------------------------------------------------ #
    # Ingestion                                                           #
    # ------------------------------------------------------------------ #
    max_download_mb: int = Field(
        100, description="Max MB fetched when ingesting media from a remote URL"
    )
    http_session_timeout_sec: int = Field(
        30, description="Total timeout for the shared aiohttp session (seconds)"
    )

    # ------------------------------------------------------------------ #
    # Sessions & HTTP surface                                             #
    # ------------------------------------------------------------------ #
    default_session_id: str = Field(
        "default", description="Session used when no X-Session-ID header is sent"
    )
    max_sessions: int = Field(
        1_000, description="Sessions held in memory before idle ones are evicted"
    )
    session_idle_ttl_sec: int = Field(
        3_600, description="1 h — a session untouched this long is evicted first"
    )
    cors_allow_origins: list[str] = Field(
        ["*"], description="Origins allowed to call the API from a browser"
    )

    # ------------------------------------------------------------------ #
    # Derived byte-level properties (computed from MB fields)             #
    # ------------------------------------------------------------------ #
    @property
    def max_download_bytes(self) -> int:
        return self.max_download_mb * 1024 * 1024


# Single shared instance — import this everywhere.
settings = Settings()
