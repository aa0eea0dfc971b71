"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the report session and the
command line tooling share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Copy KEY=VALUE lines from ``path`` into os.environ; existing variables win."""
    env_path = Path(path)
    if not env_path.is_file():
        return
    for line in env_path.read_text().splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        os.environ.setdefault(key, value.strip().strip("\"'"))


_load_env_file()


class TrackerSettings(BaseSettings):
    """Configuration for the Jira proxy and the Trello REST API."""

    model_config = SettingsConfigDict(populate_by_name=True)

    jira_proxy_base_url: str = Field(
        "http://localhost:8000",
        validation_alias="JIRA_PROXY_BASE_URL",
        description="Base URL of the service exposing the /api/jira proxy routes.",
    )
    trello_base_url: str = Field(
        "https://api.trello.com/1", validation_alias="TRELLO_BASE_URL"
    )
    timeout_seconds: float = Field(15.0, validation_alias="TRACKER_TIMEOUT_SECONDS")
    detail_concurrency: int = Field(
        4,
        ge=1,
        validation_alias="TRACKER_DETAIL_CONCURRENCY",
        description="Maximum number of item detail requests in flight at once.",
    )
    min_key_length: int = Field(32, validation_alias="TRACKER_MIN_KEY_LENGTH")
    jira_max_results: int = Field(50, validation_alias="JIRA_MAX_RESULTS")


class PersistenceSettings(BaseSettings):
    """Locations of the daily record API and the local SQLite files."""

    model_config = SettingsConfigDict(populate_by_name=True)

    daily_api_base_url: str = Field(
        "http://localhost:8000/", validation_alias="DAILY_API_BASE_URL"
    )
    database_path: str = Field(
        "data/daily_records.db", validation_alias="DAILY_RECORD_DB_PATH"
    )
    local_cache_path: str = Field(
        "data/local_state.db",
        validation_alias="LOCAL_CACHE_DB_PATH",
        description="Warm-start cache for the client-side daily record mapping.",
    )

    @field_validator("daily_api_base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        """Endpoint paths are joined onto the base URL without a leading slash."""
        return value if value.endswith("/") else f"{value}/"


class GeminiSettings(BaseSettings):
    """Configuration for Gemini model access."""

    model_config = SettingsConfigDict(populate_by_name=True)

    api_key: Optional[str] = Field(None, validation_alias="GEMINI_API_KEY")
    model_name: str = Field("gemini-1.5-pro", validation_alias="GEMINI_MODEL_NAME")


class GenerationSettings(BaseSettings):
    """Controls how report text is produced."""

    model_config = SettingsConfigDict(populate_by_name=True)

    use_remote_model: bool = Field(False, validation_alias="GENERATION_USE_REMOTE")
    simulated_latency_seconds: float = Field(
        2.0,
        ge=0,
        validation_alias="GENERATION_SIMULATED_LATENCY",
        description="Delay applied by the deterministic generator before resolving.",
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    cors_allowed_origins: str = Field(
        "*",
        validation_alias="CORS_ALLOWED_ORIGINS",
        description="Comma-separated browser origins allowed to call the API; * allows any.",
    )
    tracker: TrackerSettings = Field(default_factory=TrackerSettings)
    persistence: PersistenceSettings = Field(default_factory=PersistenceSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "GeminiSettings",
    "GenerationSettings",
    "PersistenceSettings",
    "TrackerSettings",
    "get_settings",
]
