"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Optional

import httpx

from selfreview.clients import (
    DailyRecordApiClient,
    GeminiClient,
    JiraClient,
    SQLiteStore,
    TrelloClient,
)
from selfreview.core.config import AppSettings, get_settings
from selfreview.services import (
    DailyRecordRepository,
    DailyRecordStore,
    ReportGenerator,
    ReportSession,
    SpreadsheetImporter,
    StateStore,
)


@lru_cache()
def _settings() -> AppSettings:
    """Internal helper to cache settings for client factories."""
    return get_settings()


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return _settings()


@lru_cache()
def get_gemini_client() -> Optional[GeminiClient]:
    """Provide a Gemini client when an API key is configured."""
    settings = _settings()
    if not settings.gemini.api_key:
        return None
    return GeminiClient(settings.gemini)


@lru_cache()
def get_report_generator() -> ReportGenerator:
    settings = _settings()
    gemini = get_gemini_client() if settings.generation.use_remote_model else None
    return ReportGenerator(settings.generation, gemini)


@lru_cache()
def get_spreadsheet_importer() -> SpreadsheetImporter:
    return SpreadsheetImporter()


@lru_cache()
def get_daily_record_repository() -> DailyRecordRepository:
    """Provide the SQLite repository behind the daily record endpoints."""
    settings = _settings()
    return DailyRecordRepository(settings.persistence.database_path)


def get_upstream_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport used by the Jira proxy; ``None`` means the default network stack."""
    return None


def build_report_session(
    settings: Optional[AppSettings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    use_cache: bool = True,
) -> ReportSession:
    """Wire a fresh session with real adapters, importer and persistence client."""
    settings = settings or _settings()
    cache = SQLiteStore(settings.persistence.local_cache_path) if use_cache else None
    daily_client = DailyRecordApiClient(
        settings.persistence,
        timeout=settings.tracker.timeout_seconds,
        transport=transport,
    )
    gemini = (
        GeminiClient(settings.gemini)
        if settings.generation.use_remote_model and settings.gemini.api_key
        else None
    )
    return ReportSession(
        store=StateStore(cache=cache),
        adapters={
            "jira": JiraClient(settings.tracker, transport=transport),
            "trello": TrelloClient(settings.tracker, transport=transport),
        },
        importer=SpreadsheetImporter(),
        daily_records=DailyRecordStore(daily_client),
        generator=ReportGenerator(settings.generation, gemini),
    )


__all__ = [
    "build_report_session",
    "get_app_settings",
    "get_daily_record_repository",
    "get_gemini_client",
    "get_report_generator",
    "get_spreadsheet_importer",
    "get_upstream_transport",
]
