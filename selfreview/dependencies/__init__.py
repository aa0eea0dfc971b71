"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    build_report_session,
    get_app_settings,
    get_daily_record_repository,
    get_gemini_client,
    get_report_generator,
    get_spreadsheet_importer,
    get_upstream_transport,
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
