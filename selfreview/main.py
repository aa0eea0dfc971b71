"""
FastAPI application entrypoint for the self-assessment report generator.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from selfreview.api.routes import router as api_router
from selfreview.core.config import AppSettings, get_settings
from selfreview.core.logging import configure_logging


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Factory for the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Self-Assessment Report Generator",
        version="0.1.0",
        description="Jira proxy, daily record persistence and report drafting API.",
    )
    # The browser front end calls the Jira proxy and daily record routes cross-origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
