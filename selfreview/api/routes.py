"""
FastAPI routes for the self-assessment report generator.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from selfreview.core.errors import GenerationError, ParseError, ValidationError
from selfreview.dependencies import get_report_generator, get_spreadsheet_importer
from selfreview.schemas import (
    AppState,
    FileImportResult,
    FileUploadState,
    GeneratedReport,
    ReportExportRequest,
    ReportGenerationRequest,
    ReportSource,
    TrackerConnectionState,
    UserInput,
)
from selfreview.services import (
    ReportGenerator,
    SpreadsheetImporter,
    has_data_to_generate,
    report_filename,
    run_report_graph,
)

from .daily_records import router as daily_records_router
from .jira_proxy import router as jira_proxy_router

router = APIRouter()
router.include_router(jira_proxy_router)
router.include_router(daily_records_router)
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post("/files/parse", response_model=FileImportResult)
async def parse_file(
    importer: Annotated[SpreadsheetImporter, Depends(get_spreadsheet_importer)],
    file: UploadFile = File(...),
) -> FileImportResult:
    """Parse an uploaded Excel/CSV file into rows and sheet metadata."""
    content = await file.read()
    try:
        return importer.parse(file.filename or "upload", content, file.content_type)
    except ValidationError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNSUPPORTED_MEDIA_TYPE, detail=str(exc)
        ) from exc
    except ParseError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


def _snapshot_from_request(payload: ReportGenerationRequest) -> AppState:
    tracker = TrackerConnectionState(
        platform=payload.tracker_platform,
        connected=payload.tracker_data is not None,
        data=payload.tracker_data,
    )
    upload = FileUploadState(
        file_name=payload.file_data.file_name if payload.file_data else None,
        uploaded=payload.file_data is not None,
        parsed=payload.file_data is not None,
        data=payload.file_data,
    )
    return AppState(
        user_input=UserInput(
            user_name=payload.user_name,
            job_name=payload.job_name,
            daily_records=payload.daily_records,
            tracker=tracker,
            file_upload=upload,
        )
    )


@router.post("/reports/generate", response_model=GeneratedReport)
async def generate_report(
    payload: ReportGenerationRequest,
    generator: Annotated[ReportGenerator, Depends(get_report_generator)],
) -> GeneratedReport:
    """Aggregate the submitted evidence and return a draft report."""
    snapshot = _snapshot_from_request(payload)
    if not has_data_to_generate(snapshot):
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail="Provide at least one data source to generate a report",
        )

    try:
        content = await run_report_graph(snapshot, generator)
    except ValidationError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc)) from exc
    except GenerationError as exc:
        logger.error("Report generation failed: %s", exc)
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(exc)) from exc

    return GeneratedReport(
        id=f"report-{uuid.uuid4().hex}",
        timestamp=datetime.now(timezone.utc).isoformat(),
        content=content,
        source=ReportSource(
            daily_record=bool(payload.daily_records),
            tracker_platform=payload.tracker_platform,
            file_uploaded=payload.file_data is not None,
        ),
    )


@router.post("/reports/export")
async def export_report(payload: ReportExportRequest) -> Response:
    """Return the report body as a downloadable Markdown file."""
    filename = report_filename()
    return Response(
        content=payload.content,
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


__all__ = ["router"]
