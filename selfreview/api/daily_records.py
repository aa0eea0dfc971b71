"""
Persistence endpoints for per-user daily work records.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from selfreview.dependencies import get_daily_record_repository
from selfreview.schemas import ClearDailyRequest, DailyRecordBatch, DailyRecordListing
from selfreview.services import DailyRecordRepository

router = APIRouter(tags=["daily-records"])
logger = logging.getLogger(__name__)

Repository = Annotated[DailyRecordRepository, Depends(get_daily_record_repository)]


@router.post("/createdaily", status_code=HTTPStatus.OK)
async def create_daily_records(payload: DailyRecordBatch, repository: Repository) -> dict:
    """Insert or overwrite the submitted records for ``payload.name``."""
    saved = repository.upsert_many(payload.name, payload.daily_records)
    logger.info("Saved %d daily records for %s", saved, payload.name)
    return {"status": "saved", "saved": saved}


@router.get("/getdaily", response_model=DailyRecordListing)
async def get_daily_records(
    repository: Repository,
    name: str = Query(..., min_length=1),
) -> DailyRecordListing:
    return DailyRecordListing(data=repository.list_for(name))


@router.delete("/deletedaily")
async def delete_daily_record(repository: Repository, id: int = Query(...)):
    if not repository.delete(id):
        return JSONResponse(
            status_code=HTTPStatus.NOT_FOUND, content={"error": "record not found"}
        )
    return {"status": "deleted", "id": id}


@router.post("/cleardaily")
async def clear_daily_records(payload: ClearDailyRequest, repository: Repository) -> dict:
    deleted = repository.clear_month(payload.user_name, payload.year_month)
    logger.info(
        "Cleared %d daily records in %s for %s", deleted, payload.year_month, payload.user_name
    )
    return {"status": "cleared", "deleted": deleted}


__all__ = ["router"]
