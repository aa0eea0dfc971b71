"""
Pydantic models for daily work records and their persistence payloads.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
YEAR_MONTH_PATTERN = r"^\d{4}-\d{2}$"


class DailyRecordEntry(BaseModel):
    """Free-text work log for a single day."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(..., pattern=ISO_DATE_PATTERN, description="YYYY-MM-DD.")
    content: str = Field(..., description="What the user worked on that day.")


class StoredDailyRecord(DailyRecordEntry):
    """Daily record as returned by the persistence API."""

    id: int = Field(..., description="Row identifier used by the delete endpoint.")


class DailyRecordBatch(BaseModel):
    """Body of the create endpoint: upsert records for one owner."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Owner of the records.")
    daily_records: List[DailyRecordEntry] = Field(
        default_factory=list, alias="dailyRecords"
    )


class DailyRecordListing(BaseModel):
    """Response of the read endpoint, keyed by date."""

    data: Dict[str, StoredDailyRecord] = Field(default_factory=dict)


class ClearDailyRequest(BaseModel):
    """Body of the bulk-clear endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    year_month: str = Field(..., pattern=YEAR_MONTH_PATTERN, alias="yearMonth")
    user_name: str = Field(..., min_length=1, alias="userName")


__all__ = [
    "ClearDailyRequest",
    "DailyRecordBatch",
    "DailyRecordEntry",
    "DailyRecordListing",
    "StoredDailyRecord",
]
