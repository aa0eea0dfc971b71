"""
Pydantic models for normalized generation input and generated reports.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .daily import DailyRecordEntry
from .files import FileImportResult
from .tracker import ProcessedTrackerData, TrackerData, TrackerPlatform


class DataSources(BaseModel):
    """Which evidence sources contributed to a generation request."""

    model_config = ConfigDict(frozen=True)

    has_daily_records: bool = False
    has_tracker_data: bool = False
    has_file_data: bool = False


class NormalizedInput(BaseModel):
    """Source-agnostic input consumed by report synthesis."""

    daily_records: List[DailyRecordEntry] = Field(
        default_factory=list, description="Sorted by date, newest first."
    )
    tracker_summary: Optional[ProcessedTrackerData] = None
    file_data: Optional[FileImportResult] = None
    data_sources: DataSources = Field(default_factory=DataSources)


class ReportSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    daily_record: bool = False
    tracker_platform: Optional[TrackerPlatform] = None
    file_uploaded: bool = False


class GeneratedReport(BaseModel):
    """A draft produced by one generation request."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str = Field(..., description="ISO-8601 creation time (UTC).")
    content: str
    source: ReportSource = Field(default_factory=ReportSource)
    status: Literal["draft", "final"] = "draft"


class ReportGenerationRequest(BaseModel):
    """Snapshot of the user's collected evidence submitted over HTTP."""

    user_name: str = Field(..., min_length=1)
    job_name: str = ""
    daily_records: Dict[str, DailyRecordEntry] = Field(default_factory=dict)
    tracker_platform: Optional[TrackerPlatform] = None
    tracker_data: Optional[TrackerData] = None
    file_data: Optional[FileImportResult] = None


class ReportExportRequest(BaseModel):
    content: str = Field(..., min_length=1)


__all__ = [
    "DataSources",
    "GeneratedReport",
    "NormalizedInput",
    "ReportExportRequest",
    "ReportGenerationRequest",
    "ReportSource",
]
