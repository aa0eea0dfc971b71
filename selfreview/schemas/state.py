"""
Immutable snapshots of the application state driven by the reducer.
"""

from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .daily import DailyRecordEntry
from .files import FileImportResult
from .report import GeneratedReport
from .tracker import TrackerData, TrackerPlatform

TabType = Literal["daily", "api", "file"]


class TrackerConnectionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    platform: Optional[TrackerPlatform] = None
    api_key: str = ""
    token: str = ""
    email: str = ""
    domain: str = ""
    connected: bool = False
    data: Optional[TrackerData] = None


class FileUploadState(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: Optional[str] = None
    uploaded: bool = False
    parsed: bool = False
    data: Optional[FileImportResult] = None


class UserInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_name: str = ""
    job_name: str = ""
    daily_records: Dict[str, DailyRecordEntry] = Field(default_factory=dict)
    tracker: TrackerConnectionState = Field(default_factory=TrackerConnectionState)
    file_upload: FileUploadState = Field(default_factory=FileUploadState)


class AppState(BaseModel):
    """Root snapshot. Replaced as a whole on every transition."""

    model_config = ConfigDict(frozen=True)

    current_tab: TabType = "daily"
    user_input: UserInput = Field(default_factory=UserInput)
    is_generating: bool = False
    generated_reports: Tuple[GeneratedReport, ...] = ()
    current_report: Optional[GeneratedReport] = None
    error: Optional[str] = None


__all__ = [
    "AppState",
    "FileUploadState",
    "TabType",
    "TrackerConnectionState",
    "UserInput",
]
