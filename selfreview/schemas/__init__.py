"""Public schema exports."""

from .daily import (
    ClearDailyRequest,
    DailyRecordBatch,
    DailyRecordEntry,
    DailyRecordListing,
    StoredDailyRecord,
)
from .files import FileImportResult, FileImportSummary, SheetInfo
from .report import (
    DataSources,
    GeneratedReport,
    NormalizedInput,
    ReportExportRequest,
    ReportGenerationRequest,
    ReportSource,
)
from .state import (
    AppState,
    FileUploadState,
    TabType,
    TrackerConnectionState,
    UserInput,
)
from .tracker import (
    BoardStatus,
    BoardStyleSummary,
    BoardTrackerData,
    IssueStats,
    IssueStyleSummary,
    IssueTrackerData,
    ProcessedTrackerData,
    TrackerBoard,
    TrackerCard,
    TrackerCredentials,
    TrackerData,
    TrackerIssue,
    TrackerList,
    TrackerPlatform,
    TrackerProject,
    TrackerUser,
)

__all__ = [
    "AppState",
    "BoardStatus",
    "BoardStyleSummary",
    "BoardTrackerData",
    "ClearDailyRequest",
    "DailyRecordBatch",
    "DailyRecordEntry",
    "DailyRecordListing",
    "DataSources",
    "FileImportResult",
    "FileImportSummary",
    "FileUploadState",
    "GeneratedReport",
    "IssueStats",
    "IssueStyleSummary",
    "IssueTrackerData",
    "NormalizedInput",
    "ProcessedTrackerData",
    "ReportExportRequest",
    "ReportGenerationRequest",
    "ReportSource",
    "SheetInfo",
    "StoredDailyRecord",
    "TabType",
    "TrackerBoard",
    "TrackerCard",
    "TrackerConnectionState",
    "TrackerCredentials",
    "TrackerData",
    "TrackerIssue",
    "TrackerList",
    "TrackerPlatform",
    "TrackerProject",
    "TrackerUser",
    "UserInput",
]
