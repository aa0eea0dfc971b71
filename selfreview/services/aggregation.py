"""
Pure aggregation of the collected evidence into a single normalized input.

Nothing in this module performs I/O; it reads a state snapshot and returns
fresh models.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from selfreview.core.errors import ValidationError
from selfreview.schemas import (
    AppState,
    BoardStatus,
    BoardStyleSummary,
    BoardTrackerData,
    DailyRecordEntry,
    DataSources,
    IssueStats,
    IssueStyleSummary,
    IssueTrackerData,
    NormalizedInput,
    ProcessedTrackerData,
    TrackerData,
)

COMPLETED_STATUSES = frozenset({"Done", "Closed", "Resolved"})


def sort_daily_records(records: Iterable[DailyRecordEntry]) -> List[DailyRecordEntry]:
    """Newest first. ISO dates compare correctly as strings."""
    return sorted(records, key=lambda record: record.date, reverse=True)


def process_tracker_data(
    platform: Optional[str], data: Optional[TrackerData]
) -> Optional[ProcessedTrackerData]:
    """Classify raw tracker data by platform, recomputing every count."""
    if not platform or data is None:
        return None

    if platform == "trello":
        if not isinstance(data, BoardTrackerData):
            raise ValidationError("Trello was selected but the tracker data is not board-style")
        return BoardStyleSummary(
            cards=list(data.cards),
            boards=list(data.boards),
            status=BoardStatus(
                total_cards=len(data.cards),
                completed_cards=sum(1 for card in data.cards if card.completed),
                total_boards=len(data.boards),
            ),
        )

    if platform == "jira":
        if not isinstance(data, IssueTrackerData):
            raise ValidationError("Jira was selected but the tracker data is not issue-style")
        return IssueStyleSummary(
            issues=list(data.issues),
            projects=list(data.projects),
            stats=IssueStats(
                total_issues=len(data.issues),
                completed_issues=sum(
                    1 for issue in data.issues if issue.status in COMPLETED_STATUSES
                ),
                total_projects=len(data.projects),
            ),
        )

    raise ValidationError(f"Unsupported tracker platform: {platform}")


def aggregate(state: AppState) -> NormalizedInput:
    """Build the normalized generation input from a state snapshot."""
    user_input = state.user_input
    daily_records = sort_daily_records(user_input.daily_records.values())
    tracker_summary = process_tracker_data(
        user_input.tracker.platform, user_input.tracker.data
    )
    file_data = user_input.file_upload.data

    return NormalizedInput(
        daily_records=daily_records,
        tracker_summary=tracker_summary,
        file_data=file_data,
        data_sources=DataSources(
            has_daily_records=bool(daily_records),
            has_tracker_data=tracker_summary is not None,
            has_file_data=file_data is not None,
        ),
    )


def has_data_to_generate(state: AppState) -> bool:
    """True when at least one evidence source is ready for generation."""
    user_input = state.user_input
    tracker = user_input.tracker
    upload = user_input.file_upload
    return (
        bool(user_input.daily_records)
        or (tracker.connected and tracker.data is not None)
        or (upload.uploaded and upload.parsed and upload.data is not None)
    )


__all__ = [
    "COMPLETED_STATUSES",
    "aggregate",
    "has_data_to_generate",
    "process_tracker_data",
    "sort_daily_records",
]
