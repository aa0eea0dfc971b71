"""
Deterministic Markdown rendering of a normalized input.

The output doubles as the skeleton handed to Gemini when remote generation is
enabled, so section headings here are the contract every generator honours.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence, Tuple

from selfreview.schemas import (
    BoardStyleSummary,
    DailyRecordEntry,
    IssueStyleSummary,
    NormalizedInput,
    ProcessedTrackerData,
    TrackerCard,
    TrackerIssue,
)
from .aggregation import COMPLETED_STATUSES

Bucket = Literal["completed", "in_progress", "pending"]

IN_PROGRESS_STATUSES = frozenset({"In Progress", "In Review"})
PENDING_STATUSES = frozenset({"To Do", "Open", "New"})

DESCRIPTION_LIMIT = 100
DAILY_PREVIEW_COUNT = 3
DEFAULT_COMPLETION_RATE = 95

FUTURE_GOALS: Tuple[str, ...] = (
    "Continue improving the existing systems",
    "Learn new technical frameworks",
    "Improve communication efficiency across the team",
)

_BUCKET_TITLES = {
    "completed": ("Completed", "completed"),
    "in_progress": ("In Progress", "in-progress"),
    "pending": ("Pending", "pending"),
}


@dataclass
class TrackerBreakdown:
    """Assigned tracker items split into buckets, as rendered lines."""

    completed: List[str] = field(default_factory=list)
    in_progress: List[str] = field(default_factory=list)
    pending: List[str] = field(default_factory=list)
    total_assigned: int = 0

    @property
    def completed_count(self) -> int:
        return len(self.completed)

    def lines_for(self, bucket: Bucket) -> List[str]:
        return getattr(self, bucket)


def classify_status(status: str) -> Optional[Bucket]:
    """Map a tracker status to its bucket; unknown statuses map to ``None``."""
    if status in COMPLETED_STATUSES:
        return "completed"
    if status in IN_PROGRESS_STATUSES:
        return "in_progress"
    if status in PENDING_STATUSES:
        return "pending"
    return None


def classify_card(card: TrackerCard) -> Bucket:
    if card.completed:
        return "completed"
    if card.list_name in PENDING_STATUSES:
        return "pending"
    return "in_progress"


def truncate_description(description: Optional[str]) -> str:
    if not description:
        return "No description"
    if len(description) > DESCRIPTION_LIMIT:
        return description[:DESCRIPTION_LIMIT] + "..."
    return description


def completion_percentage(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    # Half-up rounding; the builtin round() would send 50.5 to 50.
    return int(100 * completed / total + 0.5)


def rate_performance(completion_rate: int) -> Tuple[str, str]:
    """Return ``(work quality, collaboration)`` ratings for a completion rate."""
    if completion_rate < 70:
        return "Needs improvement", "Average"
    if completion_rate < 85:
        return "Good", "Good"
    return "Excellent", "Excellent"


def _issue_line(issue: TrackerIssue) -> str:
    return f"- **{issue.key}: {issue.title}**: {truncate_description(issue.description)}"


def _card_line(card: TrackerCard) -> str:
    return f"- **{card.name}**: {truncate_description(card.description)}"


def breakdown_tracker(summary: ProcessedTrackerData) -> TrackerBreakdown:
    breakdown = TrackerBreakdown()
    if isinstance(summary, IssueStyleSummary):
        assigned_issues = [issue for issue in summary.issues if issue.assigned_to_caller]
        breakdown.total_assigned = len(assigned_issues)
        for issue in assigned_issues:
            bucket = classify_status(issue.status)
            if bucket is not None:
                breakdown.lines_for(bucket).append(_issue_line(issue))
    else:
        assigned_cards = [card for card in summary.cards if card.assigned_to_caller]
        breakdown.total_assigned = len(assigned_cards)
        for card in assigned_cards:
            breakdown.lines_for(classify_card(card)).append(_card_line(card))
    return breakdown


def render_daily_records(records: Sequence[DailyRecordEntry]) -> str:
    lines = ["### Daily Work Summary"]
    for index, record in enumerate(records, start=1):
        lines.append(f"- Record {index}: {record.content}")
    if len(records) > DAILY_PREVIEW_COUNT:
        lines.append(f"- ...and {len(records) - DAILY_PREVIEW_COUNT} more work items")
    return "\n".join(lines)


def render_tracker_summary(summary: ProcessedTrackerData) -> str:
    platform = "Trello" if isinstance(summary, BoardStyleSummary) else "Jira"
    breakdown = breakdown_tracker(summary)

    lines = [f"### {platform} Work Summary", ""]
    for bucket in ("completed", "in_progress", "pending"):
        heading, label = _BUCKET_TITLES[bucket]
        lines.append(f"#### {heading}")
        entries = breakdown.lines_for(bucket)
        lines.extend(entries or [f"- No {label} work items"])
        lines.append("")

    lines.append("#### Statistics")
    lines.append(f"- Total assigned: {breakdown.total_assigned}")
    lines.append(f"- Completed: {breakdown.completed_count}")
    rate = completion_percentage(breakdown.completed_count, breakdown.total_assigned)
    lines.append(f"- Completion rate: {rate}%")
    return "\n".join(lines)


def overall_completion_rate(summary: Optional[ProcessedTrackerData]) -> int:
    if summary is None:
        return DEFAULT_COMPLETION_RATE
    breakdown = breakdown_tracker(summary)
    if breakdown.total_assigned == 0:
        return DEFAULT_COMPLETION_RATE
    return completion_percentage(breakdown.completed_count, breakdown.total_assigned)


def render_performance(summary: Optional[ProcessedTrackerData]) -> str:
    rate = overall_completion_rate(summary)
    quality, collaboration = rate_performance(rate)
    return "\n".join(
        [
            "### Performance Evaluation",
            f"- Task completion: {rate}%",
            f"- Work quality: {quality}",
            f"- Collaboration: {collaboration}",
        ]
    )


def synthesize(data: NormalizedInput) -> str:
    """Render the full self-assessment report as Markdown."""
    sections = ["## Self-Assessment Report"]

    if data.daily_records:
        sections.append(render_daily_records(data.daily_records))

    if data.tracker_summary is not None:
        sections.append(render_tracker_summary(data.tracker_summary))

    if data.file_data is not None:
        sections.append(
            "### File Data Analysis\n"
            f"- Imported {data.file_data.summary.total_rows} rows from "
            f"{data.file_data.file_name}; detailed file analysis is not available yet."
        )

    sections.append(render_performance(data.tracker_summary))
    sections.append(
        "### Future Goals\n" + "\n".join(f"- {goal}" for goal in FUTURE_GOALS)
    )
    return "\n\n".join(sections) + "\n"


__all__ = [
    "COMPLETED_STATUSES",
    "DEFAULT_COMPLETION_RATE",
    "FUTURE_GOALS",
    "IN_PROGRESS_STATUSES",
    "PENDING_STATUSES",
    "TrackerBreakdown",
    "breakdown_tracker",
    "classify_card",
    "classify_status",
    "completion_percentage",
    "overall_completion_rate",
    "rate_performance",
    "synthesize",
    "truncate_description",
]
