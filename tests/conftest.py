"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - fallback for rootdir-less execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from selfreview.schemas import (
    BoardTrackerData,
    DailyRecordEntry,
    IssueTrackerData,
    TrackerBoard,
    TrackerCard,
    TrackerIssue,
    TrackerList,
    TrackerProject,
    TrackerUser,
)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


def make_issue(key: str, status: str, *, description: str = "", assigned: bool = True) -> TrackerIssue:
    return TrackerIssue(
        id=key.lower(),
        key=key,
        title=f"Work on {key}",
        description=description,
        status=status,
        project_key=key.split("-")[0],
        project_name="Platform",
        assigned_to_caller=assigned,
    )


@pytest.fixture
def jira_data() -> IssueTrackerData:
    issues = [
        make_issue("PLAT-1", "Done", description="Shipped the login page"),
        make_issue("PLAT-2", "In Progress"),
        make_issue("PLAT-3", "Open"),
        make_issue("PLAT-4", "Cancelled"),
    ]
    return IssueTrackerData(
        user=TrackerUser(id="acc-1", username="alex@example.com", display_name="Alex"),
        projects=[TrackerProject(id="10", key="PLAT", name="Platform", issues=issues)],
        issues=issues,
    )


@pytest.fixture
def trello_data() -> BoardTrackerData:
    cards = [
        TrackerCard(id="c1", name="Write docs", completed=True, list_name="Done", assigned_to_caller=True),
        TrackerCard(id="c2", name="Fix bug", list_name="Doing", assigned_to_caller=True),
        TrackerCard(id="c3", name="Plan sprint", list_name="To Do", assigned_to_caller=True),
        TrackerCard(id="c4", name="Someone else's", list_name="Doing"),
    ]
    board = TrackerBoard(
        id="b1",
        name="Team board",
        lists=[
            TrackerList(id="l1", name="Done", cards=[cards[0]]),
            TrackerList(id="l2", name="Doing", cards=[cards[1], cards[3]]),
            TrackerList(id="l3", name="To Do", cards=[cards[2]]),
        ],
    )
    return BoardTrackerData(
        user=TrackerUser(id="m1", username="alex", display_name="Alex"),
        boards=[board],
        cards=cards,
    )


@pytest.fixture
def daily_records() -> dict[str, DailyRecordEntry]:
    return {
        "2025-01-01": DailyRecordEntry(date="2025-01-01", content="Planned the quarter"),
        "2025-01-03": DailyRecordEntry(date="2025-01-03", content="Reviewed pull requests"),
        "2025-01-02": DailyRecordEntry(date="2025-01-02", content="Paired on billing"),
    }
