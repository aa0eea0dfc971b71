try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from selfreview.core.errors import ValidationError
from selfreview.schemas import (
    AppState,
    BoardStyleSummary,
    FileImportResult,
    FileImportSummary,
    FileUploadState,
    IssueStyleSummary,
    TrackerConnectionState,
    UserInput,
)
from selfreview.services.aggregation import (
    aggregate,
    has_data_to_generate,
    process_tracker_data,
)


def _state(**user_input) -> AppState:
    return AppState(user_input=UserInput(**user_input))


def test_daily_records_sorted_newest_first(daily_records):
    result = aggregate(_state(daily_records=daily_records))

    assert [record.date for record in result.daily_records] == [
        "2025-01-03",
        "2025-01-02",
        "2025-01-01",
    ]
    assert result.data_sources.has_daily_records is True
    assert result.data_sources.has_tracker_data is False
    assert result.data_sources.has_file_data is False


def test_two_record_ordering(daily_records):
    subset = {key: daily_records[key] for key in ("2025-01-02", "2025-01-01")}
    result = aggregate(_state(daily_records=subset))
    assert [record.date for record in result.daily_records] == ["2025-01-02", "2025-01-01"]


def test_empty_state_produces_empty_input():
    result = aggregate(AppState())

    assert result.daily_records == []
    assert result.tracker_summary is None
    assert result.file_data is None
    assert result.data_sources.model_dump() == {
        "has_daily_records": False,
        "has_tracker_data": False,
        "has_file_data": False,
    }


def test_jira_summary_recomputes_counts(jira_data):
    summary = process_tracker_data("jira", jira_data)

    assert isinstance(summary, IssueStyleSummary)
    assert summary.type == "issueStyle"
    assert summary.stats.total_issues == len(jira_data.issues) == 4
    assert summary.stats.completed_issues == 1
    assert summary.stats.total_projects == 1


def test_trello_summary_recomputes_counts(trello_data):
    summary = process_tracker_data("trello", trello_data)

    assert isinstance(summary, BoardStyleSummary)
    assert summary.status.total_cards == 4
    assert summary.status.completed_cards == 1
    assert summary.status.total_boards == 1


def test_platform_without_data_yields_no_summary():
    state = _state(tracker=TrackerConnectionState(platform="jira", connected=False))
    result = aggregate(state)
    assert result.tracker_summary is None
    assert result.data_sources.has_tracker_data is False


def test_platform_data_mismatch_is_rejected(trello_data):
    with pytest.raises(ValidationError):
        process_tracker_data("jira", trello_data)


def test_has_data_to_generate_requires_a_ready_source(jira_data, daily_records):
    assert has_data_to_generate(AppState()) is False

    # Selected but not connected does not count.
    not_connected = _state(tracker=TrackerConnectionState(platform="jira", data=jira_data))
    assert has_data_to_generate(not_connected) is False

    connected = _state(
        tracker=TrackerConnectionState(platform="jira", connected=True, data=jira_data)
    )
    assert has_data_to_generate(connected) is True

    assert has_data_to_generate(_state(daily_records=daily_records)) is True


def test_file_counts_only_when_uploaded_and_parsed():
    data = FileImportResult(
        file_name="tasks.csv",
        file_type="text/csv",
        headers=["Task"],
        main_data=[{"Task": "Write tests"}],
        summary=FileImportSummary(total_rows=1, total_sheets=1),
    )
    unparsed = _state(file_upload=FileUploadState(uploaded=True, parsed=False, data=data))
    parsed = _state(file_upload=FileUploadState(uploaded=True, parsed=True, data=data))

    assert has_data_to_generate(unparsed) is False
    assert has_data_to_generate(parsed) is True
    assert aggregate(parsed).data_sources.has_file_data is True
