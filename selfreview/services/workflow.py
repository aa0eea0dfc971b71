"""
Session layer coordinating the state store with adapters, the importer, the
daily record store and the report generator.

Every public coroutine returns an ``OperationResult``; errors raised below this
layer are logged and collapsed into a single user-facing message.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from selfreview.clients.tracker import TrackerAdapter
from selfreview.core.errors import (
    AuthError,
    GenerationError,
    NetworkError,
    ParseError,
    ReportError,
    UpstreamError,
    ValidationError,
)
from selfreview.schemas import (
    AppState,
    GeneratedReport,
    ReportSource,
    TrackerCredentials,
)

from .aggregation import has_data_to_generate
from .daily_records import DailyRecordStore
from .report_export import write_report
from .report_generator import ReportGenerator
from .report_graph import create_report_graph, run_report_graph
from .spreadsheet_import import SUPPORTED_EXTENSIONS, SpreadsheetImporter
from .state_store import Action, ActionType, StateStore

logger = logging.getLogger(__name__)

_PLATFORMS = ("jira", "trello")

_ERROR_PREFIXES = {
    ValidationError: "Invalid input",
    AuthError: "Authentication failed",
    UpstreamError: "Remote service error",
    NetworkError: "Network error",
    ParseError: "Could not read file",
    GenerationError: "Report generation failed",
}


@dataclass(frozen=True)
class OperationResult:
    ok: bool
    message: str = ""


def describe_error(exc: BaseException) -> str:
    """One-line message for the user; the most specific error class wins."""
    for error_type in type(exc).__mro__:
        prefix = _ERROR_PREFIXES.get(error_type)
        if prefix:
            return f"{prefix}: {exc}"
    return f"Unexpected error: {exc}"


class ReportSession:
    """One user's evidence collection and report drafting session."""

    def __init__(
        self,
        *,
        store: StateStore,
        adapters: Dict[str, TrackerAdapter],
        importer: SpreadsheetImporter,
        daily_records: DailyRecordStore,
        generator: ReportGenerator,
    ) -> None:
        self._store = store
        self._adapters = adapters
        self._importer = importer
        self._daily_records = daily_records
        self._generator = generator
        self._graph = create_report_graph(generator)
        self._platform_epoch = 0
        self._records_version = 0
        self._daily_records.owner = store.state.user_input.user_name

    @property
    def state(self) -> AppState:
        return self._store.state

    @property
    def can_generate(self) -> bool:
        return not self.state.is_generating and has_data_to_generate(self.state)

    def _dispatch(self, action_type: ActionType, payload: Any = None) -> AppState:
        return self._store.dispatch(Action(action_type, payload))

    def _fail(self, operation: str, exc: BaseException) -> OperationResult:
        message = describe_error(exc)
        logger.warning("%s failed: %s", operation, message)
        return OperationResult(False, message)

    # Profile & navigation

    def set_tab(self, tab: str) -> OperationResult:
        try:
            self._dispatch(ActionType.SET_TAB, tab)
        except ValidationError as exc:
            return self._fail("set_tab", exc)
        return OperationResult(True)

    def set_profile(self, user_name: str, job_name: str = "") -> OperationResult:
        self._dispatch(ActionType.SET_USER_NAME, user_name.strip())
        self._dispatch(ActionType.SET_USER_JOB, job_name.strip())
        self._daily_records.owner = user_name.strip()
        return OperationResult(True)

    # Tracker

    def select_platform(self, platform: Optional[str]) -> OperationResult:
        if platform is not None and platform not in _PLATFORMS:
            return self._fail(
                "select_platform", ValidationError(f"Unsupported platform {platform!r}")
            )
        self._platform_epoch += 1
        self._dispatch(ActionType.SET_PLATFORM, platform)
        return OperationResult(True)

    def set_credentials(
        self,
        *,
        api_key: Optional[str] = None,
        token: Optional[str] = None,
        email: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> OperationResult:
        if api_key is not None:
            self._dispatch(ActionType.SET_API_KEY, api_key.strip())
        if token is not None:
            self._dispatch(ActionType.SET_TOKEN_KEY, token.strip())
        account = {
            key: value.strip()
            for key, value in (("email", email), ("domain", domain))
            if value is not None
        }
        if account:
            self._dispatch(ActionType.SET_TRACKER_ACCOUNT, account)
        return OperationResult(True)

    async def connect_tracker(self) -> OperationResult:
        """Verify credentials, then pull the full tracker graph into state."""
        tracker = self.state.user_input.tracker
        if tracker.platform is None:
            return self._fail("connect_tracker", ValidationError("Select a platform first"))

        adapter = self._adapters[tracker.platform]
        credentials = TrackerCredentials(
            platform=tracker.platform,
            api_key=tracker.api_key,
            token=tracker.token,
            email=tracker.email or None,
            domain=tracker.domain or None,
        )
        epoch = self._platform_epoch
        try:
            await adapter.connect(credentials)
            data = await adapter.fetch_all(credentials)
        except AuthError as exc:
            if epoch == self._platform_epoch:
                self._dispatch(ActionType.CONNECT_PLATFORM, False)
            return self._fail("connect_tracker", exc)
        except ReportError as exc:
            return self._fail("connect_tracker", exc)

        if epoch != self._platform_epoch:
            logger.info("Discarding %s result; platform changed mid-request", tracker.platform)
            return OperationResult(False, "Platform selection changed; result discarded")

        self._dispatch(ActionType.CONNECT_API_SUCCESS, {"connected": True, "data": data})
        return OperationResult(True, f"Connected to {tracker.platform}")

    # File upload

    def import_file(
        self, file_name: str, content: bytes, content_type: Optional[str] = None
    ) -> OperationResult:
        if Path(file_name).suffix.lower() not in SUPPORTED_EXTENSIONS:
            return self._fail(
                "import_file",
                ValidationError("Upload a valid Excel (.xlsx, .xlsm, .xls) or CSV file"),
            )

        self._dispatch(ActionType.SET_FILE, file_name)
        self._dispatch(ActionType.SET_FILE_UPLOADED, True)
        try:
            result = self._importer.parse(file_name, content, content_type)
        except ReportError as exc:
            self._dispatch(ActionType.SET_FILE_DATA, None)
            self._dispatch(ActionType.SET_FILE_PARSED, False)
            return self._fail("import_file", exc)

        self._dispatch(ActionType.SET_FILE_DATA, result)
        self._dispatch(ActionType.SET_FILE_PARSED, True)
        return OperationResult(True, f"Parsed {result.summary.total_rows} rows")

    # Daily records

    def _sync_daily_records(self) -> None:
        # Only publish a mapping newer than the last one dispatched.
        version = self._daily_records.version
        if version <= self._records_version:
            return
        self._records_version = version
        self._dispatch(ActionType.SET_DAILY_RECORDS, self._daily_records.records)

    async def load_daily_records(self) -> OperationResult:
        try:
            await self._daily_records.refresh()
        except ReportError as exc:
            return self._fail("load_daily_records", exc)
        self._sync_daily_records()
        count = len(self.state.user_input.daily_records)
        return OperationResult(True, f"Loaded {count} daily records")

    async def save_daily_record(self, date: str, content: str) -> OperationResult:
        try:
            await self._daily_records.add(date, content)
        except ReportError as exc:
            return self._fail("save_daily_record", exc)
        self._sync_daily_records()
        return OperationResult(True)

    async def delete_daily_record(self, date: str) -> OperationResult:
        try:
            await self._daily_records.remove(date)
        except ReportError as exc:
            return self._fail("delete_daily_record", exc)
        self._sync_daily_records()
        return OperationResult(True)

    async def clear_month(self, year_month: str) -> OperationResult:
        try:
            await self._daily_records.clear_range(year_month)
        except ReportError as exc:
            return self._fail("clear_month", exc)
        self._sync_daily_records()
        return OperationResult(True)

    # Reports

    async def generate_report(self) -> OperationResult:
        snapshot = self.state
        if snapshot.is_generating:
            return OperationResult(False, "A report is already being generated")
        if not snapshot.user_input.user_name.strip():
            return self._fail("generate_report", ValidationError("Enter your name first"))
        if not has_data_to_generate(snapshot):
            return self._fail(
                "generate_report",
                ValidationError("Provide at least one data source to generate a report"),
            )

        snapshot = self._dispatch(ActionType.START_GENERATION)
        try:
            content = await run_report_graph(snapshot, self._generator, graph=self._graph)
        except Exception as exc:  # surfaced through state.error
            if not isinstance(exc, ReportError):
                logger.exception("Unexpected failure during report generation")
            message = describe_error(exc)
            self._dispatch(ActionType.GENERATION_ERROR, message)
            return OperationResult(False, message)

        user_input = snapshot.user_input
        report = GeneratedReport(
            id=f"report-{uuid.uuid4().hex}",
            timestamp=datetime.now(timezone.utc).isoformat(),
            content=content,
            source=ReportSource(
                daily_record=bool(user_input.daily_records),
                tracker_platform=user_input.tracker.platform,
                file_uploaded=user_input.file_upload.uploaded,
            ),
        )
        self._dispatch(ActionType.GENERATION_SUCCESS, report)
        logger.info("Generated report %s", report.id)
        return OperationResult(True, report.id)

    def edit_report(self, report_id: str, content: str) -> OperationResult:
        before = self.state
        after = self._dispatch(
            ActionType.UPDATE_REPORT_CONTENT, {"report_id": report_id, "content": content}
        )
        if after is before:
            return OperationResult(False, f"Report {report_id} is not the current report")
        return OperationResult(True)

    def export_report(self, directory: str | Path) -> OperationResult:
        report = self.state.current_report
        if report is None:
            return OperationResult(False, "No report to export")
        path = write_report(report.content, directory)
        return OperationResult(True, str(path))


__all__ = ["OperationResult", "ReportSession", "describe_error"]
