"""
Application state machine: a closed set of actions, a pure reducer, and the
single-writer store that holds the current snapshot.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, get_args

import pydantic

from selfreview.clients.sqlite_store import SQLiteStore
from selfreview.core.errors import ValidationError
from selfreview.schemas import (
    AppState,
    DailyRecordEntry,
    FileUploadState,
    GeneratedReport,
    TabType,
    TrackerConnectionState,
    UserInput,
)

logger = logging.getLogger(__name__)

DAILY_RECORDS_CACHE_KEY = "dailyRecords"


class ActionType(str, Enum):
    SET_TAB = "SET_TAB"
    SET_USER_NAME = "SET_USER_NAME"
    SET_USER_JOB = "SET_USER_JOB"
    ADD_DAILY_RECORD = "ADD_DAILY_RECORD"
    DELETE_DAILY_RECORD = "DELETE_DAILY_RECORD"
    SET_DAILY_RECORDS = "SET_DAILY_RECORDS"
    SET_PLATFORM = "SET_PLATFORM"
    SET_API_KEY = "SET_API_KEY"
    SET_TOKEN_KEY = "SET_TOKEN_KEY"
    SET_TRACKER_ACCOUNT = "SET_TRACKER_ACCOUNT"
    CONNECT_PLATFORM = "CONNECT_PLATFORM"
    CONNECT_API_SUCCESS = "CONNECT_API_SUCCESS"
    SET_FILE = "SET_FILE"
    SET_FILE_UPLOADED = "SET_FILE_UPLOADED"
    SET_FILE_DATA = "SET_FILE_DATA"
    SET_FILE_PARSED = "SET_FILE_PARSED"
    START_GENERATION = "START_GENERATION"
    GENERATION_SUCCESS = "GENERATION_SUCCESS"
    GENERATION_ERROR = "GENERATION_ERROR"
    UPDATE_REPORT_CONTENT = "UPDATE_REPORT_CONTENT"


@dataclass(frozen=True)
class Action:
    type: ActionType
    payload: Any = None


def _set_tab(state: AppState, tab: str) -> AppState:
    if tab not in get_args(TabType):
        raise ValidationError(f"Unknown tab {tab!r}")
    return state.model_copy(update={"current_tab": tab})


def _with_user_input(state: AppState, **changes: Any) -> AppState:
    return state.model_copy(
        update={"user_input": state.user_input.model_copy(update=changes)}
    )


def _with_tracker(state: AppState, **changes: Any) -> AppState:
    tracker = state.user_input.tracker.model_copy(update=changes)
    return _with_user_input(state, tracker=tracker)


def _with_upload(state: AppState, **changes: Any) -> AppState:
    upload = state.user_input.file_upload.model_copy(update=changes)
    return _with_user_input(state, file_upload=upload)


def _add_daily_record(state: AppState, entry: DailyRecordEntry) -> AppState:
    records = {**state.user_input.daily_records, entry.date: entry}
    return _with_user_input(state, daily_records=records)


def _delete_daily_record(state: AppState, date: str) -> AppState:
    records = {
        key: value for key, value in state.user_input.daily_records.items() if key != date
    }
    return _with_user_input(state, daily_records=records)


def _set_platform(state: AppState, platform: Optional[str]) -> AppState:
    # Credentials belong to one platform; switching discards them with the data.
    return _with_user_input(
        state, tracker=TrackerConnectionState(platform=platform or None)
    )


def _set_tracker_account(state: AppState, payload: Dict[str, str]) -> AppState:
    return _with_tracker(
        state,
        email=payload.get("email", state.user_input.tracker.email),
        domain=payload.get("domain", state.user_input.tracker.domain),
    )


def _connect_success(state: AppState, payload: Dict[str, Any]) -> AppState:
    return _with_tracker(
        state, connected=bool(payload.get("connected")), data=payload.get("data")
    )


def _generation_success(state: AppState, report: GeneratedReport) -> AppState:
    return state.model_copy(
        update={
            "is_generating": False,
            "current_report": report,
            "generated_reports": (*state.generated_reports, report),
        }
    )


def _update_report_content(state: AppState, payload: Dict[str, str]) -> AppState:
    current = state.current_report
    if current is None or current.id != payload.get("report_id"):
        return state
    updated = current.model_copy(update={"content": payload.get("content", "")})
    history = tuple(
        updated if report.id == updated.id else report for report in state.generated_reports
    )
    return state.model_copy(update={"current_report": updated, "generated_reports": history})


_Handler = Callable[[AppState, Any], AppState]

_HANDLERS: Dict[ActionType, _Handler] = {
    ActionType.SET_TAB: _set_tab,
    ActionType.SET_USER_NAME: lambda s, p: _with_user_input(s, user_name=p),
    ActionType.SET_USER_JOB: lambda s, p: _with_user_input(s, job_name=p),
    ActionType.ADD_DAILY_RECORD: _add_daily_record,
    ActionType.DELETE_DAILY_RECORD: _delete_daily_record,
    ActionType.SET_DAILY_RECORDS: lambda s, p: _with_user_input(s, daily_records=dict(p)),
    ActionType.SET_PLATFORM: _set_platform,
    ActionType.SET_API_KEY: lambda s, p: _with_tracker(s, api_key=p),
    ActionType.SET_TOKEN_KEY: lambda s, p: _with_tracker(s, token=p),
    ActionType.SET_TRACKER_ACCOUNT: _set_tracker_account,
    ActionType.CONNECT_PLATFORM: lambda s, p: _with_tracker(s, connected=bool(p)),
    ActionType.CONNECT_API_SUCCESS: _connect_success,
    ActionType.SET_FILE: lambda s, p: _with_upload(s, file_name=p),
    ActionType.SET_FILE_UPLOADED: lambda s, p: _with_upload(s, uploaded=bool(p)),
    ActionType.SET_FILE_DATA: lambda s, p: _with_upload(s, data=p),
    ActionType.SET_FILE_PARSED: lambda s, p: _with_upload(s, parsed=bool(p)),
    ActionType.START_GENERATION: lambda s, p: s.model_copy(
        update={"is_generating": True, "error": None}
    ),
    ActionType.GENERATION_SUCCESS: _generation_success,
    ActionType.GENERATION_ERROR: lambda s, p: s.model_copy(
        update={"is_generating": False, "error": p}
    ),
    ActionType.UPDATE_REPORT_CONTENT: _update_report_content,
}


def reduce(state: AppState, action: Action) -> AppState:
    """Return the snapshot that follows ``state`` after ``action``.

    Raises ``ValidationError`` for payloads the snapshot cannot hold, leaving the
    store unchanged.
    """
    handler = _HANDLERS.get(ActionType(action.type))
    if handler is None:
        return state
    return handler(state, action.payload)


class StateStore:
    """Owns the current snapshot; ``dispatch`` is the only way to change it.

    When a cache is supplied the daily record mapping is restored from it on
    start and written back every time the mapping changes.
    """

    def __init__(
        self,
        initial: Optional[AppState] = None,
        *,
        cache: Optional[SQLiteStore] = None,
    ) -> None:
        self._cache = cache
        self._state = initial or AppState()
        if cache is not None and initial is None:
            self._state = _with_user_input(
                self._state, daily_records=self._load_cached_records()
            )
        self._listeners: List[Callable[[AppState], None]] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Callable[[AppState], None]) -> None:
        self._listeners.append(listener)

    def dispatch(self, action: Action) -> AppState:
        previous = self._state
        self._state = reduce(previous, action)
        if self._state.user_input.daily_records != previous.user_input.daily_records:
            self._persist_records()
        for listener in self._listeners:
            listener(self._state)
        return self._state

    def _load_cached_records(self) -> Dict[str, DailyRecordEntry]:
        try:
            raw = self._cache.get(DAILY_RECORDS_CACHE_KEY) or {}
            return {
                date: DailyRecordEntry.model_validate(entry) for date, entry in raw.items()
            }
        except (sqlite3.Error, pydantic.ValidationError, AttributeError) as exc:
            logger.warning("Ignoring unreadable daily record cache: %s", exc)
            return {}

    def _persist_records(self) -> None:
        if self._cache is None:
            return
        payload = {
            date: entry.model_dump()
            for date, entry in self._state.user_input.daily_records.items()
        }
        try:
            self._cache.put(DAILY_RECORDS_CACHE_KEY, payload)
        except sqlite3.Error as exc:
            logger.error("Failed to persist daily record cache: %s", exc)


__all__ = [
    "Action",
    "ActionType",
    "DAILY_RECORDS_CACHE_KEY",
    "StateStore",
    "reduce",
]
