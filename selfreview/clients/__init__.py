"""Expose constructed client wrappers."""

from .daily_records import DailyRecordApiClient
from .gemini import GeminiClient, GeminiModelError
from .jira import JiraClient
from .sqlite_store import SQLiteStore
from .tracker import TrackerAdapter
from .trello import TrelloClient

__all__ = [
    "DailyRecordApiClient",
    "GeminiClient",
    "GeminiModelError",
    "JiraClient",
    "SQLiteStore",
    "TrackerAdapter",
    "TrelloClient",
]
