"""SQLite key/value cache for client-side state that survives restarts."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Optional

_SCHEMA = """
CREATE TABLE IF NOT EXISTS local_state (
    key TEXT PRIMARY KEY,
    data TEXT NOT NULL
)
"""


class SQLiteStore:
    """One JSON document per key."""

    def __init__(self, db_path: str) -> None:
        self._path = Path(db_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(_SCHEMA)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._path, check_same_thread=False)

    def put(self, key: str, value: Any) -> None:
        if not key:
            raise ValueError("cache key must not be empty")
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO local_state (key, data) VALUES (?, ?)",
                (key, json.dumps(value)),
            )

    def get(self, key: str) -> Optional[Any]:
        with self._connect() as conn:
            row = conn.execute("SELECT data FROM local_state WHERE key = ?", (key,)).fetchone()
        return json.loads(row[0]) if row else None


__all__ = ["SQLiteStore"]
