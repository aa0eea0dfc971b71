"""SQLite-backed storage behind the daily record persistence endpoints."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Dict, Iterable

from selfreview.schemas import DailyRecordEntry, StoredDailyRecord


def _ensure_directory(db_path: Path) -> None:
    if db_path.parent and not db_path.parent.exists():
        db_path.parent.mkdir(parents=True, exist_ok=True)


class DailyRecordRepository:
    """One row per (owner, date); saving an existing date overwrites its content."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        _ensure_directory(self._db_path)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS daily_records (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    date TEXT NOT NULL,
                    content TEXT NOT NULL,
                    UNIQUE (name, date)
                )
                """
            )

    def upsert_many(self, name: str, records: Iterable[DailyRecordEntry]) -> int:
        """Insert or overwrite the given records; returns how many were written."""
        rows = [(name, record.date, record.content) for record in records]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO daily_records (name, date, content)
                VALUES (?, ?, ?)
                ON CONFLICT(name, date) DO UPDATE SET content = excluded.content
                """,
                rows,
            )
        return len(rows)

    def list_for(self, name: str) -> Dict[str, StoredDailyRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, date, content FROM daily_records WHERE name = ? ORDER BY date",
                (name,),
            ).fetchall()
        return {
            row["date"]: StoredDailyRecord(
                id=row["id"], date=row["date"], content=row["content"]
            )
            for row in rows
        }

    def delete(self, record_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM daily_records WHERE id = ?", (record_id,))
        return cursor.rowcount > 0

    def clear_month(self, name: str, year_month: str) -> int:
        """Delete every record of ``name`` dated within ``YYYY-MM``."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM daily_records WHERE name = ? AND substr(date, 1, 7) = ?",
                (name, year_month),
            )
        return cursor.rowcount


__all__ = ["DailyRecordRepository"]
