"""Client-side daily record store mirroring the remote persistence API."""

from __future__ import annotations

import logging
import re
from typing import Dict, List

import pydantic

from selfreview.clients.daily_records import DailyRecordApiClient
from selfreview.core.errors import ValidationError
from selfreview.schemas import DailyRecordEntry, StoredDailyRecord

logger = logging.getLogger(__name__)

_YEAR_MONTH = re.compile(r"^\d{4}-\d{2}$")


class DailyRecordStore:
    """Keeps one entry per date for the current owner.

    Every mutation is a remote call followed by a full refresh, so the local
    mapping only ever reflects what the server acknowledged. Refreshes are
    numbered in the order they start; a response that arrives after a later
    one has been applied is dropped.
    """

    def __init__(self, api_client: DailyRecordApiClient, owner: str = "") -> None:
        self._api = api_client
        self.owner = owner
        self._records: Dict[str, StoredDailyRecord] = {}
        self._started = 0
        self._version = 0

    @property
    def records(self) -> Dict[str, DailyRecordEntry]:
        return {
            date: DailyRecordEntry(date=record.date, content=record.content)
            for date, record in self._records.items()
        }

    @property
    def version(self) -> int:
        """Sequence number of the refresh currently held; 0 before the first one."""
        return self._version

    def list(self) -> List[DailyRecordEntry]:
        return list(self.records.values())

    async def refresh(self) -> Dict[str, DailyRecordEntry]:
        owner = self._require_owner()
        self._started += 1
        sequence = self._started
        records = await self._api.fetch(owner)
        if sequence < self._version:
            logger.info(
                "Dropping daily record refresh %d; refresh %d already applied",
                sequence,
                self._version,
            )
            return self.records
        self._records = records
        self._version = sequence
        return self.records

    async def add(self, date: str, content: str) -> Dict[str, DailyRecordEntry]:
        """Upsert ``content`` for ``date``; blank content deletes the entry."""
        if not content.strip():
            return await self.remove(date)

        try:
            entry = DailyRecordEntry(date=date, content=content)
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid daily record date: {date!r}") from exc

        await self._api.create(self._require_owner(), [entry])
        return await self.refresh()

    async def remove(self, date: str) -> Dict[str, DailyRecordEntry]:
        stored = self._records.get(date)
        if stored is None:
            # The local mapping may predate the remote one (e.g. after a warm start).
            await self.refresh()
            stored = self._records.get(date)
        if stored is None:
            return self.records
        await self._api.delete(stored.id)
        logger.info("Deleted daily record %s for %s", date, self.owner)
        return await self.refresh()

    async def clear_range(self, year_month: str, owner: str = "") -> Dict[str, DailyRecordEntry]:
        """Delete every record within ``YYYY-MM`` for ``owner`` (default: current owner)."""
        if not _YEAR_MONTH.match(year_month):
            raise ValidationError(f"Expected YYYY-MM, got {year_month!r}")
        target = owner or self._require_owner()
        result = await self._api.clear(year_month, target)
        logger.info(
            "Cleared %s daily records in %s for %s",
            result.get("deleted", "?"),
            year_month,
            target,
        )
        return await self.refresh()

    def _require_owner(self) -> str:
        if not self.owner.strip():
            raise ValidationError("A user name is required to persist daily records")
        return self.owner


__all__ = ["DailyRecordStore"]
