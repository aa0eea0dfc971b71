"""HTTP client for the daily record persistence endpoints."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import httpx

from selfreview.core.config import PersistenceSettings
from selfreview.schemas import DailyRecordEntry, StoredDailyRecord
from selfreview.utils.http import decode_json, request_checked


class DailyRecordApiClient:
    """Thin wrapper over ``createdaily``/``getdaily``/``deletedaily``/``cleardaily``.

    Every call is a single attempt; failures surface as ``UpstreamError`` or
    ``NetworkError``.
    """

    def __init__(
        self,
        settings: PersistenceSettings,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = settings.daily_api_base_url
        self._timeout = timeout
        self._transport = transport

    async def create(self, name: str, records: Iterable[DailyRecordEntry]) -> Dict[str, Any]:
        payload = {
            "name": name,
            "dailyRecords": [record.model_dump() for record in records],
        }
        async with self._client() as client:
            response = await request_checked(
                client.post, "api/createdaily", json=payload, context="Save daily record"
            )
        return decode_json(response, context="Save daily record")

    async def fetch(self, name: str) -> Dict[str, StoredDailyRecord]:
        async with self._client() as client:
            response = await request_checked(
                client.get,
                "api/getdaily",
                params={"name": name},
                context="Load daily records",
            )
        payload = decode_json(response, context="Load daily records") or {}
        return {
            date: StoredDailyRecord.model_validate(record)
            for date, record in (payload.get("data") or {}).items()
        }

    async def delete(self, record_id: int) -> Dict[str, Any]:
        async with self._client() as client:
            response = await request_checked(
                client.delete,
                "api/deletedaily",
                params={"id": record_id},
                context="Delete daily record",
            )
        return decode_json(response, context="Delete daily record")

    async def clear(self, year_month: str, user_name: str) -> Dict[str, Any]:
        async with self._client() as client:
            response = await request_checked(
                client.post,
                "api/cleardaily",
                json={"yearMonth": year_month, "userName": user_name},
                context="Clear daily records",
            )
        return decode_json(response, context="Clear daily records")

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        )


__all__ = ["DailyRecordApiClient"]
