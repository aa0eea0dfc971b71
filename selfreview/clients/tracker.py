"""Common contract shared by the ticket-tracker adapters."""

from __future__ import annotations

from typing import Dict, Protocol

from selfreview.schemas import TrackerCredentials, TrackerData


class TrackerAdapter(Protocol):
    """Connect to a tracker and pull the caller's work items."""

    async def connect(self, credentials: TrackerCredentials) -> Dict[str, bool]:
        ...

    async def fetch_all(self, credentials: TrackerCredentials) -> TrackerData:
        ...


__all__ = ["TrackerAdapter"]
