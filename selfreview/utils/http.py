"""HTTP utilities mapping transport failures onto the report error taxonomy."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, TypeVar

import httpx

from selfreview.core.errors import NetworkError, UpstreamError

T = TypeVar("T")


async def request_checked(
    func: Callable[..., Awaitable[httpx.Response]],
    *args: Any,
    context: str,
    **kwargs: Any,
) -> httpx.Response:
    """Issue a single request and raise on transport failure or non-2xx status.

    Calls are never retried; the caller decides whether a failure is fatal.
    """
    try:
        response = await func(*args, **kwargs)
    except httpx.HTTPError as exc:
        raise NetworkError(f"{context}: {exc.__class__.__name__}") from exc

    if not response.is_success:
        raise UpstreamError(
            f"{context}: upstream returned {response.status_code}",
            status_code=response.status_code,
        )
    return response


def decode_json(response: httpx.Response, *, context: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise NetworkError(f"{context}: response was not valid JSON") from exc


async def gather_in_order(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[Any]],
    *,
    limit: int,
) -> List[Any]:
    """Run ``worker`` over ``items`` with at most ``limit`` calls in flight.

    Results come back in the order of ``items`` regardless of completion order.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _bounded(item: T) -> Any:
        async with semaphore:
            return await worker(item)

    return list(await asyncio.gather(*(_bounded(item) for item in items)))


__all__ = ["decode_json", "gather_in_order", "request_checked"]
