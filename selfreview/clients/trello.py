"""Trello adapter calling the public REST API directly."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from selfreview.core.config import TrackerSettings
from selfreview.core.errors import AuthError, NetworkError, UpstreamError
from selfreview.schemas import (
    BoardTrackerData,
    TrackerBoard,
    TrackerCard,
    TrackerCredentials,
    TrackerList,
    TrackerUser,
)
from selfreview.utils.http import decode_json, gather_in_order, request_checked

logger = logging.getLogger(__name__)

CARD_DETAIL_PARAMS = {"fields": "all", "members": "true", "member_fields": "all"}


class TrelloClient:
    """Walk member -> boards -> lists -> cards -> card details."""

    def __init__(
        self,
        settings: TrackerSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def connect(self, credentials: TrackerCredentials) -> Dict[str, bool]:
        params = self._auth_params(credentials)
        async with self._client() as client:
            try:
                await request_checked(
                    client.get, "members/me", params=params, context="Trello identity check"
                )
            except UpstreamError as exc:
                raise AuthError("Unable to verify Trello API key") from exc
        return {"connected": True}

    async def fetch_all(self, credentials: TrackerCredentials) -> BoardTrackerData:
        """Assemble every board the member can see.

        Boards whose lists cannot be read and lists whose cards cannot be read
        are left out; a card whose detail call fails is dropped on its own.
        """
        params = self._auth_params(credentials)
        async with self._client() as client:
            member = decode_json(
                await request_checked(
                    client.get, "members/me", params=params, context="Trello member"
                ),
                context="Trello member",
            )
            user = TrackerUser(
                id=str(member.get("id", "")),
                username=member.get("username") or "",
                display_name=member.get("fullName") or "",
            )
            raw_boards = decode_json(
                await request_checked(
                    client.get,
                    "members/me/boards",
                    params=params,
                    context="Trello boards",
                ),
                context="Trello boards",
            )

            boards: List[TrackerBoard] = []
            cards: List[TrackerCard] = []
            for raw_board in raw_boards or []:
                board = await self._fetch_board(client, params, raw_board, user.id)
                if board is None:
                    continue
                boards.append(board)
                for board_list in board.lists:
                    cards.extend(board_list.cards)

        logger.info("Fetched %d Trello cards across %d boards", len(cards), len(boards))
        return BoardTrackerData(user=user, boards=boards, cards=cards)

    async def _fetch_board(
        self,
        client: httpx.AsyncClient,
        params: Dict[str, str],
        raw_board: Dict[str, Any],
        member_id: str,
    ) -> Optional[TrackerBoard]:
        board_id = raw_board.get("id", "")
        try:
            raw_lists = decode_json(
                await request_checked(
                    client.get,
                    f"boards/{board_id}/lists",
                    params=params,
                    context=f"Trello lists for board {board_id}",
                ),
                context=f"Trello lists for board {board_id}",
            )
        except NetworkError as exc:
            logger.warning("Skipping Trello board %s: %s", board_id, exc)
            return None

        board = TrackerBoard(
            id=str(board_id), name=raw_board.get("name", ""), url=raw_board.get("url")
        )
        for raw_list in raw_lists or []:
            board_list = await self._fetch_list(client, params, raw_list, member_id)
            if board_list is not None:
                board.lists.append(board_list)
        return board

    async def _fetch_list(
        self,
        client: httpx.AsyncClient,
        params: Dict[str, str],
        raw_list: Dict[str, Any],
        member_id: str,
    ) -> Optional[TrackerList]:
        list_id = raw_list.get("id", "")
        list_name = raw_list.get("name", "")
        try:
            raw_cards = decode_json(
                await request_checked(
                    client.get,
                    f"lists/{list_id}/cards",
                    params=params,
                    context=f"Trello cards for list {list_id}",
                ),
                context=f"Trello cards for list {list_id}",
            )
        except NetworkError as exc:
            logger.warning("Skipping Trello list %s: %s", list_id, exc)
            return None

        async def _detail(raw_card: Dict[str, Any]) -> Optional[TrackerCard]:
            return await self._fetch_card(client, params, raw_card, list_name, member_id)

        details = await gather_in_order(
            raw_cards or [], _detail, limit=self._settings.detail_concurrency
        )
        return TrackerList(
            id=str(list_id),
            name=list_name,
            cards=[card for card in details if card is not None],
        )

    async def _fetch_card(
        self,
        client: httpx.AsyncClient,
        params: Dict[str, str],
        raw_card: Dict[str, Any],
        list_name: str,
        member_id: str,
    ) -> Optional[TrackerCard]:
        card_id = raw_card.get("id", "")
        try:
            detail = decode_json(
                await request_checked(
                    client.get,
                    f"cards/{card_id}",
                    params={**params, **CARD_DETAIL_PARAMS},
                    context=f"Trello card {card_id}",
                ),
                context=f"Trello card {card_id}",
            )
        except NetworkError as exc:
            logger.warning("Skipping Trello card %s: %s", card_id, exc)
            return None

        members = detail.get("members") or []
        return TrackerCard(
            id=str(card_id),
            name=raw_card.get("name") or detail.get("name") or "",
            description=detail.get("desc") or "",
            url=raw_card.get("url") or detail.get("url"),
            completed=bool(raw_card.get("dueComplete", detail.get("dueComplete"))),
            due_date=detail.get("due"),
            list_name=list_name,
            assigned_to_caller=any(m.get("id") == member_id for m in members),
        )

    def _auth_params(self, credentials: TrackerCredentials) -> Dict[str, str]:
        key = credentials.api_key.strip()
        if len(key) < self._settings.min_key_length:
            raise AuthError("Invalid Trello API key")
        return {"key": key, "token": credentials.token.strip()}

    def _client(self) -> httpx.AsyncClient:
        base_url = self._settings.trello_base_url.rstrip("/") + "/"
        return httpx.AsyncClient(
            base_url=base_url,
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        )


__all__ = ["CARD_DETAIL_PARAMS", "TrelloClient"]
