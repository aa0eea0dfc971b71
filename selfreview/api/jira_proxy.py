"""
Credential-adding proxy in front of the Jira REST API v2.
"""

from __future__ import annotations

import base64
import logging
from http import HTTPStatus
from typing import Annotated, Any, Dict, Optional

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from selfreview.clients.jira import strip_scheme
from selfreview.core.config import AppSettings
from selfreview.dependencies import get_app_settings, get_upstream_transport

router = APIRouter(prefix="/jira", tags=["jira"])
logger = logging.getLogger(__name__)

DEFAULT_JQL = "assignee = currentUser()"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _forward(
    *,
    domain: Optional[str],
    email: Optional[str],
    api_token: Optional[str],
    path: str,
    params: Dict[str, Any],
    settings: AppSettings,
    transport: Optional[httpx.AsyncBaseTransport],
) -> JSONResponse:
    if not domain or not email or not api_token:
        return _error(HTTPStatus.BAD_REQUEST, "missing required parameters")

    host = strip_scheme(domain)
    credentials = base64.b64encode(f"{email}:{api_token}".encode()).decode()
    headers = {"Authorization": f"Basic {credentials}", "Accept": "application/json"}
    url = f"https://{host}/rest/api/2/{path}"

    try:
        async with httpx.AsyncClient(
            timeout=settings.tracker.timeout_seconds, transport=transport
        ) as client:
            response = await client.get(url, params=params, headers=headers)
        if not response.is_success:
            logger.warning("Jira %s returned %s", path, response.status_code)
            return _error(response.status_code, "tracker API error")
        return JSONResponse(content=response.json())
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Jira proxy request to %s failed: %s", path, exc)
        return _error(HTTPStatus.INTERNAL_SERVER_ERROR, "server error")


Transport = Annotated[Optional[httpx.AsyncBaseTransport], Depends(get_upstream_transport)]
Settings = Annotated[AppSettings, Depends(get_app_settings)]
Domain = Annotated[Optional[str], Query()]
Email = Annotated[Optional[str], Query()]
ApiToken = Annotated[Optional[str], Query(alias="apiToken")]


@router.get("/myself")
async def jira_myself(
    settings: Settings,
    transport: Transport,
    domain: Domain = None,
    email: Email = None,
    api_token: ApiToken = None,
) -> JSONResponse:
    return await _forward(
        domain=domain,
        email=email,
        api_token=api_token,
        path="myself",
        params={},
        settings=settings,
        transport=transport,
    )


@router.get("/projects")
async def jira_projects(
    settings: Settings,
    transport: Transport,
    domain: Domain = None,
    email: Email = None,
    api_token: ApiToken = None,
) -> JSONResponse:
    return await _forward(
        domain=domain,
        email=email,
        api_token=api_token,
        path="project",
        params={},
        settings=settings,
        transport=transport,
    )


@router.get("/search")
async def jira_search(
    settings: Settings,
    transport: Transport,
    domain: Domain = None,
    email: Email = None,
    api_token: ApiToken = None,
    jql: Optional[str] = Query(default=None),
    max_results: Optional[int] = Query(default=None, alias="maxResults", ge=1),
) -> JSONResponse:
    return await _forward(
        domain=domain,
        email=email,
        api_token=api_token,
        path="search",
        params={
            "jql": jql or DEFAULT_JQL,
            "maxResults": max_results or settings.tracker.jira_max_results,
        },
        settings=settings,
        transport=transport,
    )


@router.get("/issue/{issue_key}")
async def jira_issue(
    issue_key: str,
    settings: Settings,
    transport: Transport,
    domain: Domain = None,
    email: Email = None,
    api_token: ApiToken = None,
    fields: Optional[str] = Query(default=None),
) -> JSONResponse:
    return await _forward(
        domain=domain,
        email=email,
        api_token=api_token,
        path=f"issue/{issue_key}",
        params={"fields": fields} if fields else {},
        settings=settings,
        transport=transport,
    )


__all__ = ["router"]
