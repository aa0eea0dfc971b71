"""Jira adapter talking to the credential-adding proxy under ``/api/jira``."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from selfreview.core.config import TrackerSettings
from selfreview.core.errors import AuthError, NetworkError, UpstreamError, ValidationError
from selfreview.schemas import (
    IssueTrackerData,
    TrackerCredentials,
    TrackerIssue,
    TrackerProject,
    TrackerUser,
)
from selfreview.utils.http import decode_json, gather_in_order, request_checked

logger = logging.getLogger(__name__)

ASSIGNED_ISSUES_JQL = "assignee = currentUser() ORDER BY updated DESC"
ISSUE_DETAIL_FIELDS = "summary,description,status,created,updated,project,assignee"

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def strip_scheme(domain: str) -> str:
    return _SCHEME.sub("", domain.strip()).rstrip("/")


class JiraClient:
    """Fetch the caller's identity, projects and assigned issues through the proxy."""

    def __init__(
        self,
        settings: TrackerSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def connect(self, credentials: TrackerCredentials) -> Dict[str, bool]:
        """Validate credentials against ``/myself``."""
        params = self._auth_params(credentials)
        async with self._client() as client:
            try:
                await request_checked(
                    client.get,
                    "/api/jira/myself",
                    params=params,
                    context="Jira identity check",
                )
            except UpstreamError as exc:
                raise AuthError("Unable to verify Jira credentials") from exc
        return {"connected": True}

    async def fetch_all(self, credentials: TrackerCredentials) -> IssueTrackerData:
        """Return identity, projects and assigned issues with details resolved."""
        params = self._auth_params(credentials)
        async with self._client() as client:
            me = decode_json(
                await request_checked(
                    client.get, "/api/jira/myself", params=params, context="Jira identity"
                ),
                context="Jira identity",
            )
            user = TrackerUser(
                id=str(me.get("accountId") or ""),
                username=me.get("emailAddress") or credentials.email or "",
                display_name=me.get("displayName") or "",
            )

            raw_projects = decode_json(
                await request_checked(
                    client.get, "/api/jira/projects", params=params, context="Jira projects"
                ),
                context="Jira projects",
            )
            projects = [
                TrackerProject(
                    id=str(project.get("id", "")),
                    key=project.get("key", ""),
                    name=project.get("name", ""),
                )
                for project in raw_projects or []
            ]

            search = decode_json(
                await request_checked(
                    client.get,
                    "/api/jira/search",
                    params={
                        **params,
                        "jql": ASSIGNED_ISSUES_JQL,
                        "maxResults": str(self._settings.jira_max_results),
                    },
                    context="Jira issue search",
                ),
                context="Jira issue search",
            )
            summaries: List[Dict[str, Any]] = list(search.get("issues") or [])

            async def _detail(summary: Dict[str, Any]) -> Optional[TrackerIssue]:
                return await self._fetch_issue(client, params, summary, user.id)

            details = await gather_in_order(
                summaries, _detail, limit=self._settings.detail_concurrency
            )

        issues = [issue for issue in details if issue is not None]
        by_key = {project.key: project for project in projects}
        for issue in issues:
            project = by_key.get(issue.project_key)
            if project is not None:
                project.issues.append(issue)

        logger.info(
            "Fetched %d Jira issues across %d projects", len(issues), len(projects)
        )
        return IssueTrackerData(user=user, projects=projects, issues=issues)

    async def _fetch_issue(
        self,
        client: httpx.AsyncClient,
        params: Dict[str, str],
        summary: Dict[str, Any],
        caller_id: str,
    ) -> Optional[TrackerIssue]:
        key = summary.get("key", "")
        try:
            response = await request_checked(
                client.get,
                f"/api/jira/issue/{key}",
                params={**params, "fields": ISSUE_DETAIL_FIELDS},
                context=f"Jira issue {key}",
            )
            detail = decode_json(response, context=f"Jira issue {key}")
        except NetworkError as exc:
            logger.warning("Skipping Jira issue %s: %s", key, exc)
            return None

        fields = detail.get("fields") or {}
        status = fields.get("status") or {}
        project = fields.get("project") or {}
        return TrackerIssue(
            id=str(summary.get("id", "")),
            key=key,
            title=fields.get("summary") or "",
            description=fields.get("description") or "",
            status=status.get("name") or "Unknown",
            created=fields.get("created"),
            updated=fields.get("updated"),
            project_key=project.get("key", ""),
            project_name=project.get("name", ""),
            assigned_to_caller=_is_assigned(fields, caller_id),
        )

    def _auth_params(self, credentials: TrackerCredentials) -> Dict[str, str]:
        domain, email, token = _require_credentials(
            credentials, self._settings.min_key_length
        )
        return {"domain": domain, "email": email, "apiToken": token}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.jira_proxy_base_url,
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        )


def _require_credentials(
    credentials: TrackerCredentials, min_key_length: int
) -> Tuple[str, str, str]:
    domain = strip_scheme(credentials.domain or "")
    email = (credentials.email or "").strip()
    token = credentials.api_key.strip()
    if not domain or not email:
        raise ValidationError("Jira domain and email are required")
    if len(token) < min_key_length:
        raise AuthError("Invalid Jira API token")
    return domain, email, token


def _is_assigned(fields: Dict[str, Any], caller_id: str) -> bool:
    # The search is already scoped to the caller, so an omitted field means assigned.
    if "assignee" not in fields:
        return True
    assignee = fields.get("assignee") or {}
    return bool(caller_id) and assignee.get("accountId") == caller_id


__all__ = ["ASSIGNED_ISSUES_JQL", "ISSUE_DETAIL_FIELDS", "JiraClient", "strip_scheme"]
