"""Jira Cloud ticket tracker over the REST v3 API."""

from typing import Any

import httpx

from huddle.config.models.providers import TrackerConfig
from huddle.observability.logging import get_logger
from huddle.providers.tracker.errors import TrackerError
from huddle.standup.collaborators import TicketTracker
from huddle.standup.models import TrackerResult, WorkItem

logger = get_logger(__name__)

SEARCH_FIELDS = ["summary", "status", "priority"]
MAX_RESULTS = 50


def adf_paragraph(text: str) -> dict[str, Any]:
    """Wrap plain text in an Atlassian Document Format document."""
    return {
        "type": "doc",
        "version": 1,
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": text}]}],
    }


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class JiraTicketTracker(TicketTracker):
    """Reads open issues and records standup updates in Jira.

    Issues are looked up by assignee e-mail. Status changes go through
    the issue's available transitions, matched by transition name or
    destination status, case-insensitively.
    """

    def __init__(self, config: TrackerConfig, client: httpx.AsyncClient | None = None) -> None:
        if not config.base_url or not config.email or config.api_token is None:
            raise ValueError("Jira tracker requires base_url, email and api_token")

        self._config = config
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._auth = httpx.BasicAuth(config.email, config.api_token.get_secret_value())
        self._api = config.base_url.rstrip("/") + "/rest/api/3"

    async def aclose(self) -> None:
        await self._client.aclose()

    def build_jql(self, contact: str) -> str:
        clauses = [
            f"assignee = {_quote(contact)}",
            "statusCategory != Done",
            "issuetype not in subTaskIssueTypes()",
        ]
        if self._config.project_key:
            clauses.insert(0, f"project = {_quote(self._config.project_key)}")
        return " AND ".join(clauses) + " ORDER BY priority DESC, updated DESC"

    async def list_open_items(self, contact: str) -> list[WorkItem]:
        response = await self._request(
            "POST",
            "/search/jql",
            json={
                "jql": self.build_jql(contact),
                "fields": SEARCH_FIELDS,
                "maxResults": MAX_RESULTS,
            },
        )
        self._raise_for_status(response, "search")

        items = []
        for issue in response.json().get("issues", []):
            fields = issue.get("fields") or {}
            items.append(
                WorkItem(
                    item_id=issue["key"],
                    title=fields.get("summary") or "",
                    status=(fields.get("status") or {}).get("name") or "Unknown",
                    priority=(fields.get("priority") or {}).get("name"),
                )
            )

        logger.debug("jira_items_loaded", count=len(items))
        return items

    async def transition_status(self, item_id: str, target_status: str) -> TrackerResult:
        response = await self._request("GET", f"/issue/{item_id}/transitions")
        if response.status_code == 404:
            return TrackerResult(success=False, error=f"Issue {item_id} not found")
        self._raise_for_status(response, "transitions")

        wanted = target_status.strip().lower()
        transitions = response.json().get("transitions", [])
        match = next(
            (
                t
                for t in transitions
                if (t.get("name") or "").lower() == wanted
                or ((t.get("to") or {}).get("name") or "").lower() == wanted
            ),
            None,
        )
        if match is None:
            available = [(t.get("to") or {}).get("name") or t.get("name") for t in transitions]
            logger.warning(
                "jira_transition_unavailable",
                item_id=item_id,
                target_status=target_status,
                available=available,
            )
            return TrackerResult(
                success=False,
                error=f"No transition to '{target_status}' for {item_id}",
            )

        response = await self._request(
            "POST",
            f"/issue/{item_id}/transitions",
            json={"transition": {"id": match["id"]}},
        )
        if response.status_code == 404:
            return TrackerResult(success=False, error=f"Issue {item_id} not found")
        self._raise_for_status(response, "transition")

        logger.info("jira_issue_transitioned", item_id=item_id, target_status=target_status)
        return TrackerResult(success=True)

    async def append_note(self, item_id: str, text: str) -> TrackerResult:
        response = await self._request(
            "POST",
            f"/issue/{item_id}/comment",
            json={"body": adf_paragraph(text)},
        )
        if response.status_code == 404:
            return TrackerResult(success=False, error=f"Issue {item_id} not found")
        self._raise_for_status(response, "comment")
        return TrackerResult(success=True)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, self._api + path, auth=self._auth, **kwargs)
        except httpx.HTTPError as e:
            raise TrackerError(f"Jira request failed: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, operation: str) -> None:
        if response.status_code >= 400:
            raise TrackerError(
                f"Jira {operation} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
