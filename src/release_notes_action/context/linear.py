"""Linear API client for issue lookups.

Linear only exposes a GraphQL API. The action needs a single query: fetch
one issue by its human-readable key (``HK-123``) with the fields the
comment uses.

Design notes:
- Uses httpx for async HTTP requests, like the GitHub client
- GraphQL reports most failures in an ``errors`` array with HTTP 200;
  those are raised as LinearAPIError
- Uses a Protocol so the runner doesn't depend on the concrete implementation

Linear API docs: https://developers.linear.app/docs/graphql/working-with-the-graphql-api
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from release_notes_action.schemas import IssueRecord

ISSUE_QUERY = """
query Issue($id: String!) {
  issue(id: $id) {
    identifier
    title
    url
    description
    labels {
      nodes {
        name
      }
    }
  }
}
"""


class LinearAPIError(RuntimeError):
    """Raised when Linear answers a query with errors or no issue."""

    def __init__(self, identifier: str, messages: list[str] | None = None) -> None:
        self.identifier = identifier
        self.messages = messages or []
        detail = "; ".join(self.messages) or "issue not found"
        super().__init__(f"Linear issue {identifier}: {detail}")


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message", error))
    return str(error)


# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class LinearClientProtocol(Protocol):
    """Protocol for issue lookups."""

    async def get_issue(self, identifier: str) -> IssueRecord:
        """Fetch one issue by key.

        Args:
            identifier: Issue key (e.g., "HK-123")

        Returns:
            The issue as an IssueRecord
        """
        ...


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class LinearClient:
    """Real Linear client using httpx.

    Usage:
        client = LinearClient(api_key="lin_api_...")
        issue = await client.get_issue("HK-123")
    """

    API_URL = "https://api.linear.app/graphql"

    def __init__(
        self,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Linear client.

        Args:
            api_key: Linear personal API key. Sent as-is, without "Bearer".
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._headers = {
            "Authorization": api_key,
            "Content-Type": "application/json",
        }
        self._timeout = timeout
        self._transport = transport

    async def get_issue(self, identifier: str) -> IssueRecord:
        """Fetch an issue and convert it to an IssueRecord.

        Raises:
            httpx.HTTPStatusError: If the request fails at the HTTP level
            LinearAPIError: If the query returns errors or no issue, or the
                response is not JSON of the expected shape
            pydantic.ValidationError: If the issue node is malformed
        """
        async with httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            resp = await client.post(
                self.API_URL,
                json={"query": ISSUE_QUERY, "variables": {"id": identifier}},
            )
            resp.raise_for_status()
            try:
                data = resp.json()
            except ValueError as exc:
                raise LinearAPIError(
                    identifier, [f"response is not JSON: {exc}"]
                ) from exc

        if not isinstance(data, dict):
            raise LinearAPIError(identifier, ["unexpected response shape"])

        errors = data.get("errors") or []
        if errors:
            raise LinearAPIError(identifier, [_error_message(e) for e in errors])

        section = data.get("data") or {}
        node = section.get("issue") if isinstance(section, dict) else None
        if not node:
            raise LinearAPIError(identifier)
        if not isinstance(node, dict):
            raise LinearAPIError(identifier, ["unexpected issue shape"])
        return IssueRecord.from_api(node)


# ---------------------------------------------------------------------------
# Mock Implementation (for testing)
# ---------------------------------------------------------------------------


class MockLinearClient:
    """Mock Linear client serving predefined issues.

    Usage:
        client = MockLinearClient(issues={"HK-1": {"identifier": "HK-1", ...}})
        issue = await client.get_issue("HK-1")
    """

    def __init__(self, issues: dict[str, dict[str, Any]] | None = None) -> None:
        """Initialize with optional predefined issue nodes.

        Args:
            issues: Issue key -> GraphQL issue node
        """
        self._issues = issues or {}
        self.requested: list[str] = []

    async def get_issue(self, identifier: str) -> IssueRecord:
        """Return the predefined issue.

        Raises:
            LinearAPIError: If no issue is defined for this key
        """
        self.requested.append(identifier)
        if identifier not in self._issues:
            raise LinearAPIError(identifier)
        return IssueRecord.from_api(self._issues[identifier])
