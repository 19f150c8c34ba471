"""Tests for the GitHub and Linear clients.

The real clients are exercised against httpx.MockTransport handlers that
play the part of the APIs, so no network access is needed.

Run with: pytest tests/test_context.py -v
"""

from __future__ import annotations

import json

import httpx
import pytest
from pydantic import ValidationError

from release_notes_action.context.github import GitHubClient, MockGitHubClient
from release_notes_action.context.linear import (
    LinearAPIError,
    LinearClient,
    MockLinearClient,
)


def commit_items(start: int, count: int) -> list[dict]:
    return [
        {"sha": f"sha{i}", "commit": {"message": f"[HK-{i}] change {i}"}}
        for i in range(start, start + count)
    ]


def github_transport(total: int, requests: list[httpx.Request]) -> httpx.MockTransport:
    """Serve ``total`` commits the way GitHub pages them (max 250)."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        page = int(request.url.params["page"])
        per_page = int(request.url.params["per_page"])
        available = min(total, 250)
        start = (page - 1) * per_page
        count = max(0, min(per_page, available - start))
        return httpx.Response(200, json=commit_items(start, count))

    return httpx.MockTransport(handler)


# ---------------------------------------------------------------------------
# GitHub Client Tests
# ---------------------------------------------------------------------------


class TestGitHubClientCommits:
    """Tests for GitHubClient.list_pull_request_commits paging."""

    @pytest.mark.asyncio
    async def test_single_short_page(self) -> None:
        requests: list[httpx.Request] = []
        client = GitHubClient(token="t", transport=github_transport(3, requests))

        page = await client.list_pull_request_commits("myorg/api", 7)

        assert page.messages == ["[HK-0] change 0", "[HK-1] change 1", "[HK-2] change 2"]
        assert page.truncated is False
        assert len(requests) == 1
        assert requests[0].url.path == "/repos/myorg/api/pulls/7/commits"
        assert requests[0].url.params["per_page"] == "100"
        assert requests[0].url.params["page"] == "1"

    @pytest.mark.asyncio
    async def test_stops_on_short_page(self) -> None:
        requests: list[httpx.Request] = []
        client = GitHubClient(token="t", transport=github_transport(150, requests))

        page = await client.list_pull_request_commits("myorg/api", 7)

        assert len(page.commits) == 150
        assert page.truncated is False
        assert [r.url.params["page"] for r in requests] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_exact_page_multiple_fetches_empty_page(self) -> None:
        requests: list[httpx.Request] = []
        client = GitHubClient(token="t", transport=github_transport(200, requests))

        page = await client.list_pull_request_commits("myorg/api", 7)

        assert len(page.commits) == 200
        assert page.truncated is False
        assert len(requests) == 3

    @pytest.mark.asyncio
    async def test_ceiling_sets_truncated(self) -> None:
        requests: list[httpx.Request] = []
        client = GitHubClient(token="t", transport=github_transport(400, requests))

        page = await client.list_pull_request_commits("myorg/api", 7)

        assert len(page.commits) == 250
        assert page.truncated is True
        assert len(requests) == 3

    @pytest.mark.asyncio
    async def test_order_preserved_across_pages(self) -> None:
        client = GitHubClient(token="t", transport=github_transport(120, []))

        page = await client.list_pull_request_commits("myorg/api", 7)

        assert [c.sha for c in page.commits] == [f"sha{i}" for i in range(120)]

    @pytest.mark.asyncio
    async def test_auth_headers(self) -> None:
        requests: list[httpx.Request] = []
        client = GitHubClient(token="ghp_abc", transport=github_transport(1, requests))

        await client.list_pull_request_commits("myorg/api", 7)

        assert requests[0].headers["Authorization"] == "Bearer ghp_abc"
        assert requests[0].headers["Accept"] == "application/vnd.github+json"

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        client = GitHubClient(token="t", transport=transport)

        with pytest.raises(httpx.HTTPStatusError):
            await client.list_pull_request_commits("myorg/api", 7)

    @pytest.mark.asyncio
    async def test_malformed_commit_raises(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json=[{"sha": "x"}])
        )
        client = GitHubClient(token="t", transport=transport)

        with pytest.raises(ValidationError):
            await client.list_pull_request_commits("myorg/api", 7)


class TestGitHubClientComment:
    """Tests for GitHubClient.create_comment."""

    @pytest.mark.asyncio
    async def test_posts_body(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"id": 1})

        client = GitHubClient(token="t", transport=httpx.MockTransport(handler))
        await client.create_comment("myorg/api", 7, "hello")

        assert requests[0].method == "POST"
        assert requests[0].url.path == "/repos/myorg/api/issues/7/comments"
        assert json.loads(requests[0].content) == {"body": "hello"}

    @pytest.mark.asyncio
    async def test_rejected_comment_raises(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(403))
        client = GitHubClient(token="t", transport=transport)

        with pytest.raises(httpx.HTTPStatusError):
            await client.create_comment("myorg/api", 7, "hello")


class TestMockGitHubClient:
    @pytest.mark.asyncio
    async def test_returns_messages_and_records_comments(self) -> None:
        client = MockGitHubClient(commit_messages=["[HK-1] a"], truncated=True)

        page = await client.list_pull_request_commits("myorg/api", 1)
        await client.create_comment("myorg/api", 1, "body")

        assert page.messages == ["[HK-1] a"]
        assert page.truncated is True
        assert client.comments == [("myorg/api", 1, "body")]


# ---------------------------------------------------------------------------
# Linear Client Tests
# ---------------------------------------------------------------------------


ISSUE_NODE = {
    "identifier": "HK-1",
    "title": "Fix login redirect",
    "url": "https://linear.app/acme/issue/HK-1",
    "description": "---Release---\nLogin works again.",
    "labels": {"nodes": [{"name": "bug"}]},
}


def linear_transport(
    payload: dict, requests: list[httpx.Request], status: int = 200
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, json=payload)

    return httpx.MockTransport(handler)


class TestLinearClient:
    """Tests for LinearClient.get_issue."""

    @pytest.mark.asyncio
    async def test_get_issue(self) -> None:
        requests: list[httpx.Request] = []
        transport = linear_transport({"data": {"issue": ISSUE_NODE}}, requests)
        client = LinearClient(api_key="lin_api_x", transport=transport)

        issue = await client.get_issue("HK-1")

        assert issue.identifier == "HK-1"
        assert issue.labels == frozenset({"bug"})
        assert str(requests[0].url) == LinearClient.API_URL
        assert requests[0].headers["Authorization"] == "lin_api_x"
        body = json.loads(requests[0].content)
        assert body["variables"] == {"id": "HK-1"}
        assert "issue(id: $id)" in body["query"]

    @pytest.mark.asyncio
    async def test_graphql_errors_raise(self) -> None:
        payload = {"data": None, "errors": [{"message": "Entity not found"}]}
        client = LinearClient(api_key="k", transport=linear_transport(payload, []))

        with pytest.raises(LinearAPIError) as exc_info:
            await client.get_issue("HK-404")

        assert exc_info.value.identifier == "HK-404"
        assert exc_info.value.messages == ["Entity not found"]
        assert "Entity not found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_null_issue_raises(self) -> None:
        client = LinearClient(
            api_key="k", transport=linear_transport({"data": {"issue": None}}, [])
        )

        with pytest.raises(LinearAPIError, match="issue not found"):
            await client.get_issue("HK-2")

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        client = LinearClient(
            api_key="k", transport=linear_transport({}, [], status=401)
        )

        with pytest.raises(httpx.HTTPStatusError):
            await client.get_issue("HK-1")

    @pytest.mark.asyncio
    async def test_non_json_body_raises_api_error(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html>gateway</html>")
        )
        client = LinearClient(api_key="k", transport=transport)

        with pytest.raises(LinearAPIError, match="not JSON"):
            await client.get_issue("HK-1")

    @pytest.mark.asyncio
    async def test_string_errors_raise_api_error(self) -> None:
        client = LinearClient(
            api_key="k", transport=linear_transport({"errors": ["rate limited"]}, [])
        )

        with pytest.raises(LinearAPIError) as exc_info:
            await client.get_issue("HK-1")

        assert exc_info.value.messages == ["rate limited"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            [1, 2, 3],
            {"data": ["not", "a", "dict"]},
            {"data": {"issue": "HK-1"}},
        ],
    )
    async def test_unexpected_shapes_raise_api_error(self, payload) -> None:
        client = LinearClient(api_key="k", transport=linear_transport(payload, []))

        with pytest.raises(LinearAPIError):
            await client.get_issue("HK-1")


class TestMockLinearClient:
    @pytest.mark.asyncio
    async def test_known_issue(self) -> None:
        client = MockLinearClient(issues={"HK-1": ISSUE_NODE})
        issue = await client.get_issue("HK-1")
        assert issue.title == "Fix login redirect"
        assert client.requested == ["HK-1"]

    @pytest.mark.asyncio
    async def test_unknown_issue_raises(self) -> None:
        client = MockLinearClient()
        with pytest.raises(LinearAPIError):
            await client.get_issue("HK-9")
