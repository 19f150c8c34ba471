"""GitHub API client for pull-request commits and comments.

This module talks to GitHub's REST API to:
- List the commits of a pull request (paged)
- Post the release-notes comment on the pull request

Design notes:
- Uses httpx for async HTTP requests
- Paging is explicit: fetch page i with a fixed page size, stop on a short
  page or once the commit ceiling is reached. GitHub never returns more
  than 250 commits for a pull request.
- Uses a Protocol so the runner doesn't depend on the concrete implementation
  (makes testing with mocks easy)

GitHub API docs: https://docs.github.com/en/rest/pulls/pulls#list-commits-on-a-pull-request
"""

from __future__ import annotations

import math
from typing import Protocol

import httpx

from release_notes_action.logging_config import get_logger
from release_notes_action.schemas import Commit, CommitPage

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 100
MAX_PULL_REQUEST_COMMITS = 250

# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class GitHubClientProtocol(Protocol):
    """Protocol defining the GitHub operations the runner uses."""

    async def list_pull_request_commits(
        self, repo: str, pr_number: int
    ) -> CommitPage:
        """Fetch the commits of a pull request.

        Args:
            repo: Repository in "owner/name" format
            pr_number: Pull request number

        Returns:
            The commits in PR order, flagged when the ceiling was hit
        """
        ...

    async def create_comment(self, repo: str, pr_number: int, body: str) -> None:
        """Add a comment to a pull request."""
        ...


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class GitHubClient:
    """Real GitHub API client using httpx.

    Usage:
        client = GitHubClient(token="ghp_...")
        page = await client.list_pull_request_commits("myorg/api", 123)
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_commits: int = MAX_PULL_REQUEST_COMMITS,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub token with pull-request read and issue write access
            page_size: Commits requested per page (GitHub allows up to 100)
            max_commits: Total commits GitHub will return for one PR
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._page_size = page_size
        self._max_commits = max_commits
        self._timeout = timeout
        self._transport = transport

    @property
    def max_pages(self) -> int:
        return math.ceil(self._max_commits / self._page_size)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def list_pull_request_commits(
        self, repo: str, pr_number: int
    ) -> CommitPage:
        """Fetch every commit GitHub will return for a pull request.

        Raises:
            httpx.HTTPStatusError: If any page request fails
            pydantic.ValidationError: If a commit payload is malformed
        """
        commits: list[Commit] = []
        async with self._client() as client:
            for page in range(1, self.max_pages + 1):
                logger.info(
                    "fetching_commits", repo=repo, pr_number=pr_number, page=page
                )
                resp = await client.get(
                    f"/repos/{repo}/pulls/{pr_number}/commits",
                    params={"per_page": self._page_size, "page": page},
                )
                resp.raise_for_status()
                items = resp.json()
                logger.debug("commits_page", page=page, count=len(items))
                commits.extend(Commit.from_api(item) for item in items)

                if len(items) < self._page_size:
                    break

        commits = commits[: self._max_commits]
        return CommitPage(
            commits=commits,
            truncated=len(commits) >= self._max_commits,
        )

    async def create_comment(self, repo: str, pr_number: int, body: str) -> None:
        """Post a comment on the pull request's conversation.

        Raises:
            httpx.HTTPStatusError: If GitHub rejects the comment
        """
        async with self._client() as client:
            resp = await client.post(
                f"/repos/{repo}/issues/{pr_number}/comments",
                json={"body": body},
            )
            resp.raise_for_status()


# ---------------------------------------------------------------------------
# Mock Implementation (for testing)
# ---------------------------------------------------------------------------


class MockGitHubClient:
    """Mock GitHub client that returns predefined commits.

    Posted comments are recorded in ``comments`` as (repo, pr_number, body).

    Usage:
        client = MockGitHubClient(commit_messages=["[HK-1] fix"])
        page = await client.list_pull_request_commits("myorg/api", 123)
    """

    def __init__(
        self,
        commit_messages: list[str] | None = None,
        truncated: bool = False,
    ) -> None:
        self._commit_messages = commit_messages or []
        self._truncated = truncated
        self.comments: list[tuple[str, int, str]] = []

    async def list_pull_request_commits(
        self, repo: str, pr_number: int
    ) -> CommitPage:
        return CommitPage(
            commits=[Commit(message=message) for message in self._commit_messages],
            truncated=self._truncated,
        )

    async def create_comment(self, repo: str, pr_number: int, body: str) -> None:
        self.comments.append((repo, pr_number, body))
