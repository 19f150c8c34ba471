"""Pydantic models for the data flowing through the release-note pipeline.

Raw API payloads (GitHub commits, Linear issues, the Actions event file)
are converted into these models at the client boundary, so the extractor,
resolver and composer only ever see typed records.

Key design decisions:
- Each model owns a ``from_api`` classmethod that maps the raw payload
- Invalid payloads raise pydantic.ValidationError at the boundary
- Records are frozen; nothing downstream mutates them
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------


class Commit(BaseModel):
    """A single commit on the pull request.

    Attributes:
        sha: Commit SHA (may be empty for mock data)
        message: Full commit message, subject line first
    """

    model_config = ConfigDict(frozen=True)

    sha: str = Field("", description="Commit SHA")
    message: str = Field(..., description="Full commit message")

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Commit:
        """Build a Commit from a GitHub ``pulls/{n}/commits`` list item."""
        commit = payload.get("commit") or {}
        return cls.model_validate(
            {"sha": payload.get("sha") or "", "message": commit.get("message")}
        )


class CommitPage(BaseModel):
    """All commits fetched for a pull request, flattened across pages.

    Attributes:
        commits: Commits in the order GitHub returned them
        truncated: True when the listing hit GitHub's hard ceiling, in
                   which case later commits were never returned
    """

    commits: list[Commit] = Field(default_factory=list)
    truncated: bool = False

    @property
    def messages(self) -> list[str]:
        """Commit messages in listing order."""
        return [commit.message for commit in self.commits]


class PullRequestRef(BaseModel):
    """The pull request that triggered the run.

    Attributes:
        repo: Repository in "owner/name" format
        number: Pull request number
    """

    model_config = ConfigDict(frozen=True)

    repo: str = Field(..., pattern=r"^[^/\s]+/[^/\s]+$")
    number: int = Field(..., gt=0)


# ---------------------------------------------------------------------------
# Linear
# ---------------------------------------------------------------------------


class IssueRecord(BaseModel):
    """A Linear issue referenced by one or more commits.

    Attributes:
        identifier: Human-readable issue key (e.g., "HK-123")
        title: Issue title
        url: Link to the issue in Linear
        description: Markdown description, None when the issue has none
        labels: Lower-cased label names attached to the issue
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1)
    title: str = Field(..., description="Issue title")
    url: str = Field(..., description="Issue URL")
    description: str | None = Field(None, description="Markdown description")
    labels: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("labels", mode="before")
    @classmethod
    def normalize_labels(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(label).strip().lower() for label in value)
        return value

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> IssueRecord:
        """Build an IssueRecord from a Linear GraphQL ``issue`` node.

        The node is expected to look like::

            {
                "identifier": "HK-1",
                "title": "Fix login",
                "url": "https://linear.app/acme/issue/HK-1",
                "description": "...",
                "labels": {"nodes": [{"name": "bug"}]},
            }
        """
        label_nodes = (payload.get("labels") or {}).get("nodes") or []
        return cls.model_validate(
            {
                "identifier": payload.get("identifier"),
                "title": payload.get("title"),
                "url": payload.get("url"),
                "description": payload.get("description"),
                "labels": [
                    node["name"] for node in label_nodes if node and node.get("name")
                ],
            }
        )
