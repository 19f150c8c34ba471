"""Runtime configuration for the action.

Only the two API credentials come from the workflow (``with:`` inputs);
everything else is a fixed default that tests and callers may override
when constructing the model directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from release_notes_action.composer import ISSUE_TYPE_LABELS
from release_notes_action.resolver import DEFAULT_ISSUE_PREFIX

if TYPE_CHECKING:
    from release_notes_action.action import ActionContextProtocol

GITHUB_TOKEN_INPUT = "github-token"
LINEAR_TOKEN_INPUT = "linear-token"


class ActionConfig(BaseModel):
    """Configuration for one run of the action.

    Attributes:
        github_token: Token used for the GitHub REST API
        linear_token: Linear personal API key
        issue_prefix: Linear team key commits are tagged with
        label_priority: Issue-type labels, most significant first
        page_size: Commits requested per GitHub page
        max_commits: Hard ceiling GitHub applies to the PR commits listing
        timeout: HTTP timeout in seconds
    """

    github_token: str = Field(..., min_length=1)
    linear_token: str = Field(..., min_length=1)
    issue_prefix: str = DEFAULT_ISSUE_PREFIX
    label_priority: tuple[str, ...] = ISSUE_TYPE_LABELS
    page_size: int = Field(100, gt=0, le=100)
    max_commits: int = Field(250, gt=0)
    timeout: float = 30.0

    @classmethod
    def from_context(cls, context: ActionContextProtocol) -> ActionConfig:
        """Read the credentials from the workflow inputs.

        Raises:
            ValueError: If either input is missing
        """
        return cls(
            github_token=context.get_input(GITHUB_TOKEN_INPUT, required=True),
            linear_token=context.get_input(LINEAR_TOKEN_INPUT, required=True),
        )
