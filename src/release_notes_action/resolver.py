"""Issue-reference resolution from commit messages.

Commits that belong to a Linear issue start with the issue key in square
brackets, e.g. ``[HK-123] Fix login redirect``. Only a key at the very
start of the message counts; a key mentioned later in the text is ignored.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

DEFAULT_ISSUE_PREFIX = "HK"


def _issue_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(rf"\[({re.escape(prefix)}-[0-9]+)\]")


def match_issue_id(message: str, prefix: str = DEFAULT_ISSUE_PREFIX) -> str | None:
    """Return the issue key a commit message starts with, if any."""
    match = _issue_pattern(prefix).match(message or "")
    return match.group(1) if match else None


def resolve_issue_ids(
    commit_messages: Iterable[str],
    prefix: str = DEFAULT_ISSUE_PREFIX,
) -> list[str]:
    """Extract the unique issue keys referenced by a sequence of commits.

    Args:
        commit_messages: Commit messages in PR order
        prefix: Issue key prefix (the Linear team key)

    Returns:
        Issue keys without duplicates, in order of first appearance
    """
    pattern = _issue_pattern(prefix)
    # dict keeps insertion order, so the first commit to mention a key
    # decides its position in the comment.
    seen: dict[str, None] = {}
    for message in commit_messages:
        match = pattern.match(message or "")
        if match:
            seen.setdefault(match.group(1), None)
    return list(seen)
