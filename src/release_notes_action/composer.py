"""Comment composition for the pull-request release-notes summary.

Each issue becomes one block:

    **TECH (bug): Fix login redirect**
    Users are no longer sent to a blank page after signing in.
    **Link:** https://linear.app/acme/issue/HK-1

Blocks are separated by a blank line and keep the order the issues were
resolved in. The comment is pasted into Google Chat by release managers,
so the final body is wrapped in a code fence and uses Chat's single-star
bold marker (see format_for_google_chat).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from release_notes_action.extractor import extract_last_release_message
from release_notes_action.schemas import IssueRecord

HEADING_TAG = "TECH"

# Checked in this order; the first one present on an issue wins.
ISSUE_TYPE_LABELS: tuple[str, ...] = ("bug", "feature", "chore")

_QUOTE_TRANSLATION = str.maketrans(
    {
        "`": '"',
        "“": '"',  # left double quotation mark
        "”": '"',  # right double quotation mark
        "„": '"',  # double low-9 quotation mark
        "″": '"',  # double prime
    }
)

CHAT_FENCE = "```"


def issue_type_for(
    labels: Iterable[str],
    label_priority: Sequence[str] = ISSUE_TYPE_LABELS,
) -> str | None:
    """Return the first label of ``label_priority`` found in ``labels``."""
    present = {label.lower() for label in labels}
    for candidate in label_priority:
        if candidate.lower() in present:
            return candidate
    return None


def normalize_title(title: str) -> str:
    return title.translate(_QUOTE_TRANSLATION).strip()


def format_issue_block(
    issue: IssueRecord,
    release_message: str | None,
    label_priority: Sequence[str] = ISSUE_TYPE_LABELS,
) -> str:
    """Format one issue as a heading, optional release message and link."""
    issue_type = issue_type_for(issue.labels, label_priority)
    heading = f"**{HEADING_TAG}"
    if issue_type:
        heading += f" ({issue_type})"
    heading += f": {normalize_title(issue.title)}**"

    lines = [heading]
    if release_message:
        lines.append(release_message)
    lines.append(f"**Link:** {issue.url}")
    return "\n".join(lines) + "\n\n"


def compose_comment_body(
    issues: Iterable[IssueRecord],
    extract: Callable[[str | None], str | None] = extract_last_release_message,
    label_priority: Sequence[str] = ISSUE_TYPE_LABELS,
) -> str:
    """Merge issues and their release messages into one comment body.

    Args:
        issues: Issue records in the order their keys were resolved
        extract: Pulls the release message out of an issue description
        label_priority: Issue-type labels, most significant first

    Returns:
        The concatenated blocks, or an empty string when there are no issues
    """
    return "".join(
        format_issue_block(issue, extract(issue.description), label_priority)
        for issue in issues
    )


def format_for_google_chat(comment_body: str) -> str:
    """Wrap a body in a code fence and convert ``**bold**`` to ``*bold*``."""
    return f"{CHAT_FENCE}\n{comment_body.replace('**', '*')}{CHAT_FENCE}"


def truncation_warning(max_commits: int) -> str:
    """Warning line for PRs whose commit list hit GitHub's ceiling."""
    return (
        f"### Warning: Github API returns a maximum of {max_commits} commits. "
        "Some release notes may be missing.\n\n"
    )
