"""Release-message extraction from Linear issue descriptions.

Issue authors keep user-facing release notes inside the issue description,
under a marker line. An issue that changes over several iterations may
collect more than one such section; the last one in the document is the
current one. Two marker styles are recognized, one per line:

    ---Release---                 (rule style, also "--- Release notes ---")
    ## Release message            (Markdown heading, levels 1-6)

A section runs from its marker to the next marker or the end of the
description.
"""

from __future__ import annotations

import re

RELEASE_MARKER = re.compile(
    r"""
    ^[ \t]*
    (?:
        -{3,}[ \t]*release(?:[ \t]+(?:messages?|notes?))?[ \t]*-{3,}
      |
        \#{1,6}[ \t]+release(?:[ \t]+(?:messages?|notes?))?[ \t]*:?
    )
    [ \t]*\r?$
    """,
    re.IGNORECASE | re.MULTILINE | re.VERBOSE,
)


def extract_release_messages(description: str | None) -> list[str]:
    """Return every release-message section in document order, stripped."""
    if not description:
        return []

    markers = list(RELEASE_MARKER.finditer(description))
    sections = []
    for index, marker in enumerate(markers):
        end = markers[index + 1].start() if index + 1 < len(markers) else None
        sections.append(description[marker.end():end].strip())
    return sections


def extract_last_release_message(description: str | None) -> str | None:
    """Return the most recent release message in a description.

    Args:
        description: Issue description, None when the issue has none

    Returns:
        The last section's content, stripped, or None when the description
        has no marker or the last section is blank
    """
    sections = extract_release_messages(description)
    if not sections:
        return None
    return sections[-1] or None
