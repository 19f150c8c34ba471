"""Release Notes Action.

A pull-request automation step that collects release messages from the
Linear issues referenced in a PR's commits and posts them as a single
summary comment on the pull request.
"""

__version__ = "0.1.0"
