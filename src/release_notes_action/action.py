"""Host context for running inside a GitHub Actions job.

The runner never reads environment variables or prints directly; it is
handed a context object that provides workflow inputs, logging, failure
reporting and the triggering pull request. GitHubActionsContext is the
real one, MockActionContext records everything for tests.

Design notes:
- Uses a Protocol so the runner doesn't depend on the concrete context
- Inputs follow the Actions convention: ``with: {github-token: ...}``
  arrives as the ``INPUT_GITHUB-TOKEN`` environment variable
- The event payload is the JSON file at ``GITHUB_EVENT_PATH``

Actions docs: https://docs.github.com/en/actions/reference/variables-reference
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from release_notes_action.logging_config import get_logger
from release_notes_action.schemas import PullRequestRef

# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class ActionContextProtocol(Protocol):
    """Everything the runner needs from the host platform."""

    @property
    def pull_request(self) -> PullRequestRef | None:
        """The triggering pull request, or None for other events."""
        ...

    def get_input(self, name: str, required: bool = False) -> str:
        ...

    def info(self, message: str, **fields: Any) -> None:
        ...

    def debug(self, message: str, **fields: Any) -> None:
        ...

    def error(self, message: str, **fields: Any) -> None:
        ...

    def set_failed(self, error: BaseException | str) -> None:
        ...


def input_env_name(name: str) -> str:
    """Environment variable GitHub Actions uses for a ``with:`` input."""
    return "INPUT_" + name.replace(" ", "_").upper()


def load_event_payload(path: str | Path | None) -> dict[str, Any]:
    """Load the webhook payload that triggered the workflow.

    Returns an empty dict when no event file is available.
    """
    if not path:
        return {}
    event_path = Path(path)
    if not event_path.exists():
        return {}
    return json.loads(event_path.read_text(encoding="utf-8"))


def pull_request_from_event(
    payload: Mapping[str, Any], repository: str | None = None
) -> PullRequestRef | None:
    """Extract the pull request reference from an event payload."""
    pull_request = payload.get("pull_request")
    if not pull_request:
        return None
    repo = repository or (payload.get("repository") or {}).get("full_name")
    return PullRequestRef(repo=repo, number=pull_request["number"])


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class GitHubActionsContext:
    """Context backed by the Actions runner environment.

    Usage:
        context = GitHubActionsContext.from_environment()
        token = context.get_input("github-token", required=True)
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        event: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize the context.

        Args:
            environ: Environment variables. Defaults to os.environ.
            event: Event payload. Loaded from GITHUB_EVENT_PATH if not provided.
        """
        self._environ = environ if environ is not None else os.environ
        self._event = event
        self._logger = get_logger("release_notes_action")
        self.exit_code = 0

    @classmethod
    def from_environment(cls) -> GitHubActionsContext:
        return cls()

    @property
    def pull_request(self) -> PullRequestRef | None:
        if self._event is None:
            self._event = load_event_payload(self._environ.get("GITHUB_EVENT_PATH"))
        return pull_request_from_event(
            self._event, self._environ.get("GITHUB_REPOSITORY")
        )

    def get_input(self, name: str, required: bool = False) -> str:
        """Read a workflow input.

        Raises:
            ValueError: If the input is required and empty or missing
        """
        value = self._environ.get(input_env_name(name), "").strip()
        if required and not value:
            raise ValueError(f"Input required and not supplied: {name}")
        return value

    def info(self, message: str, **fields: Any) -> None:
        self._logger.info(message, **fields)

    def debug(self, message: str, **fields: Any) -> None:
        self._logger.debug(message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._logger.error(message, **fields)

    def set_failed(self, error: BaseException | str) -> None:
        """Report the run as failed; the process should exit non-zero."""
        self.exit_code = 1
        if isinstance(error, BaseException):
            self._logger.error(str(error) or type(error).__name__, exc_info=error)
        else:
            self._logger.error(error)


# ---------------------------------------------------------------------------
# Mock Implementation (for testing)
# ---------------------------------------------------------------------------


class MockActionContext:
    """Context that records messages instead of logging them.

    Usage:
        context = MockActionContext(
            inputs={"github-token": "t", "linear-token": "l"},
            pull_request=PullRequestRef(repo="myorg/api", number=7),
        )
    """

    def __init__(
        self,
        inputs: dict[str, str] | None = None,
        pull_request: PullRequestRef | None = None,
    ) -> None:
        self._inputs = inputs or {}
        self._pull_request = pull_request
        self.messages: list[tuple[str, str]] = []
        self.failures: list[BaseException | str] = []
        self.exit_code = 0

    @property
    def pull_request(self) -> PullRequestRef | None:
        return self._pull_request

    def get_input(self, name: str, required: bool = False) -> str:
        value = self._inputs.get(name, "").strip()
        if required and not value:
            raise ValueError(f"Input required and not supplied: {name}")
        return value

    def info(self, message: str, **fields: Any) -> None:
        self.messages.append(("info", message))

    def debug(self, message: str, **fields: Any) -> None:
        self.messages.append(("debug", message))

    def error(self, message: str, **fields: Any) -> None:
        self.messages.append(("error", message))

    def set_failed(self, error: BaseException | str) -> None:
        self.exit_code = 1
        self.failures.append(error)

    def logged(self, level: str) -> list[str]:
        """Messages recorded at one level, in order."""
        return [message for lvl, message in self.messages if lvl == level]
