"""Structured logging configuration.

This module sets up structured logging using structlog. The same event
style is used everywhere:

    logger.info("commits_fetched", repo="myorg/api", count=42)

Three rendering modes are supported:
- development: pretty-printed, colorized console output
- production: one JSON object per line
- github-actions: GitHub workflow commands (``::debug::``, ``::error::``)
  so the runner folds debug output and annotates errors

Usage:
    from release_notes_action.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info("comment_posted", pr_number=123)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

GITHUB_ACTIONS_ENV = "github-actions"

# Levels that map onto a GitHub workflow command. Anything else is
# printed as a plain line.
_WORKFLOW_COMMANDS = {
    "debug": "::debug::",
    "warning": "::warning::",
    "error": "::error::",
    "critical": "::error::",
}


def _escape_workflow_data(value: str) -> str:
    """Escape a message so multi-line text survives a workflow command."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def render_workflow_command(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> str:
    """Render an event as a GitHub Actions workflow command line."""
    event = str(event_dict.pop("event", ""))
    level = event_dict.pop("level", method_name)
    event_dict.pop("timestamp", None)
    exc = event_dict.pop("exception", None)

    fields = " ".join(f"{key}={value}" for key, value in event_dict.items())
    line = f"{event} {fields}" if fields else event
    if exc:
        line = f"{line}\n{exc}"

    prefix = _WORKFLOW_COMMANDS.get(level)
    if prefix is None:
        return line
    return prefix + _escape_workflow_data(line)


def resolve_environment(environment: str | None = None) -> str:
    """Pick the rendering mode.

    An explicit argument wins, then the ENVIRONMENT variable. Inside a
    GitHub Actions runner (GITHUB_ACTIONS=true) the workflow-command
    renderer is the default.
    """
    if environment:
        return environment
    if "ENVIRONMENT" in os.environ:
        return os.environ["ENVIRONMENT"]
    if os.environ.get("GITHUB_ACTIONS") == "true":
        return GITHUB_ACTIONS_ENV
    return "development"


def setup_logging(
    environment: str | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structured logging for the action.

    Args:
        environment: "development", "production" or "github-actions".
                     Resolved by resolve_environment() if not provided.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                   Reads from LOG_LEVEL env var if not provided. Defaults
                   to DEBUG on a GitHub runner, which hides ::debug:: lines
                   itself unless step debugging is enabled. The
                   standard-library root logger never goes below INFO.
    """
    env = resolve_environment(environment)
    default_level = "DEBUG" if env == GITHUB_ACTIONS_ENV else "INFO"
    level = log_level or os.environ.get("LOG_LEVEL", default_level)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if env == "production":
        renderer = structlog.processors.JSONRenderer()
    elif env == GITHUB_ACTIONS_ENV:
        renderer = render_workflow_command
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # httpx and httpcore log through the standard library as plain text,
    # which the runner can't fold, so their DEBUG traces stay off.
    stdlib_level = max(getattr(logging, level.upper()), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=stdlib_level,
    )
    logging.getLogger().setLevel(stdlib_level)


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        A structlog bound logger
    """
    return structlog.get_logger(name)
