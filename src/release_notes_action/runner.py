"""Orchestrator for one run of the release-notes action.

This module ties together all the components:
- Commit listing and comment posting (context/github.py)
- Issue lookups (context/linear.py)
- Issue-key resolution (resolver.py)
- Release-message extraction (extractor.py)
- Comment composition (composer.py)

The runner follows this flow:
1. Read the triggering pull request from the host context
2. Fetch the PR commits and resolve the Linear issue keys they reference
3. Fetch each issue, skipping the ones that can't be retrieved
4. Compose the comment and post it once

All I/O is awaited sequentially so issues are handled in the order their
keys first appear in the commit list.
"""

from __future__ import annotations

import asyncio
import sys

from release_notes_action.action import ActionContextProtocol, GitHubActionsContext
from release_notes_action.composer import (
    compose_comment_body,
    format_for_google_chat,
    truncation_warning,
)
from release_notes_action.config import ActionConfig
from release_notes_action.context.github import GitHubClient, GitHubClientProtocol
from release_notes_action.context.linear import LinearClient, LinearClientProtocol
from release_notes_action.extractor import extract_last_release_message
from release_notes_action.logging_config import setup_logging
from release_notes_action.resolver import resolve_issue_ids
from release_notes_action.schemas import IssueRecord

class ReleaseNotesRunner:
    """Runs the release-notes pipeline for the triggering pull request.

    Each runner is used for a single run; nothing is kept between runs.

    Usage:
        runner = ReleaseNotesRunner(context)
        posted = await runner.run()
    """

    def __init__(
        self,
        context: ActionContextProtocol,
        config: ActionConfig | None = None,
        github: GitHubClientProtocol | None = None,
        linear: LinearClientProtocol | None = None,
    ) -> None:
        """Initialize the runner with its collaborators.

        Args:
            context: Host context (inputs, logging, pull request)
            config: Run configuration. Read from the context inputs if None.
            github: GitHub client. Built from the config if None.
            linear: Linear client. Built from the config if None.
        """
        self.context = context
        self.config = config or ActionConfig.from_context(context)
        self.github = github or GitHubClient(
            token=self.config.github_token,
            page_size=self.config.page_size,
            max_commits=self.config.max_commits,
            timeout=self.config.timeout,
        )
        self.linear = linear or LinearClient(
            api_key=self.config.linear_token,
            timeout=self.config.timeout,
        )

    async def fetch_issues(self, issue_ids: list[str]) -> list[IssueRecord]:
        """Fetch issues in order.

        A lookup that fails for any reason drops that issue from the comment
        and never fails the run.
        """
        issues: list[IssueRecord] = []
        for issue_id in issue_ids:
            self.context.info(f"Getting data for issue {issue_id}...")
            try:
                issues.append(await self.linear.get_issue(issue_id))
            except Exception as e:
                self.context.info("Could not retrieve issue.")
                self.context.info(str(e))
                self.context.error(
                    f"Lookup of issue {issue_id} failed: {e}",
                    issue_id=issue_id,
                    error_type=type(e).__name__,
                )
        return issues

    async def run(self) -> str | None:
        """Run the pipeline once.

        Returns:
            The posted comment body, or None when there was nothing to post

        Raises:
            ValueError: If the run wasn't triggered by a pull request
            httpx.HTTPStatusError: If listing commits or posting fails
        """
        pull_request = self.context.pull_request
        if pull_request is None:
            raise ValueError("No pull request found.")

        self.context.info(
            f"Getting commits for PR number {pull_request.number}...",
            repo=pull_request.repo,
        )
        commit_page = await self.github.list_pull_request_commits(
            pull_request.repo, pull_request.number
        )
        self.context.info(f"Found {len(commit_page.commits)} commits.")
        for message in commit_page.messages:
            self.context.info(f"Commit message: {message}")

        issue_ids = resolve_issue_ids(commit_page.messages, self.config.issue_prefix)
        if not issue_ids:
            self.context.info("No Linear issue IDs detected")
            return None
        self.context.info(f"Linear issue IDs detected: {', '.join(issue_ids)}")

        issues = await self.fetch_issues(issue_ids)

        comment_body = compose_comment_body(
            issues,
            extract=extract_last_release_message,
            label_priority=self.config.label_priority,
        )
        if not comment_body:
            self.context.info("No comment to add to pull request")
            return None

        warning = (
            truncation_warning(self.config.max_commits) if commit_page.truncated else ""
        )
        body = warning + format_for_google_chat(comment_body)

        self.context.info("Adding comment to pull request...")
        await self.github.create_comment(pull_request.repo, pull_request.number, body)
        return body


# ---------------------------------------------------------------------------
# CLI Entry Point
# ---------------------------------------------------------------------------


def main() -> None:
    """Console entry point used by the action's ``runs`` step.

    Usage (inside a workflow):
        release-notes-action

    Any failure is reported once through the context and the process
    exits with status 1.
    """
    setup_logging()
    context = GitHubActionsContext.from_environment()
    try:
        runner = ReleaseNotesRunner(context)
        asyncio.run(runner.run())
    except Exception as e:
        context.set_failed(e)

    if context.exit_code:
        sys.exit(context.exit_code)


if __name__ == "__main__":
    main()
