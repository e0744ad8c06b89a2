"""IssueStore — pending changes tracked in a GitHub issue.

Why an issue:
- Visible: whoever owns the repository sees which bumps are blocked and why,
  without access to the machine that ran depsync.
- Durable across CI runs: no cache or database to carry between jobs.
- Self-closing: once every deferred change validates, the issue is closed
  with a final comment, so an open issue always means real pending work.

One issue per repository, found by exact title (``pending_issue_title``)
among open issues carrying ``issue_labels``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from depsync_core.gh.issues import (
    add_pending_changes_comment,
    create_issue,
    find_issue,
    get_open_issues,
    load_pending_changes_from_issue,
)
from depsync_store.base import BasePendingStore
from depsync_store.models import PendingRecord

if TYPE_CHECKING:
    from depsync_core.context import RunContext
    from depsync_core.models import DependencyChange

logger = logging.getLogger(__name__)

_CLOSING_COMMENT = "No more pending changes"


class IssueStore(BasePendingStore):
    def __init__(self, config: dict):
        self._config = config

    def _find_issue(self, repo):
        issues = get_open_issues(repo, self._config)
        return find_issue(issues, self._config["pending_issue_title"])

    def load(self, context: RunContext) -> PendingRecord:
        repo = context.github_repo
        if repo is None:
            return PendingRecord()
        issue = self._find_issue(repo)
        if issue is None:
            return PendingRecord()
        changes = load_pending_changes_from_issue(issue)
        logger.debug("Loaded %d pending change(s) from %s", len(changes), issue.html_url)
        return PendingRecord(changes=changes, issue=issue)

    def reconcile(
        self, context: RunContext, invalid_changes: list[DependencyChange], previous: PendingRecord
    ) -> str:
        repo = context.github_repo
        if repo is None:
            return "unchanged"

        issue = previous.issue
        if set(invalid_changes) == set(previous.changes):
            if issue is not None:
                logger.debug("Pending changes unchanged so not modifying the issue")
            return "unchanged"

        if not invalid_changes:
            if issue is None:
                return "unchanged"
            logger.info("Closing issue %s as there are no further pending changes", issue.html_url)
            issue.create_comment(_CLOSING_COMMENT)
            issue.edit(state="closed")
            return "closed"

        if issue is None:
            issue = create_issue(repo, self._config)
            logger.info("Created issue %s", issue.html_url)
            action = "created"
        else:
            logger.info("Modifying issue %s", issue.html_url)
            action = "updated"
        add_pending_changes_comment(issue, invalid_changes)
        return action
