"""Pending-change issue helpers.

The deferred change list is stored as a markdown table in an issue comment,
tagged with a hidden marker so it can be read back:

    <!-- depsync-pending -->
    | Kind | Dependency | Version |
    |------|------------|---------|
    | `mvn` | `io.acme:bar` | `9.9.9` |

The most recent comment carrying the marker wins; the issue body is checked
first so an issue edited by hand still loads.
"""

from __future__ import annotations

import re

from depsync_core.models import DependencyChange

PENDING_MARKER = "<!-- depsync-pending -->"

_ROW_RE = re.compile(r"^\|\s*`([^`]+)`\s*\|\s*`([^`]+)`\s*\|\s*`([^`]+)`\s*\|\s*$")


def get_open_issues(repo, config: dict) -> list:
    labels = config.get("issue_labels") or []
    if labels:
        issues = repo.get_issues(state="open", labels=labels)
    else:
        issues = repo.get_issues(state="open")
    # The issues API also returns pull requests.
    return [issue for issue in issues if issue.pull_request is None]


def find_issue(issues: list, title: str):
    for issue in issues or []:
        if issue.title == title:
            return issue
    return None


def create_issue(repo, config: dict):
    return repo.create_issue(
        title=config["pending_issue_title"],
        body="depsync could not yet apply some dependency changes; they are retried on every run.",
        labels=list(config.get("issue_labels") or []),
    )


def format_pending_changes(changes: list[DependencyChange]) -> str:
    lines = [PENDING_MARKER, "Pending dependency changes:\n"]
    lines.append("| Kind | Dependency | Version |")
    lines.append("|------|------------|---------|")
    for change in changes:
        lines.append(f"| `{change.kind}` | `{change.dependency}` | `{change.version}` |")
    return "\n".join(lines)


def parse_pending_changes(text: str) -> list[DependencyChange]:
    changes = []
    for line in (text or "").splitlines():
        match = _ROW_RE.match(line.strip())
        if match:
            changes.append(DependencyChange(*match.groups()))
    return changes


def add_pending_changes_comment(issue, changes: list[DependencyChange]) -> None:
    issue.create_comment(format_pending_changes(changes))


def load_pending_changes_from_issue(issue) -> list[DependencyChange]:
    latest = None
    if PENDING_MARKER in (issue.body or ""):
        latest = issue.body
    for comment in issue.get_comments():
        if PENDING_MARKER in (comment.body or ""):
            latest = comment.body
    if latest is None:
        return []
    return parse_pending_changes(latest)
