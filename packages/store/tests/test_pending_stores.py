"""Tests for depsync-store implementations."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from depsync_core.config import DEFAULT_CONFIG
from depsync_core.context import RunContext
from depsync_core.gh.issues import format_pending_changes
from depsync_core.models import DependencyChange
from depsync_store.issue import IssueStore
from depsync_store.models import PendingRecord
from depsync_store.noop import NoOpStore

BAR = DependencyChange("mvn", "io.acme:bar", "9.9.9")
BAZ = DependencyChange("mvn", "io.acme:baz", "1.0.0")


def _config():
    return {**DEFAULT_CONFIG, "issue_labels": ["depsync"]}


def _issue(title="depsync pending changes", comments=()):
    issue = MagicMock()
    issue.title = title
    issue.body = ""
    issue.pull_request = None
    issue.html_url = "https://github.com/owner/repo/issues/3"
    issue.get_comments.return_value = [MagicMock(body=c) for c in comments]
    return issue


def _repo(issues=()):
    repo = MagicMock()
    repo.full_name = "owner/repo"
    repo.get_issues.return_value = list(issues)
    return repo


def _context(tmp_path, repo):
    return RunContext(config=_config(), dir=tmp_path, github_repo=repo)


# ---------------------------------------------------------------------------
# NoOpStore
# ---------------------------------------------------------------------------


class TestNoOpStore:
    def test_load_returns_empty_record(self, tmp_path):
        record = NoOpStore().load(_context(tmp_path, None))
        assert record.changes == []
        assert not record.exists

    def test_reconcile_never_writes(self, tmp_path):
        assert NoOpStore().reconcile(_context(tmp_path, None), [BAR], PendingRecord()) == "unchanged"

    def test_close_does_not_raise(self):
        NoOpStore().close()


# ---------------------------------------------------------------------------
# IssueStore.load
# ---------------------------------------------------------------------------


class TestIssueStoreLoad:
    def test_loads_changes_from_matching_issue(self, tmp_path):
        issue = _issue(comments=[format_pending_changes([BAR, BAZ])])
        record = IssueStore(_config()).load(_context(tmp_path, _repo([issue])))
        assert record.changes == [BAR, BAZ]
        assert record.issue is issue

    def test_ignores_issues_with_other_titles(self, tmp_path):
        issue = _issue(title="Something else", comments=[format_pending_changes([BAR])])
        record = IssueStore(_config()).load(_context(tmp_path, _repo([issue])))
        assert record.changes == []
        assert record.issue is None

    def test_no_issue(self, tmp_path):
        record = IssueStore(_config()).load(_context(tmp_path, _repo()))
        assert record == PendingRecord()

    def test_no_repository(self, tmp_path):
        assert IssueStore(_config()).load(_context(tmp_path, None)).changes == []


# ---------------------------------------------------------------------------
# IssueStore.reconcile
# ---------------------------------------------------------------------------


class TestIssueStoreReconcile:
    def test_unchanged_set_writes_nothing(self, tmp_path):
        issue = _issue()
        repo = _repo([issue])
        action = IssueStore(_config()).reconcile(
            _context(tmp_path, repo), [BAZ, BAR], PendingRecord(changes=[BAR, BAZ], issue=issue)
        )
        assert action == "unchanged"
        issue.create_comment.assert_not_called()
        issue.edit.assert_not_called()
        repo.create_issue.assert_not_called()

    def test_empty_set_closes_existing_issue(self, tmp_path):
        issue = _issue()
        action = IssueStore(_config()).reconcile(
            _context(tmp_path, _repo([issue])), [], PendingRecord(changes=[BAR], issue=issue)
        )
        assert action == "closed"
        issue.create_comment.assert_called_once_with("No more pending changes")
        issue.edit.assert_called_once_with(state="closed")

    def test_empty_set_without_record_is_noop(self, tmp_path):
        repo = _repo()
        action = IssueStore(_config()).reconcile(_context(tmp_path, repo), [], PendingRecord())
        assert action == "unchanged"
        repo.create_issue.assert_not_called()

    def test_creates_issue_when_none_exists(self, tmp_path):
        repo = _repo()
        action = IssueStore(_config()).reconcile(_context(tmp_path, repo), [BAR], PendingRecord())

        assert action == "created"
        kwargs = repo.create_issue.call_args.kwargs
        assert kwargs["title"] == "depsync pending changes"
        assert kwargs["labels"] == ["depsync"]
        comment = repo.create_issue.return_value.create_comment.call_args.args[0]
        assert "`io.acme:bar`" in comment

    def test_updates_existing_issue_when_set_differs(self, tmp_path):
        issue = _issue()
        repo = _repo([issue])
        action = IssueStore(_config()).reconcile(
            _context(tmp_path, repo), [BAR, BAZ], PendingRecord(changes=[BAR], issue=issue)
        )
        assert action == "updated"
        repo.create_issue.assert_not_called()
        comment = issue.create_comment.call_args.args[0]
        assert "`io.acme:baz`" in comment
        issue.edit.assert_not_called()

    def test_comment_round_trips_through_load(self, tmp_path):
        repo = _repo()
        store = IssueStore(_config())
        store.reconcile(_context(tmp_path, repo), [BAR, BAZ], PendingRecord())
        posted = repo.create_issue.return_value.create_comment.call_args.args[0]

        record = store.load(_context(tmp_path, _repo([_issue(comments=[posted])])))
        assert set(record.changes) == {BAR, BAZ}

    @pytest.mark.parametrize("invalid", [[], [BAR]])
    def test_no_repository_never_writes(self, tmp_path, invalid):
        assert IssueStore(_config()).reconcile(_context(tmp_path, None), invalid, PendingRecord()) == "unchanged"
