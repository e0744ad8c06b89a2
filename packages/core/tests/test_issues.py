"""Tests for pending-change issue helpers."""

from unittest.mock import MagicMock

from depsync_core.gh.issues import (
    PENDING_MARKER,
    create_issue,
    find_issue,
    format_pending_changes,
    get_open_issues,
    load_pending_changes_from_issue,
    parse_pending_changes,
)
from depsync_core.models import DependencyChange

BAR = DependencyChange("mvn", "io.acme:bar", "9.9.9")
PAD = DependencyChange("npm", "left-pad", "1.3.0")


def _issue(title="depsync pending changes", body="", comments=(), pull_request=None):
    issue = MagicMock()
    issue.title = title
    issue.body = body
    issue.pull_request = pull_request
    issue.get_comments.return_value = [MagicMock(body=c) for c in comments]
    return issue


class TestEncoding:
    def test_format_contains_marker_and_rows(self):
        text = format_pending_changes([BAR, PAD])
        assert text.startswith(PENDING_MARKER)
        assert "| `mvn` | `io.acme:bar` | `9.9.9` |" in text

    def test_parse_reads_back_formatted_table(self):
        assert parse_pending_changes(format_pending_changes([BAR, PAD])) == [BAR, PAD]

    def test_parse_ignores_header_and_prose(self):
        text = "Some text\n| Kind | Dependency | Version |\n|---|---|---|\n| `npm` | `left-pad` | `1.3.0` |\n"
        assert parse_pending_changes(text) == [PAD]

    def test_parse_none(self):
        assert parse_pending_changes(None) == []


class TestLoadPendingChanges:
    def test_latest_marked_comment_wins(self):
        issue = _issue(comments=[format_pending_changes([BAR, PAD]), "thanks!", format_pending_changes([PAD])])
        assert load_pending_changes_from_issue(issue) == [PAD]

    def test_body_used_when_no_marked_comment(self):
        issue = _issue(body=format_pending_changes([BAR]), comments=["unrelated"])
        assert load_pending_changes_from_issue(issue) == [BAR]

    def test_no_marker_anywhere(self):
        assert load_pending_changes_from_issue(_issue(body=None, comments=["hi"])) == []


class TestIssueLookup:
    def test_get_open_issues_excludes_pull_requests(self):
        issue = _issue()
        pr_issue = _issue(pull_request=MagicMock())
        repo = MagicMock()
        repo.get_issues.return_value = [issue, pr_issue]

        result = get_open_issues(repo, {"issue_labels": ["depsync"]})

        repo.get_issues.assert_called_once_with(state="open", labels=["depsync"])
        assert result == [issue]

    def test_get_open_issues_without_labels(self):
        repo = MagicMock()
        repo.get_issues.return_value = []
        get_open_issues(repo, {"issue_labels": []})
        repo.get_issues.assert_called_once_with(state="open")

    def test_find_issue_by_exact_title(self):
        wanted = _issue(title="depsync pending changes")
        others = [_issue(title="depsync pending changes (old)"), wanted]
        assert find_issue(others, "depsync pending changes") is wanted
        assert find_issue([], "depsync pending changes") is None

    def test_create_issue_uses_configured_title_and_labels(self):
        repo = MagicMock()
        create_issue(repo, {"pending_issue_title": "pending", "issue_labels": ["bot"]})
        kwargs = repo.create_issue.call_args.kwargs
        assert kwargs["title"] == "pending"
        assert kwargs["labels"] == ["bot"]
