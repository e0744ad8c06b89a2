"""Pull request synchronization.

Exactly one open PR exists per logical title. Each run classifies the open
PRs into one of three states and acts on it:

    ABSENT                → new branch, commit, force-push, create PR, comment, label
    OPEN_SAME_TITLE       → no-op unless rebase mode is on and the PR has conflicts
    OPEN_DIFFERENT_TITLE  → retitle + comment

A caller that already knows which PR to refresh passes it in; it is then
classified on its title alone, with no lookup among the open PRs.

The last two share the rewrite path: recommit onto a local branch named after
the PR's existing head ref and force-push over it, so the PR keeps its
number, review comments and history while its content is replaced.
"""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.console import Console

from depsync_core.gh.pull_request import find_pull_request, get_open_pull_requests, is_mergeable

if TYPE_CHECKING:
    from depsync_core.context import RunContext
    from depsync_core.git import GitExecutor

console = Console()
logger = logging.getLogger(__name__)

_REBASE_COMMENT = "[depsync] rebasing due to merge conflicts"


class PullRequestState(enum.Enum):
    ABSENT = "absent"
    OPEN_SAME_TITLE = "open_same_title"
    OPEN_DIFFERENT_TITLE = "open_different_title"


@dataclass
class PullRequestMatch:
    state: PullRequestState
    pull_request: Any = None


@dataclass
class SyncResult:
    # "created" | "unchanged" | "updated" | "push_failed" | "commit_failed" | "committed_locally"
    action: str
    pull_request: Any = None
    branch: str | None = None


def classify_pull_request(pr, title: str) -> PullRequestMatch:
    if pr.title == title:
        return PullRequestMatch(PullRequestState.OPEN_SAME_TITLE, pr)
    return PullRequestMatch(PullRequestState.OPEN_DIFFERENT_TITLE, pr)


def classify(pull_requests: list, prefix: str, title: str) -> PullRequestMatch:
    pr = find_pull_request(pull_requests, prefix)
    if pr is None:
        return PullRequestMatch(PullRequestState.ABSENT)
    return classify_pull_request(pr, title)


def _new_branch_name(config: dict) -> str:
    return f"{config.get('branch_prefix', 'depsync-')}{uuid.uuid4()}"


def _commit(context: RunContext, git: GitExecutor, branch: str) -> bool:
    if git.create_branch(branch) != 0:
        logger.warning("Could not create branch %s in %s", branch, context.dir)
        return False
    return git.commit_all(context.commit_message())


def _pin_remote_url(context: RunContext, git: GitExecutor) -> None:
    remote_url = f"git@{context.config.get('git_host', 'github.com')}:{context.github_repo.full_name}"
    if git.set_remote_url(remote_url) != 0:
        logger.warning("Could not set the remote URL to %s", remote_url)


def synchronize(context: RunContext, git: GitExecutor, pull_request=None) -> SyncResult:
    """Commit the working tree and create or update the PR for this change-set.

    With ``pull_request`` given, that PR is refreshed (retitled or rebased)
    instead of the one found by title prefix.
    """
    config = context.config
    repo = context.github_repo

    if repo is None:
        # Plain git repository: commit locally, nothing to publish.
        branch = _new_branch_name(config)
        if not _commit(context, git, branch):
            logger.warning("Failed to commit %s locally in %s", context.title(), context.dir)
            return SyncResult("commit_failed", branch=branch)
        console.print(f"[green]Committed {context.title()} to local branch {branch}[/green]")
        return SyncResult("committed_locally", branch=branch)

    if pull_request is not None:
        match = classify_pull_request(pull_request, context.title())
    else:
        pull_requests = get_open_pull_requests(repo, config)
        match = classify(pull_requests, context.title_prefix(), context.title())
    return _apply_state(context, git, match)


def _apply_state(context: RunContext, git: GitExecutor, match: PullRequestMatch) -> SyncResult:
    config = context.config
    title = context.title()
    pr = match.pull_request

    if match.state is PullRequestState.ABSENT:
        return _create_pull_request(context, git)

    if match.state is PullRequestState.OPEN_SAME_TITLE:
        if not config.get("rebase_mode", True):
            logger.debug("PR %s already up to date", pr.html_url)
            return SyncResult("unchanged", pull_request=pr)
        if is_mergeable(pr, config.get("mergeable_retries", 5), config.get("mergeable_wait", 1.0)):
            logger.debug("PR %s is mergeable; leaving it alone", pr.html_url)
            return SyncResult("unchanged", pull_request=pr)
        pr.create_issue_comment(_REBASE_COMMENT)
    else:
        pr.edit(title=title)
        pr.create_issue_comment(context.comment())

    return _rewrite_pull_request(context, git, pr)


def _create_pull_request(context: RunContext, git: GitExecutor) -> SyncResult:
    config = context.config
    repo = context.github_repo
    branch = _new_branch_name(config)

    _pin_remote_url(context, git)
    if not _commit(context, git, branch):
        logger.warning("Failed to commit %s on branch %s; not creating a PR", context.title(), branch)
        return SyncResult("commit_failed", branch=branch)

    if git.push_force(branch) != 0:
        logger.warning("Failed to push branch %s for %s", branch, context.repo_name)
        return SyncResult("push_failed", branch=branch)

    pr = repo.create_pull(
        base=config.get("base_branch", "master"),
        head=branch,
        title=context.title(),
        body=context.body(),
    )
    console.print(f"[green]Created pull request {pr.html_url}[/green]")
    pr.create_issue_comment(context.comment())
    labels = config.get("pr_labels") or []
    if labels:
        pr.set_labels(*labels)
    return SyncResult("created", pull_request=pr, branch=branch)


def _rewrite_pull_request(context: RunContext, git: GitExecutor, pr) -> SyncResult:
    remote_ref = pr.head.ref
    local_branch = remote_ref

    _pin_remote_url(context, git)
    # A stale local branch of the same name would make checkout -b fail.
    git.delete_branch(local_branch)
    if not _commit(context, git, local_branch):
        logger.warning("Failed to commit %s on branch %s for %s", context.title(), local_branch, pr.html_url)
        return SyncResult("commit_failed", pull_request=pr, branch=local_branch)

    if git.push_force(local_branch, remote_ref) != 0:
        logger.warning(
            "Failed to push branch %s to existing branch %s for %s", local_branch, remote_ref, pr.html_url
        )
        return SyncResult("push_failed", pull_request=pr, branch=local_branch)

    console.print(f"[green]Updated pull request {pr.html_url}[/green]")
    return SyncResult("updated", pull_request=pr, branch=local_branch)
