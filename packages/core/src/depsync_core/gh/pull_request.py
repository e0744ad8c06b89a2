from __future__ import annotations

import logging
import time

from github import Github

logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def _label_names(item) -> set[str]:
    return {label.name for label in (item.labels or [])}


def get_open_pull_requests(repo, config: dict) -> list:
    """Open PRs against the base branch, restricted to our labels when configured."""
    pulls = list(repo.get_pulls(state="open", base=config.get("base_branch", "master")))
    labels = set(config.get("pr_labels") or [])
    if not labels:
        return pulls
    return [pr for pr in pulls if _label_names(pr) & labels]


def find_pull_request(pull_requests: list, prefix: str):
    """Return the first open PR whose title starts with the logical title prefix, or None."""
    for pr in pull_requests or []:
        title = pr.title
        if title is not None and title.startswith(prefix):
            return pr
    return None


def is_mergeable(pr, retries: int = 5, wait: float = 1.0) -> bool:
    """Return whether GitHub considers the PR cleanly mergeable.

    GitHub computes the flag lazily, so ``mergeable`` is often None right
    after a push. Refresh a few times; if it is still unknown, assume the PR
    is mergeable rather than rewriting a branch that may be fine.
    """
    for attempt in range(retries):
        mergeable = pr.mergeable
        if mergeable is not None:
            return bool(mergeable)
        if attempt < retries - 1:
            time.sleep(wait)
            pr.update()
    logger.warning("Mergeable flag still unknown on %s; assuming it is mergeable", pr.html_url)
    return True
