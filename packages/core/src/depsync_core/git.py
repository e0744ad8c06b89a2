"""Thin wrapper around the git command line.

Every method returns the git exit status (or a bool for commit) rather than
raising, so callers decide which failures are fatal. The one exception is
checkout_base: if the working tree cannot be reset onto the base branch the
run must not start.

Only checkout_base stashes, so leftovers from outside the run are kept. Edits
made by the run itself are thrown away with discard_changes, which leaves no
stash entry behind.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(OSError):
    """A git operation failed in a way that leaves the working tree in an unknown state."""


class GitExecutor:
    def __init__(self, directory: str | Path):
        self.dir = Path(directory)

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        logger.debug("git %s (in %s)", " ".join(args), self.dir)
        result = subprocess.run(["git", *args], cwd=self.dir, capture_output=True, text=True)
        if result.returncode != 0:
            logger.debug("git %s exited %d: %s", args[0], result.returncode, (result.stderr or "").strip())
        return result

    def stash(self) -> int:
        return self._run("stash", "--include-untracked").returncode

    def discard_changes(self) -> int:
        """Reset tracked files to HEAD and delete untracked ones."""
        status = self._run("reset", "--hard", "HEAD").returncode
        if status != 0:
            return status
        return self._run("clean", "-fd").returncode

    def checkout_base(self, branch: str) -> None:
        """Stash any leftovers and switch to the base branch."""
        if self.stash() != 0:
            raise GitError(f"Failed to stash changes in {self.dir}")
        if self._run("checkout", branch).returncode != 0:
            raise GitError(f"Failed to checkout {branch} in {self.dir}")

    def create_branch(self, name: str) -> int:
        return self._run("checkout", "-b", name).returncode

    def delete_branch(self, name: str) -> int:
        return self._run("branch", "-D", name).returncode

    def commit_all(self, message: str) -> bool:
        if self._run("add", "-A").returncode != 0:
            return False
        return self._run("commit", "-m", message).returncode == 0

    def push_force(self, local_ref: str, remote_ref: str | None = None) -> int:
        refspec = local_ref if remote_ref is None else f"{local_ref}:{remote_ref}"
        return self._run("push", "-f", "origin", refspec).returncode

    def set_remote_url(self, url: str) -> int:
        return self._run("remote", "set-url", "origin", url).returncode
