from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from depsync_core.models import DependencyChange


@dataclass
class PendingRecord:
    """Snapshot of the pending changes as loaded at the start of a run.

    ``issue`` is the host handle the record was read from (a PyGithub Issue
    for IssueStore), or None when no record exists yet.
    """

    changes: list[DependencyChange] = field(default_factory=list)
    issue: Any = None

    @property
    def exists(self) -> bool:
        return self.issue is not None
