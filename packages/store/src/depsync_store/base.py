"""Abstract pending-change store interface.

A pending store remembers the changes that failed validation so the next run
retries them. The engine depends on BasePendingStore, not on a concrete
backend, so a repository without a collaboration host can run with the
no-op store and nothing else in the flow changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depsync_core.context import RunContext
    from depsync_core.models import DependencyChange
    from depsync_store.models import PendingRecord


class BasePendingStore(ABC):
    """Durable record of deferred dependency changes.

    load() and reconcile() are called once each per run. The record returned
    by load() is passed back into reconcile() explicitly; stores keep no
    per-run state of their own.
    """

    @abstractmethod
    def load(self, context: RunContext) -> PendingRecord:
        """Return the currently recorded pending changes (empty record if none)."""

    @abstractmethod
    def reconcile(
        self, context: RunContext, invalid_changes: list[DependencyChange], previous: PendingRecord
    ) -> str:
        """Bring the record in line with this run's invalid changes.

        Returns the action taken: "unchanged", "closed", "created" or "updated".
        Writes nothing when the set of changes is the same as ``previous``.
        """

    def close(self) -> None:
        """Release any resources held by the store.

        Optional. The default is a no-op so callers can always call close() safely.
        """
