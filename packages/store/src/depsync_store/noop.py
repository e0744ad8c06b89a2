"""No-op store — used for plain git repositories with no collaboration host.

Changes are still applied and committed locally; there is simply nowhere to
record deferred changes. Using a NoOpStore rather than None lets the engine
always call load()/reconcile() without conditional checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from depsync_store.base import BasePendingStore
from depsync_store.models import PendingRecord

if TYPE_CHECKING:
    from depsync_core.context import RunContext
    from depsync_core.models import DependencyChange


class NoOpStore(BasePendingStore):
    def load(self, context: RunContext) -> PendingRecord:
        return PendingRecord()

    def reconcile(
        self, context: RunContext, invalid_changes: list[DependencyChange], previous: PendingRecord
    ) -> str:
        return "unchanged"
