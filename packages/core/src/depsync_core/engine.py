"""Change reconciliation: apply → validate → revert/reapply → pending → PR."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.console import Console

from depsync_core.git import GitError
from depsync_core.models import DependencyChange, describe, has_dependency
from depsync_core.sync import SyncResult, synchronize
from depsync_core.validation import check_dependency_changes, group_by_kind

if TYPE_CHECKING:
    from depsync_core.context import RunContext
    from depsync_core.git import GitExecutor
    from depsync_core.updaters.base import UpdaterRegistry
    from depsync_store.base import BasePendingStore

console = Console()
logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Result returned by run_reconciliation.

    Decoupled from the CLI so callers other than ``depsync push`` can act on
    the outcome without parsing console output.
    """

    status: str  # "no_changes" | "applied" | "failed"
    applied: list[DependencyChange] = field(default_factory=list)
    invalid: list[DependencyChange] = field(default_factory=list)
    pending_action: str | None = None
    sync: SyncResult | None = None
    reason: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status != "failed"


def push_single_version_change(context: RunContext, change: DependencyChange, registry: UpdaterRegistry) -> bool:
    updater = registry.get(change.kind)
    child = context.create_child(change)
    if updater.is_applicable(child):
        if updater.apply(child) > 0:
            return True
    context.remove_child(child)
    return False


def push_version_changes(context: RunContext, changes: list[DependencyChange], registry: UpdaterRegistry) -> bool:
    """Apply every change; return True if at least one manifest was modified."""
    answer = False
    for change in changes:
        if push_single_version_change(context, change, registry):
            answer = True
    return answer


def revert_current_changes(context: RunContext, git: GitExecutor) -> None:
    if git.discard_changes() != 0:
        raise GitError(f"Failed to discard changes in {context.dir}")
    context.reset_children()


def combine_pending_changes(
    changes: list[DependencyChange], pending_changes: list[DependencyChange]
) -> list[DependencyChange]:
    """Proposed changes followed by any pending change not already proposed."""
    if not pending_changes:
        return list(changes)
    answer = list(changes)
    for pending in pending_changes:
        if not has_dependency(changes, pending):
            answer.append(pending)
    return answer


def prepare_directory(context: RunContext, git: GitExecutor) -> None:
    git.checkout_base(context.config.get("base_branch", "master"))


def resolve_updaters(changes: list[DependencyChange], registry: UpdaterRegistry) -> None:
    """Raise UpdaterNotFoundError before any file is touched if a kind has no updater."""
    for kind in group_by_kind(changes):
        registry.get(kind)


# Sync outcomes that leave the applied edits uncommitted in the working tree.
_UNCOMMITTED_ACTIONS = ("unchanged", "commit_failed")


def run_reconciliation(
    context: RunContext,
    changes: list[DependencyChange],
    registry: UpdaterRegistry,
    store: BasePendingStore,
    git: GitExecutor,
    pull_request=None,
) -> RunSummary:
    """Run the full reconciliation flow for one repository.

    Every dependency is injected so the flow is reentrant: nothing is cached
    between calls, and concurrent runs only need distinct working directories.

    ``pull_request`` pins the run to a known open PR, which is then refreshed
    instead of being looked up by title. If anything raises once files may
    have been modified, the working tree is reverted before the error
    propagates.
    """
    prepare_directory(context, git)

    pending = store.load(context)
    if pending.changes:
        console.print(f"[cyan]Retrying pending changes {describe(pending.changes)}[/cyan]")
    steps = combine_pending_changes(changes, pending.changes)
    resolve_updaters(steps, registry)

    try:
        return _reconcile(context, steps, pending, registry, store, git, pull_request)
    except GitError:
        raise
    except Exception:
        logger.warning("Reverting the working tree after an error while processing %s", describe(steps))
        revert_current_changes(context, git)
        raise


def _reconcile(context, steps, pending, registry, store, git, pull_request) -> RunSummary:
    config = context.config

    if not push_version_changes(context, steps, registry):
        console.print("[yellow]No files modified. Nothing to do.[/yellow]")
        return RunSummary(status="no_changes")

    invalid: list[DependencyChange] = []
    pending_action = None
    if config.get("check_dependencies", True):
        check = check_dependency_changes(context, steps, registry)
        invalid = check.invalid
        if check.invalid:
            revert_current_changes(context, git)
            if check.valid and not push_version_changes(context, check.valid, registry):
                reason = (
                    f"Attempted to apply the subset of valid changes {describe(check.valid)} "
                    "but no files were modified!"
                )
                logger.warning(reason)
                return RunSummary(status="failed", invalid=invalid, reason=reason)

        pending_action = store.reconcile(context, check.invalid, pending)

        if not check.valid:
            reason = f"All changes failed validation: {describe(check.invalid)}"
            logger.warning(reason)
            return RunSummary(status="failed", invalid=invalid, pending_action=pending_action, reason=reason)

    applied = context.applied_changes
    if config.get("dry_run", False):
        console.print(f"[yellow]Dry run: leaving {describe(applied)} uncommitted in {context.dir}[/yellow]")
        return RunSummary(status="applied", applied=applied, invalid=invalid, pending_action=pending_action)

    result = synchronize(context, git, pull_request)
    if result.action in _UNCOMMITTED_ACTIONS:
        revert_current_changes(context, git)
    return RunSummary(
        status="applied", applied=applied, invalid=invalid, pending_action=pending_action, sync=result
    )
