"""Per-kind validation of a change-set."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from depsync_core.models import DependenciesCheck, describe

if TYPE_CHECKING:
    from depsync_core.context import RunContext
    from depsync_core.models import DependencyChange
    from depsync_core.updaters.base import UpdaterRegistry

logger = logging.getLogger(__name__)


def group_by_kind(changes: list[DependencyChange]) -> dict[str, list[DependencyChange]]:
    """Group changes by kind, keeping kinds in first-seen order."""
    groups: dict[str, list[DependencyChange]] = {}
    for change in changes:
        groups.setdefault(change.kind, []).append(change)
    return groups


def check_dependency_changes(
    context: RunContext, changes: list[DependencyChange], registry: UpdaterRegistry
) -> DependenciesCheck:
    """Validate every kind group with its updater and merge the partitions.

    Raises UpdaterNotFoundError if a kind has no registered updater. Every
    input change ends up in exactly one of ``valid`` / ``invalid``: anything
    an updater forgets to classify, or classifies twice, is treated as invalid
    so it can never be published unvalidated.
    """
    check = DependenciesCheck()
    groups = group_by_kind(changes)

    for kind, group in groups.items():
        updater = registry.get(kind)
        results = updater.check_dependencies(context, group)

        valid = [c for c in results.valid if c in group]
        invalid = [c for c in results.invalid if c in group]
        ambiguous = [c for c in valid if c in invalid]
        if ambiguous:
            logger.warning("Updater for %s reported %s as both valid and invalid", kind, describe(ambiguous))
            valid = [c for c in valid if c not in ambiguous]
        missing = [c for c in group if c not in valid and c not in invalid]
        if missing:
            logger.warning("Updater for %s did not classify %s; treating as invalid", kind, describe(missing))
            invalid.extend(missing)

        results.valid = valid
        results.invalid = invalid
        check.valid.extend(valid)
        check.invalid.extend(invalid)
        check.results[kind] = results

    if check.invalid:
        logger.info("Invalid changes %s, valid changes %s", describe(check.invalid), describe(check.valid))
    return check
