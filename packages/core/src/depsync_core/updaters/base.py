"""Base updater and the kind -> updater registry.

An updater knows how to edit the manifests of one package ecosystem:
    is_applicable()       ← does this working tree use the ecosystem at all?
    apply()               ← rewrite manifests for one change, return files modified
    check_dependencies()  ← split a group of changes into valid / invalid

Subclasses must implement the first two. check_dependencies defaults to
accepting every change, which is right for ecosystems without a cheap
consistency check.

The registry is built once at process start and passed down explicitly;
there is no module-level mutable lookup table.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from depsync_core.models import KindDependenciesCheck

if TYPE_CHECKING:
    from depsync_core.context import ChangeContext, RunContext
    from depsync_core.models import DependencyChange


class UpdaterNotFoundError(LookupError):
    """No updater is registered for a change's kind."""


class BaseUpdater(ABC):
    KIND: str = ""

    @abstractmethod
    def is_applicable(self, context: ChangeContext) -> bool:
        """Return True if the working tree contains manifests for this ecosystem."""

    @abstractmethod
    def apply(self, context: ChangeContext) -> int:
        """Apply ``context.change`` and return the number of manifests modified.

        Returning 0 means the change was not needed (e.g. the version is
        already current) and must not be counted as applied.
        """

    def check_dependencies(self, context: RunContext, changes: list[DependencyChange]) -> KindDependenciesCheck:
        return KindDependenciesCheck(valid=list(changes), invalid=[])


class UpdaterRegistry:
    def __init__(self, updaters: dict[str, BaseUpdater] | None = None):
        self._updaters: dict[str, BaseUpdater] = dict(updaters or {})

    def register(self, kind: str, updater: BaseUpdater) -> None:
        self._updaters[kind] = updater

    def get(self, kind: str) -> BaseUpdater:
        try:
            return self._updaters[kind]
        except KeyError:
            known = ", ".join(sorted(self._updaters)) or "none"
            raise UpdaterNotFoundError(f"No updater registered for kind {kind!r} (known: {known}).")

    def kinds(self) -> list[str]:
        return list(self._updaters)

    def __contains__(self, kind: str) -> bool:
        return kind in self._updaters


def default_registry() -> UpdaterRegistry:
    from depsync_core.updaters.npm import NpmUpdater

    return UpdaterRegistry({NpmUpdater.KIND: NpmUpdater()})
