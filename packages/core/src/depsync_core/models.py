"""Dependency change data models.

A DependencyChange is the unit everything else moves around: the engine
applies them, updaters validate them, the pending store persists the ones
that failed validation. Equality is structural so a change loaded back from
the pending issue compares equal to the same change proposed again.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DependencyChange:
    """One proposed dependency version bump."""

    kind: str  # ecosystem identifier, e.g. "npm", "mvn"
    dependency: str
    version: str

    @classmethod
    def parse(cls, text: str) -> DependencyChange:
        """Parse ``kind:dependency:version``.

        The kind is everything before the first colon and the version
        everything after the last one, so maven coordinates such as
        ``mvn:io.fabric8:foo:2.0.0`` keep their inner colon.
        """
        kind, sep, rest = text.strip().partition(":")
        dependency, sep2, version = rest.rpartition(":")
        if not sep or not sep2 or not kind or not dependency or not version:
            raise ValueError(f"Invalid change {text!r}. Expected kind:dependency:version.")
        return cls(kind=kind, dependency=dependency, version=version)

    def __str__(self) -> str:
        return f"{self.kind}:{self.dependency}:{self.version}"


@dataclass
class KindDependenciesCheck:
    """One updater's verdict on the changes of its own kind."""

    valid: list[DependencyChange] = field(default_factory=list)
    invalid: list[DependencyChange] = field(default_factory=list)


@dataclass
class DependenciesCheck:
    """Aggregated validation result across every kind in a change-set."""

    valid: list[DependencyChange] = field(default_factory=list)
    invalid: list[DependencyChange] = field(default_factory=list)
    results: dict[str, KindDependenciesCheck] = field(default_factory=dict)


def has_dependency(changes: list[DependencyChange], change: DependencyChange) -> bool:
    return change in changes


def describe(changes: list[DependencyChange]) -> str:
    """Short human-readable list used in log lines and console output."""
    if not changes:
        return "[]"
    return "[" + ", ".join(str(c) for c in changes) + "]"
