"""Per-run context threaded through the reconciliation flow.

A RunContext is created fresh for every run and passed explicitly to each
step, so two repositories can be reconciled concurrently without sharing any
engine state. It also owns the text generation for titles, bodies and commit
messages, because those are derived from whichever changes actually modified
files in this run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from depsync_core.models import DependencyChange

_PR_MARKER = "<!-- depsync -->"


@dataclass
class ChangeContext:
    """What an updater sees: one change plus the run it belongs to."""

    parent: RunContext
    change: DependencyChange

    @property
    def dir(self) -> Path:
        return self.parent.dir

    @property
    def config(self) -> dict:
        return self.parent.config


@dataclass
class RunContext:
    config: dict
    dir: Path
    github_repo: Any = None  # github.Repository.Repository, or None for a plain git repository
    children: list[ChangeContext] = field(default_factory=list)

    def __post_init__(self):
        self.dir = Path(self.dir)

    # ------------------------------------------------------------------ #
    # Child contexts                                                       #
    # ------------------------------------------------------------------ #

    def create_child(self, change: DependencyChange) -> ChangeContext:
        child = ChangeContext(parent=self, change=change)
        self.children.append(child)
        return child

    def remove_child(self, child: ChangeContext) -> None:
        if child in self.children:
            self.children.remove(child)

    def reset_children(self) -> None:
        self.children = []

    @property
    def applied_changes(self) -> list[DependencyChange]:
        return [c.change for c in self.children]

    @property
    def repo_name(self) -> str:
        if self.github_repo is not None:
            return self.github_repo.full_name
        return str(self.dir)

    # ------------------------------------------------------------------ #
    # Generated text                                                       #
    # ------------------------------------------------------------------ #

    def title_prefix(self) -> str:
        """The logical title: stable across runs that touch the same dependencies."""
        names: list[str] = []
        for change in self.applied_changes:
            if change.dependency not in names:
                names.append(change.dependency)
        return f"update {', '.join(names)} to "

    def title(self) -> str:
        versions: list[str] = []
        for change in self.applied_changes:
            if change.version not in versions:
                versions.append(change.version)
        return self.title_prefix() + ", ".join(versions)

    def body(self) -> str:
        lines = ["Dependency version changes pushed by depsync.\n"]
        lines.append("| Kind | Dependency | Version |")
        lines.append("|------|------------|---------|")
        for change in self.applied_changes:
            lines.append(f"| `{change.kind}` | `{change.dependency}` | `{change.version}` |")
        lines.append(f"\n{_PR_MARKER}")
        return "\n".join(lines)

    def commit_message(self) -> str:
        details = "\n".join(f"* {change}" for change in self.applied_changes)
        return f"{self.title()}\n\n{details}\n"

    def comment(self) -> str:
        changes = " ".join(str(c) for c in self.applied_changes)
        return f"[depsync] pushed version changes: `{changes}`"
