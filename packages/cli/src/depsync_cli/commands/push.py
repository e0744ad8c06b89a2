"""push command — apply dependency version changes to a repository."""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from github import GithubException
from rich.console import Console

from depsync_core.context import RunContext
from depsync_core.engine import run_reconciliation
from depsync_core.gh.pull_request import get_pull, get_repo
from depsync_core.git import GitError, GitExecutor
from depsync_core.models import DependencyChange, describe
from depsync_core.updaters.base import UpdaterNotFoundError, default_registry

console = Console()


def _load_changes_file(path: str) -> list[DependencyChange]:
    """Read changes from YAML: a list of ``kind:dep:version`` strings or
    ``{kind, dependency, version}`` mappings."""
    with open(path) as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("changes", [])
    changes = []
    for item in data:
        if isinstance(item, str):
            changes.append(DependencyChange.parse(item))
        else:
            changes.append(
                DependencyChange(
                    kind=str(item["kind"]),
                    dependency=str(item["dependency"]),
                    version=str(item["version"]),
                )
            )
    return changes


def _parse_changes(change_specs: tuple[str, ...], changes_file: str | None) -> list[DependencyChange]:
    changes = []
    for text in change_specs:
        try:
            changes.append(DependencyChange.parse(text))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--change")
    if changes_file:
        try:
            changes.extend(_load_changes_file(changes_file))
        except (ValueError, KeyError, TypeError) as e:
            raise click.BadParameter(f"{changes_file}: {e}", param_hint="--file")
    return changes


@click.command("push")
@click.option(
    "--dir",
    "directory",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Working copy to modify. Must be a git checkout.",
)
@click.option(
    "--repo",
    default=None,
    help="GitHub repository in owner/name format. Omit for a plain git repository.",
)
@click.option(
    "--pr",
    "pr_number",
    type=int,
    default=None,
    help="Refresh this existing pull request instead of looking one up by title. Requires --repo.",
)
@click.option("--change", "change_specs", multiple=True, help="Change as kind:dependency:version. Repeatable.")
@click.option(
    "--file",
    "changes_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file listing changes.",
)
@click.option("--dry-run", is_flag=True, help="Apply and validate but do not commit or open a PR.")
@click.option("--no-check", is_flag=True, help="Skip dependency validation and pending-change tracking.")
@click.pass_context
def push_cmd(
    ctx,
    directory: str,
    repo: str | None,
    pr_number: int | None,
    change_specs: tuple[str, ...],
    changes_file: str | None,
    dry_run: bool,
    no_check: bool,
):
    """Apply dependency version changes and open or update a pull request.

    Changes that fail validation are deferred into a pending issue and
    retried on every later run. With --repo and no changes, only the pending
    changes are retried.

    \b
    Environment variables:
      GITHUB_TOKEN         GitHub token (or use gh CLI); required with --repo
    """
    from depsync_cli.cli import _build_store

    config = dict(ctx.obj["config"]) if ctx.obj else {}
    if dry_run:
        config["dry_run"] = True
    if no_check:
        config["check_dependencies"] = False

    changes = _parse_changes(change_specs, changes_file)
    if not changes and not repo:
        raise click.UsageError(
            "No changes given. Use --change kind:dependency:version or --file, "
            "or --repo to retry pending changes."
        )
    if pr_number is not None and not repo:
        raise click.UsageError("--pr requires --repo.")

    github_repo = None
    if repo:
        token = config.get("github_token")
        if not token:
            raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")
        github_repo = get_repo(repo, token=token)

    pull_request = None
    if pr_number is not None:
        try:
            pull_request = get_pull(github_repo, pr_number)
        except GithubException as e:
            raise click.ClickException(f"Could not load pull request #{pr_number}: {e}")

    context = RunContext(config=config, dir=Path(directory), github_repo=github_repo)
    store = _build_store(config, github_repo)
    if changes:
        console.print(f"Pushing {describe(changes)} to [bold]{context.repo_name}[/bold]")
    else:
        console.print(f"Retrying pending changes in [bold]{context.repo_name}[/bold]")

    try:
        summary = run_reconciliation(
            context, changes, default_registry(), store, GitExecutor(directory), pull_request=pull_request
        )
    except (GitError, UpdaterNotFoundError, GithubException) as e:
        raise click.ClickException(f"{describe(changes)}: {e}")
    finally:
        store.close()

    if summary.status == "no_changes":
        console.print("[green]Already up to date.[/green]")
        return
    if summary.invalid:
        console.print(f"[yellow]Deferred invalid changes: {describe(summary.invalid)}[/yellow]")
    if not summary.succeeded:
        raise click.ClickException(summary.reason or "No valid changes could be applied.")

    console.print(f"[green]Applied {describe(summary.applied)}[/green]")
    if summary.sync is not None and summary.sync.action in ("push_failed", "commit_failed"):
        console.print(f"[red]Publishing failed ({summary.sync.action}); see the log above.[/red]")
        ctx.exit(1)
