"""pending command — display the changes deferred in the pending issue."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from depsync_core.context import RunContext
from depsync_core.gh.pull_request import get_repo

console = Console()


@click.command("pending")
@click.option("--repo", required=True, help="GitHub repository (owner/name).")
@click.pass_context
def pending_cmd(ctx, repo: str):
    """Show dependency changes waiting to pass validation.

    Reads the open pending issue for the repository. Changes listed here are
    retried automatically by every `depsync push` run.
    """
    from depsync_store.issue import IssueStore

    config = ctx.obj["config"] if ctx.obj else {}
    token = config.get("github_token")
    if not token:
        raise click.UsageError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")

    github_repo = get_repo(repo, token=token)
    context = RunContext(config=config, dir=Path("."), github_repo=github_repo)
    record = IssueStore(config).load(context)

    if not record.changes:
        console.print("[green]No pending changes.[/green]")
        return

    table = Table(title=f"Pending Changes — {repo}", show_header=True, header_style="bold cyan")
    table.add_column("Kind", style="bold", width=8)
    table.add_column("Dependency", max_width=50)
    table.add_column("Version", width=16)

    for change in record.changes:
        table.add_row(change.kind, change.dependency, change.version)

    console.print(table)
    if record.issue is not None:
        console.print(f"[dim]Tracked in {record.issue.html_url}[/dim]")
