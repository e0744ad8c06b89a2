"""CLI entry point for depsync.

Commands:
  push     — apply dependency version changes and open/update the pull request
  pending  — show the changes currently deferred in the pending issue
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from depsync_cli.commands.pending import pending_cmd
from depsync_cli.commands.push import push_cmd

console = Console()


def _build_store(config: dict, github_repo=None):
    """Instantiate the configured pending-change store.

    Store selection:
      store: issue  → IssueStore (requires a GitHub repository)
      store: noop   → NoOpStore
      no repository → NoOpStore (plain git: nothing to record deferred changes in)
    """
    from depsync_store.noop import NoOpStore

    store_type = config.get("store", "issue")

    if store_type == "issue" and github_repo is not None:
        from depsync_store.issue import IssueStore

        return IssueStore(config)

    return NoOpStore()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("depsync"),
    prog_name="depsync",
)
@click.option(
    "--config",
    "config_path",
    default=".depsync.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="DEPSYNC_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Propagate dependency version changes into pull requests."""
    from depsync_cli.auth import resolve_github_token
    from depsync_core.config import load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    ctx.obj["config"] = config


main.add_command(push_cmd)
main.add_command(pending_cmd)
