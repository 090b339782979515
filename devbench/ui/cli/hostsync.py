"""
CLI command for syncing a working copy from a source repository.

Meant to run inside the dev container, where the host checkout is
mounted; ``devbench container sync`` runs the same engine from the host.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from devbench.adapters.shell.command import ProcessRunner
from devbench.adapters.vcs.git import GitAdapter
from devbench.core.models.sync import RepositorySyncRequest
from devbench.core.services.sync_ops import SyncEngine, report_outcome
from devbench.ui.cli.console import ConsoleInteraction, load_cli_config


@click.command()
@click.option("--repo", "repo_path", default=None, help="Working copy to update (default: container.workspace).")
@click.option("--source", default=None, help="Repository to pull from (default: container.host_repo).")
@click.option("--branch", default=None, help="Branch to merge instead of the current one.")
@click.option("--yes", "-y", is_flag=True, help="Stash local changes without asking.")
@click.pass_context
def hostsync(
    ctx: click.Context,
    repo_path: str | None,
    source: str | None,
    branch: str | None,
    yes: bool,
) -> None:
    """Sync a working copy from the host repository (run inside the container)."""
    config = load_cli_config(ctx)
    repo = repo_path or config.container.workspace
    source = source or config.container.host_repo

    if not (Path(source) / ".git").is_dir():
        click.secho(f"❌ Host repository not mounted at {source}", fg="red")
        sys.exit(1)

    git = GitAdapter(repo, runner=ProcessRunner())
    if not git.has_metadata():
        click.secho(f"❌ Dev repository not found at {repo}", fg="red")
        click.echo("   Run the init command from the host to clone the repository first")
        sys.exit(1)

    ui = ConsoleInteraction(assume_yes=yes)
    request = RepositorySyncRequest(
        local_path=repo,
        remote_source=source,
        target_branch=branch,
        remote_prefix=config.container.remote_prefix,
    )
    outcome = SyncEngine(git, ui).sync(request)
    sys.exit(report_outcome(outcome, ui))
