"""
CLI commands for installing tools: Homebrew packages and local binaries.

Thin wrappers over ``devbench.core.services.brew_ops`` and
``devbench.core.services.local_bin``.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from devbench.adapters.packages.brew import BrewAdapter
from devbench.adapters.shell.command import ProcessRunner
from devbench.core.errors import InvalidArgument, PreconditionNotMet
from devbench.ui.cli.console import ConsoleInteraction, load_cli_config


@click.command()
@click.option("--choice", default=None, help="Menu choice(s), e.g. '2,3' (skips the prompt).")
@click.pass_context
def brew(ctx: click.Context, choice: str | None) -> None:
    """Install Homebrew package groups (core, documentation, ...)."""
    from devbench.core.services.brew_ops import run_brew_installer

    config = load_cli_config(ctx)
    ui = ConsoleInteraction()
    try:
        run_brew_installer(
            BrewAdapter(runner=ProcessRunner()),
            config.packages,
            ui,
            choice=choice,
        )
    except (PreconditionNotMet, InvalidArgument) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.command("bin")
@click.option("--choice", default=None, help="Menu choice(s), e.g. '1' or '2,4' (skips the prompt).")
@click.option("--source", "source_dir", default=None, type=click.Path(), help="Directory holding the binaries.")
@click.option("--target", "target_dir", default=None, type=click.Path(), help="Install directory (default: ~/.local/bin).")
@click.option("--yes", "-y", is_flag=True, help="Overwrite existing binaries without asking.")
@click.pass_context
def local_bin(
    ctx: click.Context,
    choice: str | None,
    source_dir: str | None,
    target_dir: str | None,
    yes: bool,
) -> None:
    """Install local binaries into ~/.local/bin and put it on PATH."""
    from devbench.core.services.local_bin import run_local_bin_installer

    config = load_cli_config(ctx)
    source = Path(source_dir or config.local_bin.source_dir).expanduser()
    target = Path(target_dir or config.local_bin.target_dir).expanduser()

    try:
        summary = run_local_bin_installer(
            source,
            target,
            ConsoleInteraction(assume_yes=yes),
            choice=choice,
            shell=os.environ.get("SHELL"),
            path_env=os.environ.get("PATH", ""),
        )
    except (PreconditionNotMet, InvalidArgument) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if summary.succeeded == 0:
        click.secho("❌ Binary installation failed", fg="red")
        sys.exit(1)
