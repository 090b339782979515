"""
devbench — CLI entrypoint.

Usage:
    devbench --help
    devbench container start
    devbench container sync
    devbench brew --choice 2
    devbench bin
    devbench config check
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
import yaml

from devbench import __version__
from devbench.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="devbench")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to devbench.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """devbench — dev container, Homebrew packages and local binaries."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(debug=debug, verbose=verbose, quiet=quiet)


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.pass_context
def config_check(ctx: click.Context) -> None:
    """Validate devbench.yml."""
    from devbench.core.config.loader import ConfigError, check_config, find_config_file, load_config

    path: Path | None = ctx.obj.get("config_path") or find_config_file()
    try:
        cfg = load_config(path)
    except ConfigError as e:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        click.echo(f"   • {e}")
        click.echo()
        sys.exit(1)

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   File: {path or '(none, using defaults)'}")
    click.echo(f"   Container: {cfg.container.name}")
    click.echo(f"   Package groups: {len(cfg.packages)}")

    warnings = check_config(cfg)
    if warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in warnings:
            click.echo(f"   • {warn}")
    click.echo()


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the resolved configuration as YAML."""
    from devbench.ui.cli.console import load_cli_config

    cfg = load_cli_config(ctx)
    click.echo(yaml.safe_dump(cfg.model_dump(), sort_keys=False), nl=False)


# ── Register sub-commands from devbench/ui/cli/ ────────────────────

from devbench.ui.cli.container import container
from devbench.ui.cli.hostsync import hostsync
from devbench.ui.cli.packages import brew, local_bin

cli.add_command(container)
cli.add_command(hostsync)
cli.add_command(brew)
cli.add_command(local_bin)


if __name__ == "__main__":
    cli()
