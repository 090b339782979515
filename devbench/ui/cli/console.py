"""
Console plumbing shared by the CLI commands.

ConsoleInteraction is the click-backed Interaction every command hands
to the core; ``load_cli_config`` turns a ConfigError into a clean exit.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from devbench.core.config.loader import ConfigError, load_config
from devbench.core.interaction import Interaction
from devbench.core.models.config import DevbenchConfig

_STYLES: dict[str, dict] = {
    "info": {"fg": "cyan"},
    "success": {"fg": "green"},
    "warn": {"fg": "yellow"},
    "error": {"fg": "red"},
}


class ConsoleInteraction(Interaction):
    """Prompts on the controlling terminal, colored output via click.

    With ``assume_yes`` every confirmation is answered yes without
    reading the terminal.
    """

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def confirm(self, prompt: str) -> bool:
        if self.assume_yes:
            click.echo(f"{prompt} [y/N]: y")
            return True
        return click.confirm(prompt, default=False)

    def ask(self, prompt: str) -> str:
        return click.prompt(prompt, default="", show_default=False)

    def message(self, level: str, text: str) -> None:
        style = _STYLES.get(level)
        if style:
            click.secho(text, **style)
        else:
            click.echo(text)

    def line(self, text: str, is_stderr: bool = False) -> None:
        click.echo(text, err=is_stderr)


def load_cli_config(ctx: click.Context) -> DevbenchConfig:
    """Load devbench.yml for a command, exiting 1 on a broken file."""
    config_path: Path | None = ctx.obj.get("config_path") if ctx.obj else None
    try:
        return load_config(config_path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
