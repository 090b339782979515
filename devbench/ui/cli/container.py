"""
CLI command for the dev container.

Thin wrapper over ``devbench.core.engine.dispatcher``: everything after
``container`` is handed to the dispatcher as-is, including ``--help``,
so the verb table has a single owner.
"""

from __future__ import annotations

import sys

import click

from devbench.adapters.containers.docker import DockerAdapter
from devbench.adapters.shell.command import ProcessRunner
from devbench.core.engine.dispatcher import COMMANDS, Dispatcher
from devbench.ui.cli.console import ConsoleInteraction, load_cli_config


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": [],
    },
)
@click.option("--yes", "-y", is_flag=True, help="Answer yes to every confirmation.")
@click.argument("verb", required=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def container(ctx: click.Context, yes: bool, verb: str | None, args: tuple[str, ...]) -> None:
    """Dev container — start, stop, shell, init, sync, status, clean, valgrind, sanitizer.

    Run 'devbench container help' for the full verb list.
    """
    config = load_cli_config(ctx)
    docker = DockerAdapter(config.container, runner=ProcessRunner())
    if verb in COMMANDS and verb != "help" and not docker.is_available():
        click.secho("❌ docker CLI not found on PATH", fg="red")
        sys.exit(1)

    dispatcher = Dispatcher(config, docker, ConsoleInteraction(assume_yes=yes))
    sys.exit(dispatcher.dispatch(verb, list(args)))
