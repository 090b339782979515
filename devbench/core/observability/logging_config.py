"""
Logging setup for the devbench CLI.

``setup_logging`` is called once by the click group in ``devbench.main``
with its --debug/--verbose/--quiet flags.  Modules log through
``logging.getLogger(__name__)``; what the operator is meant to read
(prompts, progress, results) goes through click instead.

Environment:

    DEVBENCH_LOG_LEVEL       console level when no flag is given (default WARNING)
    DEVBENCH_LOG_FILE        also write records to this file
    DEVBENCH_LOG_FILE_LEVEL  level for the file (default: the console level)

At DEBUG every command devbench shells out to (docker, git, brew) is
logged with its arguments, which is usually what you want when a
container step misbehaves.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

ENV_LEVEL = "DEVBENCH_LOG_LEVEL"
ENV_FILE = "DEVBENCH_LOG_FILE"
ENV_FILE_LEVEL = "DEVBENCH_LOG_FILE_LEVEL"

_CONSOLE_FORMATS = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Console level: --debug > --verbose > --quiet > DEVBENCH_LOG_LEVEL > WARNING."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    env = os.environ if environ is None else environ
    return parse_level(env.get(ENV_LEVEL))


def parse_level(name: str | None, default: int = logging.WARNING) -> int:
    """``"debug"`` → logging.DEBUG.  Unknown or empty names give ``default``."""
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Configure the root logger for this process.

    Returns:
        The root logger's effective level.
    """
    env = os.environ if environ is None else environ
    console_level = resolve_level(debug=debug, verbose=verbose, quiet=quiet, environ=env)

    fmt, datefmt = _CONSOLE_FORMATS.get(console_level, ("%(message)s", None))
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    log_file = env.get(ENV_FILE)
    if log_file:
        file_level = parse_level(env.get(ENV_FILE_LEVEL), default=console_level)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(*_FILE_FORMAT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    return root_level
