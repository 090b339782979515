"""
Shell profile writers — add a directory to PATH in the user's rc file.

One writer per shell, looked up by the basename of ``$SHELL``.  A shell
without a writer is an explicit UnsupportedShellError, never a silent
no-op.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from devbench.core.errors import PreconditionNotMet, UnsupportedShellError

logger = logging.getLogger(__name__)


def _home_relative(directory: Path, home: Path) -> str:
    """``$HOME/.local/bin`` rather than the expanded path, when possible."""
    try:
        return "$HOME/" + directory.relative_to(home).as_posix()
    except ValueError:
        return str(directory)


class ShellProfileWriter(ABC):
    """Knows one shell's rc file and PATH syntax."""

    shell: str = ""
    rc_path: str = ""               # relative to $HOME

    def rc_file(self, home: Path) -> Path:
        return home / self.rc_path

    @abstractmethod
    def export_line(self, directory: Path, home: Path) -> str:
        """The line that prepends ``directory`` to PATH."""

    def add_to_path(self, directory: Path, home: Path) -> Path:
        """Append the export line to the rc file and return the file.

        Raises:
            PreconditionNotMet: the rc file does not exist or is not writable.
        """
        rc_file = self.rc_file(home)
        if not rc_file.is_file():
            raise PreconditionNotMet(f"Configuration file {rc_file} does not exist")

        line = self.export_line(directory, home)
        try:
            if line in rc_file.read_text(encoding="utf-8").splitlines():
                logger.info("%s already contains the PATH export", rc_file)
                return rc_file
            with rc_file.open("a", encoding="utf-8") as fh:
                fh.write(f"\n{line}\n")
        except OSError as e:
            raise PreconditionNotMet(f"Failed to write to {rc_file}: {e}") from e

        logger.info("Appended PATH export to %s", rc_file)
        return rc_file


class BashProfileWriter(ShellProfileWriter):
    shell = "bash"
    rc_path = ".bashrc"

    def export_line(self, directory: Path, home: Path) -> str:
        return f'export PATH="{_home_relative(directory, home)}:$PATH"'


class ZshProfileWriter(BashProfileWriter):
    shell = "zsh"
    rc_path = ".zshrc"


class FishProfileWriter(ShellProfileWriter):
    shell = "fish"
    rc_path = ".config/fish/config.fish"

    def export_line(self, directory: Path, home: Path) -> str:
        return f'set -gx PATH "{_home_relative(directory, home)}" $PATH'


PROFILE_WRITERS: dict[str, ShellProfileWriter] = {
    w.shell: w for w in (BashProfileWriter(), ZshProfileWriter(), FishProfileWriter())
}


def profile_writer_for(shell: str | None) -> ShellProfileWriter:
    """Writer for a shell path or name (``/usr/bin/zsh`` → zsh)."""
    name = os.path.basename(shell or "")
    writer = PROFILE_WRITERS.get(name)
    if writer is None:
        raise UnsupportedShellError(f"Shell '{name or '?'}' not automatically supported")
    return writer


def path_contains(directory: Path, path_env: str) -> bool:
    """Whether ``directory`` is one of the entries of a PATH string."""
    target = os.path.normpath(str(directory))
    return any(
        os.path.normpath(os.path.expanduser(entry)) == target
        for entry in path_env.split(os.pathsep)
        if entry
    )
