"""
Local binary installer — copy executables into ~/.local/bin.

Flow: make sure the target directory exists, list the executables in
the source directory, let the operator pick (option 1 = all), copy
each one (asking before overwriting), then make sure the target
directory is on PATH, patching the shell's rc file if it is not.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from dataclasses import dataclass
from pathlib import Path

from devbench.core.errors import InvalidArgument, PreconditionNotMet, UnsupportedShellError
from devbench.core.interaction import Interaction
from devbench.core.services.menu import ALL_OPTION, parse_menu_choices
from devbench.core.services.shell_profile import (
    PROFILE_WRITERS,
    path_contains,
    profile_writer_for,
)

logger = logging.getLogger(__name__)


@dataclass
class InstallSummary:
    installed: int
    skipped: int
    total: int
    path_configured: bool = False

    @property
    def succeeded(self) -> int:
        return self.installed + self.skipped


def ensure_target_dir(target: Path, ui: Interaction) -> None:
    if target.is_dir():
        ui.success(f"✓ Local bin directory exists: {target}")
        return
    ui.echo(f"Creating local bin directory: {target}")
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PreconditionNotMet(f"✗ Failed to create {target}: {e}") from e
    ui.success(f"✓ Created {target}")


def available_binaries(source: Path) -> list[str]:
    """Names of regular, executable files directly under ``source``."""
    if not source.is_dir():
        raise PreconditionNotMet(f"Binaries directory '{source}' does not exist")

    names = sorted(
        entry.name
        for entry in source.iterdir()
        if entry.is_file() and os.access(entry, os.X_OK)
    )
    if not names:
        raise PreconditionNotMet(f"No executable binaries found in '{source}'")
    return names


def print_menu(source: Path, binaries: list[str], ui: Interaction) -> None:
    ui.echo()
    ui.echo("=== Local Binary Installer ===")
    ui.echo(f"Available binaries in {source}:")
    ui.echo(f"{ALL_OPTION}. Install all binaries")
    for number, name in enumerate(binaries, start=ALL_OPTION + 1):
        ui.echo(f"{number}. {name}")
    ui.echo()
    ui.echo("You can select multiple options (e.g., 2,3 for specific binaries)")
    ui.echo(f"Note: If option {ALL_OPTION} is included, it will install all binaries")
    ui.echo()


def select_binaries(binaries: list[str], raw: str, ui: Interaction) -> list[str]:
    """Turn menu input into the list of binaries to install.

    Raises:
        InvalidArgument: nothing valid was selected.
    """
    if not raw.strip():
        raise InvalidArgument("No valid input provided.")

    selection = parse_menu_choices(raw, len(binaries) + ALL_OPTION)
    for token in selection.invalid:
        ui.warn(f"Warning: Invalid choice '{token}' ignored")

    if selection.select_all:
        ui.echo("Selected: All binaries")
        return list(binaries)
    if selection.empty:
        raise InvalidArgument("No valid choices provided.")

    selected = [binaries[number - ALL_OPTION - 1] for number in selection.choices]
    ui.echo(f"Selected binaries: {' '.join(selected)}")
    return selected


def install_binary(name: str, source: Path, target: Path, ui: Interaction) -> str:
    """Copy one binary.  Returns ``installed``, ``skipped`` or ``failed``."""
    source_path = source / name
    dest_path = target / name

    if not source_path.is_file():
        ui.error(f"✗ Source binary '{source_path}' not found")
        return "failed"

    if dest_path.exists():
        ui.warn(f"! Binary '{name}' already exists in {target}")
        if not ui.confirm("Overwrite?"):
            ui.echo(f"Skipping {name}")
            return "skipped"

    try:
        shutil.copy2(source_path, dest_path)
        mode = dest_path.stat().st_mode
        dest_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        logger.debug("Copy of %s failed: %s", name, e)
        ui.error(f"✗ Failed to install '{name}': {e}")
        return "failed"

    ui.success(f"✓ Successfully installed '{name}'")
    return "installed"


def install_binaries(
    selected: list[str],
    source: Path,
    target: Path,
    ui: Interaction,
) -> InstallSummary:
    ui.echo()
    ui.echo("Installing selected binaries...")
    results = [install_binary(name, source, target, ui) for name in selected]
    summary = InstallSummary(
        installed=results.count("installed"),
        skipped=results.count("skipped"),
        total=len(selected),
    )
    ui.echo()
    ui.echo(
        f"Installation complete: {summary.succeeded}/{summary.total} "
        "binaries installed successfully"
    )
    return summary


def configure_path(
    target: Path,
    ui: Interaction,
    *,
    shell: str | None,
    path_env: str,
    home: Path,
) -> bool:
    """Make sure ``target`` is on PATH.  Returns False when the user must do it."""
    ui.echo()
    ui.echo("Checking PATH configuration...")
    if path_contains(target, path_env):
        ui.success(f"✓ {target} is already in your PATH")
        return True

    ui.warn(f"! {target} is not in your PATH")
    ui.echo("Attempting to add to shell configuration...")
    try:
        writer = profile_writer_for(shell)
        rc_file = writer.add_to_path(target, home)
    except (UnsupportedShellError, PreconditionNotMet) as e:
        ui.error(str(e))
        _print_manual_instructions(target, home, ui)
        return False

    ui.success(f"✓ Added PATH export to {rc_file}")
    ui.echo(f"Please restart your shell or run: source {rc_file}")
    return True


def _print_manual_instructions(target: Path, home: Path, ui: Interaction) -> None:
    ui.echo()
    ui.echo("Unable to automatically configure PATH.")
    ui.echo("Please manually add the PATH entry to your shell configuration file:")
    ui.echo()
    for writer in PROFILE_WRITERS.values():
        ui.echo(f"    {writer.shell}: add to ~/{writer.rc_path}")
        ui.echo(f"        {writer.export_line(target, home)}")
    ui.echo()
    ui.echo("After adding the line, restart your shell or source the config file.")


def run_local_bin_installer(
    source: Path,
    target: Path,
    ui: Interaction,
    *,
    choice: str | None = None,
    shell: str | None = None,
    path_env: str = "",
    home: Path | None = None,
) -> InstallSummary:
    """Run the whole installer.

    Raises:
        PreconditionNotMet: no source binaries, or the target can't be created.
        InvalidArgument: nothing valid was selected.
    """
    ui.echo("=== Local Binary Installer ===")
    ui.echo()
    ensure_target_dir(target, ui)

    binaries = available_binaries(source)
    if choice is None:
        print_menu(source, binaries, ui)
        choice = ui.ask("Enter your choice(s)")
    selected = select_binaries(binaries, choice, ui)

    summary = install_binaries(selected, source, target, ui)
    if summary.succeeded == 0:
        return summary

    summary.path_configured = configure_path(
        target,
        ui,
        shell=shell,
        path_env=path_env,
        home=home or Path.home(),
    )
    if summary.path_configured:
        ui.echo()
        ui.success("Installation completed successfully!")
    return summary
