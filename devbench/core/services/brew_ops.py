"""
Homebrew package installer — install configured package groups.

The groups come from the ``packages`` section of devbench.yml.  The
menu offers "everything" as option 1, then one option per group.
A package that fails to install is reported and skipped; the run
goes on with the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from devbench.adapters.packages.brew import HOMEBREW_URL, BrewAdapter
from devbench.core.errors import InvalidArgument, PreconditionNotMet
from devbench.core.interaction import Interaction
from devbench.core.services.menu import ALL_OPTION, MenuSelection, parse_menu_choices

logger = logging.getLogger(__name__)


@dataclass
class GroupReport:
    """Per-group install results."""

    group: str
    installed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def check_homebrew(brew: BrewAdapter, ui: Interaction) -> None:
    if not brew.is_available():
        raise PreconditionNotMet(
            f"Homebrew is not installed! Please install Homebrew first: {HOMEBREW_URL}"
        )
    ui.success("✓ Homebrew is installed")


def print_menu(groups: list[str], ui: Interaction) -> None:
    ui.echo()
    ui.echo("=== Homebrew Package Installer ===")
    ui.echo("Available options:")
    ui.echo(f"{ALL_OPTION}. Install everything ({' + '.join(groups)})")
    for number, group in enumerate(groups, start=ALL_OPTION + 1):
        ui.echo(f"{number}. Install {group} packages only")
    ui.echo()
    ui.echo("You can select multiple options (e.g., 2,3)")
    ui.echo(f"Note: If option {ALL_OPTION} is included, it will override all other selections")
    ui.echo()


def selected_groups(groups: list[str], selection: MenuSelection) -> list[str]:
    if selection.select_all:
        return list(groups)
    return [groups[number - ALL_OPTION - 1] for number in selection.choices]


def install_group(
    brew: BrewAdapter,
    group: str,
    packages: list[str],
    ui: Interaction,
) -> GroupReport:
    report = GroupReport(group=group)
    if not packages:
        ui.echo(f"No packages found in {group} group")
        return report

    ui.info(f"Installing {group} packages...")
    ui.echo(f"Packages: {' '.join(packages)}")
    for package in packages:
        ui.echo(f"Installing {package}...")
        code = brew.install(package, ui.line)
        if code == 0:
            ui.success(f"✓ Successfully installed {package}")
            report.installed.append(package)
        else:
            logger.info("brew install %s exited %d", package, code)
            ui.error(f"✗ Failed to install {package}")
            ui.echo(f"  Please try manually with: brew install {package}")
            report.failed.append(package)

    ui.echo(f"Finished installing {group} packages")
    ui.echo()
    return report


def run_brew_installer(
    brew: BrewAdapter,
    packages: dict[str, list[str]],
    ui: Interaction,
    choice: str | None = None,
) -> list[GroupReport]:
    """Check brew, pick groups (prompting unless ``choice`` is given), install.

    Raises:
        PreconditionNotMet: brew is not on PATH.
        InvalidArgument: nothing valid was selected.
    """
    check_homebrew(brew, ui)
    groups = list(packages)
    if not groups:
        raise InvalidArgument("No package groups configured")

    if choice is None:
        print_menu(groups, ui)
        choice = ui.ask("Enter your choice(s)")

    selection = parse_menu_choices(choice, len(groups) + ALL_OPTION, sort=True)
    for token in selection.invalid:
        ui.warn(f"Warning: Invalid choice '{token}' ignored")
    if selection.empty:
        raise InvalidArgument("No valid choices provided.")

    if selection.select_all:
        ui.info(f"Installing everything (option {ALL_OPTION} overrides other selections)...")

    reports = [
        install_group(brew, group, packages[group], ui)
        for group in selected_groups(groups, selection)
    ]

    failed = [pkg for r in reports for pkg in r.failed]
    if failed:
        ui.warn(f"Failed packages: {' '.join(failed)}")
    ui.success("Package installation process completed!")
    return reports
