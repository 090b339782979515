"""
Homebrew adapter — install formulae with the brew CLI.
"""

from __future__ import annotations

from devbench.adapters.base import Adapter
from devbench.adapters.shell.command import LineSink

HOMEBREW_URL = "https://brew.sh/"


class BrewAdapter(Adapter):
    """Thin wrapper over ``brew install``."""

    @property
    def name(self) -> str:
        return "brew"

    @property
    def binary(self) -> str:
        return "brew"

    def install(self, package: str, sink: LineSink) -> int:
        return self.runner.stream(["brew", "install", package], sink)
