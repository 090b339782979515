"""
Adapter base — the contract between services and external tools.

Services never call subprocess themselves.  They talk to an adapter
(docker, git, brew), and every adapter runs its commands through a
single ProcessRunner, so swapping the runner for a MockRunner makes
the whole stack testable without the tools installed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from devbench.adapters.shell.command import ProcessRunner


class Adapter(ABC):
    """Abstract base class for all tool adapters.

    To create a new adapter:
        1. Subclass Adapter
        2. Implement name and binary
        3. Build commands with ``self.runner``
    """

    def __init__(self, runner: ProcessRunner | None = None):
        self.runner = runner or ProcessRunner()

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'docker', 'git', 'brew')."""

    @property
    @abstractmethod
    def binary(self) -> str:
        """Executable this adapter drives."""

    def is_available(self) -> bool:
        """Whether the underlying tool is on PATH.  Fast, never raises."""
        return self.runner.which(self.binary) is not None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
