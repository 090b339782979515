"""Adapters — tool bindings for docker, git and brew.

Public re-exports for convenient access.
"""

from devbench.adapters.base import Adapter
from devbench.adapters.containers.docker import DockerAdapter
from devbench.adapters.mock import MockRunner
from devbench.adapters.packages.brew import BrewAdapter
from devbench.adapters.shell.command import ProcessRunner
from devbench.adapters.vcs.git import GitAdapter

__all__ = [
    "Adapter",
    "BrewAdapter",
    "DockerAdapter",
    "GitAdapter",
    "MockRunner",
    "ProcessRunner",
]
