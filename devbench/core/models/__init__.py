"""
Domain models — Pydantic types for devbench.

All models are re-exported here for convenient access:

    from devbench.core.models import ContainerState, SyncOutcome, DevbenchConfig
"""

from devbench.core.models.build import SANITIZERS, BuildStep, Sanitizer
from devbench.core.models.config import (
    BuildSettings,
    ContainerSettings,
    DevbenchConfig,
    LocalBinSettings,
)
from devbench.core.models.container import ContainerState
from devbench.core.models.process import ProcessResult
from devbench.core.models.sync import RepositorySyncRequest, SyncOutcome

__all__ = [
    # build.py
    "BuildSettings",
    "BuildStep",
    # config.py
    "ContainerSettings",
    # container.py
    "ContainerState",
    "DevbenchConfig",
    "LocalBinSettings",
    # process.py
    "ProcessResult",
    # sync.py
    "RepositorySyncRequest",
    "SANITIZERS",
    "Sanitizer",
    "SyncOutcome",
]
