"""
Container state — what the runtime reports about the dev container.
"""

from __future__ import annotations

from enum import Enum


class ContainerState(str, Enum):
    """Lifecycle state of the dev container, derived on every query."""

    NOT_CREATED = "not-created"
    STOPPED = "stopped"
    RUNNING = "running"

    @property
    def label(self) -> str:
        return {
            ContainerState.NOT_CREATED: "Not created",
            ContainerState.STOPPED: "Stopped",
            ContainerState.RUNNING: "Running",
        }[self]
