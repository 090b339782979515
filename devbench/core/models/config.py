"""
Configuration model — the settings every devbench command reads.

Loaded from devbench.yml when one exists. Every field has a default,
so a missing file still yields a usable configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class ContainerSettings(BaseModel):
    """Where the dev container lives and what it mounts."""

    name: str = "libsemigroups-x86-dev"
    workspace: str = "/workspace/libsemigroups"
    host_repo: str = "/host-repo"
    compose_dir: str = "."
    compose_command: list[str] = Field(default_factory=list)   # empty = auto-detect
    shell: str = "/bin/bash"
    remote_prefix: str = "host"

    @field_validator("compose_command", mode="before")
    @classmethod
    def _split_command(cls, value):
        if isinstance(value, str):
            return value.split()
        return value


class BuildSettings(BaseModel):
    """How the repository is configured, built and tested."""

    jobs: int = Field(default=12, ge=1)
    configure_flags: list[str] = Field(
        default_factory=lambda: ["--enable-debug", "--disable-hpcombi"]
    )
    sanitizer_cxx: str = "clang++"
    default_target: str = "test_all"
    valgrind_tags: str = "[quick][exclude:no-valgrind]"


class LocalBinSettings(BaseModel):
    """Source and destination of the local binary installer."""

    source_dir: str = "./binaries"
    target_dir: str = "~/.local/bin"


def _default_packages() -> dict[str, list[str]]:
    return {
        "core": ["automake"],
        "doc": ["doxygen", "graphviz", "inkscape", "mactex"],
    }


class DevbenchConfig(BaseModel):
    """Root configuration."""

    version: int = 1
    container: ContainerSettings = Field(default_factory=ContainerSettings)
    build: BuildSettings = Field(default_factory=BuildSettings)
    packages: dict[str, list[str]] = Field(default_factory=_default_packages)
    local_bin: LocalBinSettings = Field(default_factory=LocalBinSettings)
