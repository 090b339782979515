"""
Docker adapter — the dev container and its compose project.

Uses the docker CLI — never the Docker API directly.  Queries
(``state``, ``path_exists``, ``exec``) capture output; lifecycle and
build commands stream their output to the operator.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from devbench.adapters.base import Adapter
from devbench.adapters.shell.command import LineSink, ProcessRunner
from devbench.core.models.config import ContainerSettings
from devbench.core.models.container import ContainerState
from devbench.core.models.process import ProcessResult

logger = logging.getLogger(__name__)

_PROBE_TIMEOUT = 15


class DockerAdapter(Adapter):
    """Operations on one named container and the compose project that owns it."""

    def __init__(
        self,
        settings: ContainerSettings,
        runner: ProcessRunner | None = None,
    ):
        super().__init__(runner)
        self.settings = settings

    @property
    def name(self) -> str:
        return "docker"

    @property
    def binary(self) -> str:
        return "docker"

    @property
    def container(self) -> str:
        return self.settings.name

    # ── State probe ─────────────────────────────────────────────

    def state(self) -> ContainerState:
        """Classify the container.  Queried fresh on every call.

        The running set is checked first; only when the container is not
        in it do we list all containers to tell stopped from not created.
        """
        if self.container in self._names(all_=False):
            return ContainerState.RUNNING
        if self.container in self._names(all_=True):
            return ContainerState.STOPPED
        return ContainerState.NOT_CREATED

    def is_running(self) -> bool:
        return self.state() is ContainerState.RUNNING

    def _names(self, all_: bool) -> set[str]:
        args = ["docker", "ps"]
        if all_:
            args.append("-a")
        args += ["--format", "{{.Names}}"]
        result = self.runner.run(args, timeout=_PROBE_TIMEOUT)
        if not result.ok:
            logger.warning("docker ps failed: %s", result.error)
            return set()
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}

    # ── Compose lifecycle ───────────────────────────────────────

    def compose_command(self) -> list[str]:
        """``docker-compose`` when installed, else the ``docker compose`` plugin."""
        if self.settings.compose_command:
            return list(self.settings.compose_command)
        if self.runner.which("docker-compose"):
            return ["docker-compose"]
        return ["docker", "compose"]

    def compose(self, *args: str, sink: LineSink) -> int:
        """Run a compose subcommand in the compose directory, streaming output."""
        return self.runner.stream(
            [*self.compose_command(), *args],
            sink,
            cwd=self.settings.compose_dir,
        )

    def up(self, sink: LineSink) -> int:
        return self.compose("up", "-d", sink=sink)

    def stop(self, sink: LineSink) -> int:
        return self.compose("stop", sink=sink)

    def down(self, sink: LineSink, volumes: bool = True) -> int:
        args = ["down", "-v"] if volumes else ["down"]
        return self.compose(*args, sink=sink)

    # ── Exec ────────────────────────────────────────────────────

    def exec_prefix(self, workdir: str | None = None) -> list[str]:
        """Command prefix that runs the rest of an argv inside the container."""
        prefix = ["docker", "exec"]
        if workdir:
            prefix += ["-w", workdir]
        return [*prefix, self.container]

    def exec(self, args: Sequence[str], workdir: str | None = None) -> ProcessResult:
        """Run a command in the container and capture its output."""
        return self.runner.run([*self.exec_prefix(workdir), *args])

    def exec_stream(
        self,
        args: Sequence[str],
        sink: LineSink,
        *,
        workdir: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        """Run a command in the container, streaming its output."""
        prefix = ["docker", "exec"]
        if workdir:
            prefix += ["-w", workdir]
        for key, value in (env or {}).items():
            prefix += ["-e", f"{key}={value}"]
        return self.runner.stream([*prefix, self.container, *args], sink)

    def exec_interactive(self, args: Sequence[str]) -> int:
        """Attach the operator's terminal to a command in the container."""
        return self.runner.interactive(["docker", "exec", "-it", self.container, *args])

    def path_exists(self, path: str, directory: bool = True) -> bool:
        flag = "-d" if directory else "-e"
        return self.exec(["test", flag, path]).ok

    def remove_path(self, path: str) -> ProcessResult:
        return self.exec(["rm", "-rf", path])
