"""
Command dispatcher — one verb in, one action out, one exit code back.

The verb set is closed.  Before a handler runs, the dispatcher checks
arity, validates arguments (sanitizer names), then preconditions:

    needs_running     the container must be RUNNING
    needs_repo        the workspace clone must have .git
    needs_host_repo   the mounted host checkout must have .git

Any failed check prints a message and returns 1 before a single
mutating command reaches docker or git.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from devbench.adapters.containers.docker import DockerAdapter
from devbench.adapters.vcs.git import GitAdapter
from devbench.core.errors import ExternalToolFailure, InvalidArgument, PreconditionNotMet
from devbench.core.interaction import Interaction
from devbench.core.models.config import DevbenchConfig
from devbench.core.models.container import ContainerState
from devbench.core.models.sync import RepositorySyncRequest
from devbench.core.services import build_ops
from devbench.core.services.sync_ops import SyncEngine, report_outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """A dispatcher verb: arity, preconditions and help text."""

    verb: str
    summary: str
    min_args: int = 0
    max_args: int = 0
    arg_usage: str = ""
    needs_running: bool = False
    needs_repo: bool = False
    needs_host_repo: bool = False

    def accepts(self, argc: int) -> bool:
        return self.min_args <= argc <= self.max_args

    @property
    def usage(self) -> str:
        return f"{self.verb} {self.arg_usage}".strip()


COMMANDS: dict[str, Command] = {
    c.verb: c
    for c in (
        Command("start", "Start the dev container"),
        Command("stop", "Stop the dev container"),
        Command("restart", "Restart the dev container"),
        Command("shell", "Open a shell in the container", needs_running=True),
        Command(
            "init",
            "Clone the host repository into the container (first time setup)",
            needs_running=True,
            needs_host_repo=True,
        ),
        Command(
            "sync",
            "Sync changes from the host repository into the container",
            needs_running=True,
            needs_repo=True,
        ),
        Command("status", "Show container status"),
        Command("clean", "Stop and remove the container and its volumes"),
        Command(
            "valgrind",
            "Run tests under valgrind in the container",
            max_args=2,
            arg_usage="[test_target] [test_tags]",
            needs_running=True,
            needs_repo=True,
        ),
        Command(
            "sanitizer",
            "Run tests under a sanitizer (asan|tsan|ubsan) in the container",
            max_args=2,
            arg_usage="<asan|tsan|ubsan> [test_target]",
            needs_running=True,
            needs_repo=True,
        ),
        Command("help", "Show this help message"),
    )
}

ALIASES = {"--help": "help", "-h": "help"}

_EXAMPLES = (
    ("start", "Start the container"),
    ("init", "Clone repo from host (first time)"),
    ("sync", "Pull changes from host repo"),
    ("shell", "Enter container shell"),
    ("valgrind", "Run valgrind on test_all"),
    ("valgrind test_order", "Run valgrind on test_order only"),
    ("sanitizer asan", "Run address sanitizer on test_all"),
    ("sanitizer asan test_order", "Run address sanitizer on test_order"),
)


class Dispatcher:
    """Maps container verbs to operations on the dev container."""

    def __init__(
        self,
        config: DevbenchConfig,
        docker: DockerAdapter,
        interaction: Interaction,
        prog: str = "devbench container",
    ):
        self.config = config
        self.settings = config.container
        self.docker = docker
        self.ui = interaction
        self.prog = prog

    # ── Entry point ─────────────────────────────────────────────

    def dispatch(self, verb: str | None, args: list[str] | tuple[str, ...] = ()) -> int:
        args = list(args)
        command = COMMANDS.get(ALIASES.get(verb or "", verb or ""))
        if command is None:
            if verb:
                self.ui.error(f"Unknown command: {verb}")
            self.print_usage()
            return 1

        if not command.accepts(len(args)):
            self.ui.error(f"Usage: {self.prog} {command.usage}")
            return 1

        handler: Callable[[list[str]], int] = getattr(self, f"_cmd_{command.verb}")
        logger.debug("Dispatching %s %s", command.verb, args)
        try:
            self._validate_arguments(command, args)
            self._check_preconditions(command)
            return handler(args)
        except InvalidArgument as e:
            self.ui.error(str(e))
            self.ui.echo(f"Usage: {self.prog} {command.usage}")
            return 1
        except PreconditionNotMet as e:
            self.ui.error(str(e))
            return 1
        except ExternalToolFailure as e:
            self.ui.error(str(e))
            return e.return_code or 1

    def print_usage(self) -> None:
        self.ui.echo(f"Usage: {self.prog} <command>")
        self.ui.echo()
        self.ui.echo("Commands:")
        for command in COMMANDS.values():
            self.ui.echo(f"    {command.verb:<11} {command.summary}")
        self.ui.echo()
        self.ui.echo("Examples:")
        for example, description in _EXAMPLES:
            line = f"{self.prog} {example}"
            self.ui.echo(f"    {line:<45} # {description}")

    # ── Checks ──────────────────────────────────────────────────

    def _validate_arguments(self, command: Command, args: list[str]) -> None:
        if command.verb == "sanitizer":
            build_ops.resolve_sanitizer(args[0] if args else None)

    def _check_preconditions(self, command: Command) -> None:
        if command.needs_running and not self.docker.is_running():
            raise PreconditionNotMet(
                f"Container is not running. Start it with: {self.prog} start"
            )
        if command.needs_host_repo and not self.docker.path_exists(f"{self.settings.host_repo}/.git"):
            raise PreconditionNotMet(
                f"Host repository not mounted at {self.settings.host_repo}"
            )
        if command.needs_repo and not self.workspace_git().has_metadata():
            raise PreconditionNotMet(
                f"Repository not initialized. Run: {self.prog} init"
            )

    def workspace_git(self) -> GitAdapter:
        """Git adapter for the clone inside the container."""
        return GitAdapter(
            self.settings.workspace,
            runner=self.docker.runner,
            exec_prefix=self.docker.exec_prefix(),
        )

    # ── Lifecycle verbs ─────────────────────────────────────────

    def _cmd_start(self, args: list[str]) -> int:
        if self.docker.is_running():
            self.ui.warn("Container is already running")
            return 0

        self.ui.success("Starting dev container...")
        code = self.docker.up(self.ui.line)
        if code != 0:
            self.ui.error("Failed to start the container")
            return code
        self.ui.success("Container started successfully")
        self.ui.warn(f"Run '{self.prog} init' if this is your first time to clone the repository")
        self.ui.warn(f"Run '{self.prog} shell' to enter the container")
        return 0

    def _cmd_stop(self, args: list[str]) -> int:
        if not self.docker.is_running():
            self.ui.warn("Container is not running")
            return 0

        self.ui.success("Stopping dev container...")
        code = self.docker.stop(self.ui.line)
        if code != 0:
            self.ui.error("Failed to stop the container")
            return code
        self.ui.success("Container stopped")
        return 0

    def _cmd_restart(self, args: list[str]) -> int:
        code = self._cmd_stop(args)
        if code != 0:
            return code
        return self._cmd_start(args)

    def _cmd_shell(self, args: list[str]) -> int:
        self.ui.success("Entering container shell...")
        return self.docker.exec_interactive([self.settings.shell])

    def _cmd_status(self, args: list[str]) -> int:
        self.ui.success("Container Status:")
        state = self.docker.state()
        level = {
            ContainerState.RUNNING: "success",
            ContainerState.STOPPED: "warn",
            ContainerState.NOT_CREATED: "error",
        }[state]
        self.ui.message(level, f"  Status: {state.label}")
        if state is not ContainerState.RUNNING:
            return 0

        git = self.workspace_git()
        if not git.has_metadata():
            self.ui.echo(f"  Repository: Not initialized (run: {self.prog} init)")
            return 0
        self.ui.echo("  Repository: Initialized")
        try:
            branch = git.current_branch()
        except ExternalToolFailure as e:
            logger.info("git branch failed in the container: %s", e)
            self.ui.warn(f"  Branch: ? ({e})")
        else:
            self.ui.echo(f"  Branch: {branch}")
        self.ui.echo(f"  Commit: {git.last_commit() or '?'}")
        return 0

    def _cmd_clean(self, args: list[str]) -> int:
        self.ui.error(
            "This will stop and remove the container and all volumes (including cloned repo)"
        )
        if not self.ui.confirm("Are you sure?"):
            self.ui.echo("Cancelled")
            return 0

        code = self.docker.down(self.ui.line, volumes=True)
        if code != 0:
            self.ui.error("Failed to remove the container")
            return code
        self.ui.success("Cleaned up successfully")
        return 0

    def _cmd_help(self, args: list[str]) -> int:
        self.print_usage()
        return 0

    # ── Repository verbs ────────────────────────────────────────

    def _cmd_init(self, args: list[str]) -> int:
        self.ui.success("Initializing repository in container...")
        workspace = self.settings.workspace
        git = self.workspace_git()

        if git.has_metadata():
            self.ui.warn(f"Repository already exists at {workspace}")
            if not self.ui.confirm("Do you want to remove it and re-clone?"):
                self.ui.warn("Initialization cancelled")
                return 0
            removed = self.docker.remove_path(workspace)
            if not removed.ok:
                raise ExternalToolFailure(removed.error, removed.return_code)

        git.clone(self.settings.host_repo)
        self.ui.success("Repository cloned successfully")
        self.ui.echo(f"Current branch: {git.current_branch()}")
        self.ui.echo(f"Latest commit: {git.last_commit()}")
        return 0

    def _cmd_sync(self, args: list[str]) -> int:
        self.ui.success("Syncing changes from host repository...")
        request = RepositorySyncRequest(
            local_path=self.settings.workspace,
            remote_source=self.settings.host_repo,
            remote_prefix=self.settings.remote_prefix,
        )
        outcome = SyncEngine(self.workspace_git(), self.ui).sync(request)
        return report_outcome(outcome, self.ui)

    # ── Build verbs ─────────────────────────────────────────────

    def _cmd_valgrind(self, args: list[str]) -> int:
        target = args[0] if len(args) > 0 else None
        tags = args[1] if len(args) > 1 else None
        return build_ops.run_valgrind(
            self.docker,
            self.settings.workspace,
            self.config.build,
            self.ui,
            target=target,
            tags=tags,
        )

    def _cmd_sanitizer(self, args: list[str]) -> int:
        sanitizer = build_ops.resolve_sanitizer(args[0])
        target = args[1] if len(args) > 1 else None
        return build_ops.run_sanitizer(
            self.docker,
            self.settings.workspace,
            self.config.build,
            sanitizer,
            self.ui,
            target=target,
        )
