"""
Mock runner — universal test double for every adapter.

Records each command it is asked to run and answers with canned
results.  Responses are matched by command prefix, longest prefix
first, so ``on("docker", "ps")`` answers both ``docker ps`` and
``docker ps -a`` unless a more specific ``on("docker", "ps", "-a")``
is registered.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from devbench.adapters.shell.command import LineSink, ProcessRunner
from devbench.core.models.process import ProcessResult

Handler = Callable[[list[str]], ProcessResult]


@dataclass
class RecordedCall:
    """One command the mock was asked to run."""

    mode: str                       # run, stream, interactive
    args: list[str]
    env: dict[str, str] = field(default_factory=dict)


class MockRunner(ProcessRunner):
    """ProcessRunner that never starts a process."""

    def __init__(self, available: Sequence[str] = ("docker", "git", "brew")):
        self._available = set(available)
        self._responses: list[tuple[tuple[str, ...], ProcessResult | Handler]] = []
        self._calls: list[RecordedCall] = []

    # ── Configuration ───────────────────────────────────────────

    def on(self, *prefix: str, result: ProcessResult | Handler) -> None:
        """Answer commands starting with ``prefix`` with ``result``.

        ``result`` may be a callable taking the full argument list.
        Registering the same prefix again replaces the earlier answer.
        """
        self._responses = [r for r in self._responses if r[0] != prefix]
        self._responses.append((prefix, result))
        self._responses.sort(key=lambda item: len(item[0]), reverse=True)

    def on_output(self, *prefix: str, stdout: str = "", code: int = 0) -> None:
        """Shorthand for a fixed stdout and exit code."""
        self.on(*prefix, result=ProcessResult(return_code=code, stdout=stdout))

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._calls.clear()
        self._responses.clear()

    # ── Inspection ──────────────────────────────────────────────

    @property
    def calls(self) -> list[RecordedCall]:
        return self._calls

    @property
    def commands(self) -> list[list[str]]:
        """Argument lists of every recorded call, in order."""
        return [c.args for c in self._calls]

    def called(self, *prefix: str) -> bool:
        return any(tuple(c.args[: len(prefix)]) == prefix for c in self._calls)

    # ── ProcessRunner ───────────────────────────────────────────

    def which(self, tool: str) -> str | None:
        return f"/usr/bin/{tool}" if tool in self._available else None

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        timeout: int | None = None,
    ) -> ProcessResult:
        args = list(args)
        self._calls.append(RecordedCall("run", args, dict(env or {})))
        return self._answer(args)

    def stream(
        self,
        args: Sequence[str],
        sink: LineSink,
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        args = list(args)
        self._calls.append(RecordedCall("stream", args, dict(env or {})))
        result = self._answer(args)
        for line in result.stdout.splitlines():
            sink(line, False)
        for line in result.stderr.splitlines():
            sink(line, True)
        return result.return_code

    def interactive(self, args: Sequence[str]) -> int:
        args = list(args)
        self._calls.append(RecordedCall("interactive", args))
        return self._answer(args).return_code

    def _answer(self, args: list[str]) -> ProcessResult:
        for prefix, response in self._responses:
            if tuple(args[: len(prefix)]) == prefix:
                result = response(args) if callable(response) else response
                return result.model_copy(update={"args": args})
        return ProcessResult(args=args)
