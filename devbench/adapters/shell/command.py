"""
Process runner — the one place devbench starts external processes.

Three modes:

    run()          capture stdout/stderr, return a ProcessResult
    stream()       echo output lines live while the command runs
    interactive()  hand the terminal to the child (docker exec -it)

None of them raise for a non-zero exit.  A missing executable is
reported as exit code 127, a timeout as 124, like a POSIX shell would.
"""

from __future__ import annotations

import logging
import os
import selectors
import shutil
import subprocess
import time
from collections.abc import Callable, Generator, Mapping, Sequence
from typing import Literal

from devbench.core.models.process import ProcessResult

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124

StreamLine = tuple[Literal["stdout", "stderr", "exit"], str | int]
LineSink = Callable[[str, bool], None]   # (line, is_stderr)


def _merged_env(env: Mapping[str, str] | None) -> dict[str, str] | None:
    if not env:
        return None
    return {**os.environ, **env}


class ProcessRunner:
    """Run external commands synchronously."""

    def which(self, tool: str) -> str | None:
        return shutil.which(tool)

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        timeout: int | None = None,
    ) -> ProcessResult:
        """Run a command and capture its output."""
        args = list(args)
        logger.debug("Running: %s (cwd=%s)", args, cwd)
        start = time.monotonic()
        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                env=_merged_env(env),
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError:
            return ProcessResult(
                args=args,
                return_code=EXIT_NOT_FOUND,
                stderr=f"command not found: {args[0]}",
            )
        except subprocess.TimeoutExpired:
            return ProcessResult(
                args=args,
                return_code=EXIT_TIMEOUT,
                stderr=f"Command timed out after {timeout}s",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, args[:3])
        return ProcessResult(
            args=args,
            return_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=elapsed_ms,
        )

    def stream(
        self,
        args: Sequence[str],
        sink: LineSink,
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> int:
        """Run a command, handing each output line to ``sink`` as it arrives.

        Returns the exit code.
        """
        code = EXIT_NOT_FOUND
        for source, payload in self.stream_lines(args, cwd=cwd, env=env):
            if source == "exit":
                code = int(payload)
            else:
                sink(str(payload), source == "stderr")
        return code

    def stream_lines(
        self,
        args: Sequence[str],
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> Generator[StreamLine, None, None]:
        """Run *args* via Popen and yield lines from stdout/stderr in real time.

        Yields:
            ("stdout", line)  — a line from stdout (trailing newline stripped)
            ("stderr", line)  — a line from stderr (trailing newline stripped)
            ("exit", code)    — process exit code (always last)
        """
        args = list(args)
        logger.debug("Streaming: %s (cwd=%s)", args, cwd)
        try:
            proc = subprocess.Popen(
                args,
                cwd=cwd,
                env=_merged_env(env),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,  # line-buffered
            )
        except FileNotFoundError:
            yield ("stderr", f"command not found: {args[0]}")
            yield ("exit", EXIT_NOT_FOUND)
            return

        # Both pipes are read through one selector so neither can fill up
        # and block the child.
        sel = selectors.DefaultSelector()
        try:
            if proc.stdout:
                sel.register(proc.stdout, selectors.EVENT_READ, "stdout")
            if proc.stderr:
                sel.register(proc.stderr, selectors.EVENT_READ, "stderr")

            open_streams = len(sel.get_map())
            while open_streams > 0:
                for key, _ in sel.select():
                    source: str = key.data
                    line = key.fileobj.readline()  # type: ignore[union-attr]
                    if not line:
                        sel.unregister(key.fileobj)
                        open_streams -= 1
                        continue
                    yield (source, line.rstrip("\n"))  # type: ignore[misc]
        finally:
            sel.close()

        proc.wait()
        yield ("exit", proc.returncode)

    def interactive(self, args: Sequence[str]) -> int:
        """Run a command attached to this process's terminal."""
        args = list(args)
        logger.debug("Interactive: %s", args)
        try:
            return subprocess.run(args).returncode
        except FileNotFoundError:
            logger.error("command not found: %s", args[0])
            return EXIT_NOT_FOUND
