"""
Process result model — the outcome of one external command.

Every adapter call that shells out produces a ProcessResult. The
runner never raises on a non-zero exit; callers decide whether a
failure is fatal.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProcessResult(BaseModel):
    """Captured result of an external command."""

    args: list[str] = Field(default_factory=list)
    return_code: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command exited zero."""
        return self.return_code == 0

    @property
    def error(self) -> str:
        """Best human-readable failure message."""
        return (
            self.stderr.strip()
            or self.stdout.strip()
            or f"{' '.join(self.args[:2])} exited with code {self.return_code}"
        )

    @classmethod
    def success(cls, args: list[str] | None = None, stdout: str = "") -> ProcessResult:
        """Create a zero-exit result."""
        return cls(args=args or [], return_code=0, stdout=stdout)

    @classmethod
    def failure(
        cls,
        args: list[str] | None = None,
        return_code: int = 1,
        stderr: str = "",
    ) -> ProcessResult:
        """Create a non-zero-exit result."""
        return cls(args=args or [], return_code=return_code, stderr=stderr)
