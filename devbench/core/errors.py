"""
Error taxonomy shared by services and the dispatcher.

PreconditionNotMet and InvalidArgument are reported and turned into
exit code 1 without any mutation. ExternalToolFailure carries the
tool's own exit code so it can be propagated as-is.
"""

from __future__ import annotations


class DevbenchError(Exception):
    """Base class for all devbench errors."""


class PreconditionNotMet(DevbenchError):
    """Container not running, repository not initialized, tool missing."""


class InvalidArgument(DevbenchError):
    """Unknown verb, bad sanitizer name, malformed menu input."""


class ExternalToolFailure(DevbenchError):
    """An external command exited non-zero."""

    def __init__(self, message: str, return_code: int = 1):
        super().__init__(message)
        self.return_code = return_code


class UnsupportedShellError(DevbenchError):
    """No profile writer is registered for the user's shell."""
