"""
Sync models — request and outcome of a repository sync.

The sync engine takes a RepositorySyncRequest and always answers with a
SyncOutcome. It never raises for git failures: those become
``SyncOutcome.failed(reason)`` with the tool's own message.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SyncKind = Literal["synced", "stashed", "cancelled", "branch_not_found", "failed"]


class RepositorySyncRequest(BaseModel):
    """One sync invocation: which working copy, from where, onto what."""

    local_path: str
    remote_source: str
    target_branch: str | None = None
    remote_prefix: str = "host"

    @property
    def fetch_refspec(self) -> str:
        """Refspec that mirrors every remote branch under the prefix."""
        return f"+refs/heads/*:refs/remotes/{self.remote_prefix}/*"

    def tracking_ref(self, branch: str) -> str:
        return f"refs/remotes/{self.remote_prefix}/{branch}"


class SyncOutcome(BaseModel):
    """Result of a sync.

    ``stash_ref`` is set whenever the engine stashed local changes,
    whatever the final kind is, so the caller can tell the user how to
    get them back.
    """

    kind: SyncKind
    commit_summary: str = ""
    branch: str = ""
    available_branches: list[str] = Field(default_factory=list)
    reason: str = ""
    stash_ref: str | None = None

    @property
    def ok(self) -> bool:
        """Success-path outcomes (cancellation included)."""
        return self.kind in ("synced", "stashed", "cancelled")

    @property
    def stashed(self) -> bool:
        return self.stash_ref is not None

    @classmethod
    def synced(cls, commit_summary: str, branch: str = "", **kwargs) -> SyncOutcome:
        return cls(kind="synced", commit_summary=commit_summary, branch=branch, **kwargs)

    @classmethod
    def stashed_only(cls, stash_ref: str) -> SyncOutcome:
        """Changes were stashed but nothing was merged."""
        return cls(kind="stashed", stash_ref=stash_ref)

    @classmethod
    def cancelled(cls, **kwargs) -> SyncOutcome:
        return cls(kind="cancelled", **kwargs)

    @classmethod
    def branch_not_found(cls, branch: str, available: list[str], **kwargs) -> SyncOutcome:
        return cls(
            kind="branch_not_found",
            branch=branch,
            available_branches=available,
            **kwargs,
        )

    @classmethod
    def failed(cls, reason: str, **kwargs) -> SyncOutcome:
        return cls(kind="failed", reason=reason, **kwargs)
