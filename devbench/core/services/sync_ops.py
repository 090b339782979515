"""
Repository sync — bring a working copy up to date with a source repo.

The source is usually the host checkout mounted into the dev container,
and the working copy is the clone inside it.  Every step gates the next:

    1. the working copy must have .git
    2. fetch every source branch into refs/remotes/<prefix>/*
    3. read the current branch
    4. uncommitted changes → show them, then stash or cancel
    5. pull the matching branch, or ask which one to pull

Git failures are reported verbatim as ``SyncOutcome.failed`` and are
never retried or rolled back; the working copy stays as git left it.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from devbench.adapters.vcs.git import GitAdapter
from devbench.core.errors import ExternalToolFailure
from devbench.core.interaction import Interaction
from devbench.core.models.sync import RepositorySyncRequest, SyncOutcome

logger = logging.getLogger(__name__)


class SyncEngine:
    """Runs one sync against a working copy reachable through ``git``."""

    def __init__(self, git: GitAdapter, interaction: Interaction):
        self.git = git
        self.ui = interaction

    def sync(self, req: RepositorySyncRequest) -> SyncOutcome:
        if not self.git.has_metadata():
            return SyncOutcome.failed("not initialized")

        stash_ref: str | None = None
        try:
            self.ui.echo("Fetching all changes...")
            self.git.fetch(req.remote_source, req.fetch_refspec)

            current = self.git.current_branch()
            self.ui.echo(f"Current branch: {current or '(detached HEAD)'}")

            if self.git.has_uncommitted_changes():
                self.ui.warn("You have uncommitted changes:")
                for line in self.git.modified_files():
                    self.ui.echo(f"  {line}")
                if not self.ui.confirm("Stash changes and pull?"):
                    self.ui.warn("Sync cancelled")
                    return SyncOutcome.cancelled(branch=current)
                stash_ref = self.git.stash(_stash_message(current))
                self.ui.echo(f"Changes stashed ({stash_ref})")

            target = req.target_branch or current
            if target and self.git.has_ref(req.tracking_ref(target)):
                return self._pull(req, target, stash_ref)

            return self._choose_branch(req, target, stash_ref)

        except ExternalToolFailure as e:
            logger.debug("Sync failed with exit %d", e.return_code)
            return SyncOutcome.failed(str(e), stash_ref=stash_ref)

    def _choose_branch(
        self,
        req: RepositorySyncRequest,
        missing: str,
        stash_ref: str | None,
    ) -> SyncOutcome:
        available = self.git.remote_branches(req.remote_prefix)
        if missing:
            self.ui.warn(f"Branch '{missing}' not found on {req.remote_prefix}")
        if not available:
            self.ui.error(f"No branches found on {req.remote_prefix}")
            return SyncOutcome.branch_not_found(missing, [], stash_ref=stash_ref)

        self.ui.echo(f"Available branches on {req.remote_prefix}:")
        for name in available:
            self.ui.echo(f"  {name}")

        answer = self.ui.ask(
            f"Enter branch name to pull from {req.remote_prefix} (or press Enter to cancel)"
        ).strip()
        if not answer:
            self.ui.warn("Sync cancelled")
            if stash_ref:
                return SyncOutcome.stashed_only(stash_ref)
            return SyncOutcome.cancelled(branch=missing)

        if answer not in available:
            self.ui.error(f"Branch '{answer}' not found on {req.remote_prefix}")
            return SyncOutcome.branch_not_found(answer, available, stash_ref=stash_ref)

        return self._pull(req, answer, stash_ref)

    def _pull(
        self,
        req: RepositorySyncRequest,
        branch: str,
        stash_ref: str | None,
    ) -> SyncOutcome:
        self.ui.echo(f"Pulling changes from {req.remote_prefix}/{branch}...")
        result = self.git.pull(req.remote_source, branch)
        if result.stdout.strip():
            self.ui.echo(result.stdout.strip())
        summary = self.git.last_commit()
        self.ui.success("Sync completed successfully!")
        self.ui.echo(f"Latest commit: {summary}")
        return SyncOutcome.synced(summary, branch=branch, stash_ref=stash_ref)


def _stash_message(branch: str) -> str:
    stamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    return f"devbench sync {branch or 'HEAD'} {stamp}"


def outcome_exit_code(outcome: SyncOutcome) -> int:
    """Cancelling is a normal way out; missing branches and git errors are not."""
    return 0 if outcome.ok else 1


def report_outcome(outcome: SyncOutcome, ui: Interaction) -> int:
    """Print the closing lines for an outcome and return its exit code."""
    if outcome.kind == "failed":
        ui.error(f"Sync failed: {outcome.reason}")
    elif outcome.kind == "branch_not_found" and outcome.available_branches:
        ui.echo("Available branches: " + ", ".join(outcome.available_branches))
    if outcome.stash_ref:
        ref = outcome.stash_ref
        ui.info(f"Your changes are in stash {ref} (restore with: git stash apply {ref})")
    return outcome_exit_code(outcome)
