"""
Git adapter — version control operations on one working copy.

Uses the git CLI.  The working copy can be on this machine or inside
the dev container: ``exec_prefix`` is prepended to every command, so
``["docker", "exec", "dev"]`` runs the same operations remotely.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from devbench.adapters.base import Adapter
from devbench.adapters.shell.command import ProcessRunner
from devbench.core.errors import ExternalToolFailure
from devbench.core.models.process import ProcessResult

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git operations against ``repo_path``.

    Queries return values.  Operations that change the repository
    (clone, fetch, stash, pull) raise ExternalToolFailure with git's
    own message when git exits non-zero.
    """

    def __init__(
        self,
        repo_path: str,
        runner: ProcessRunner | None = None,
        exec_prefix: Sequence[str] = (),
    ):
        super().__init__(runner)
        self.repo_path = repo_path
        self.exec_prefix = list(exec_prefix)

    @property
    def name(self) -> str:
        return "git"

    @property
    def binary(self) -> str:
        return "git"

    # ── Queries ─────────────────────────────────────────────────

    def has_metadata(self) -> bool:
        """Whether the working copy has a .git directory."""
        result = self.runner.run([*self.exec_prefix, "test", "-d", f"{self.repo_path}/.git"])
        return result.ok

    def current_branch(self) -> str:
        return self._git("branch", "--show-current").stdout.strip()

    def has_uncommitted_changes(self) -> bool:
        """Tracked files differ from HEAD (staged or not)."""
        # Stale stat info in the index makes diff-index report untouched files.
        self._git("update-index", "-q", "--refresh", check=False)
        return not self._git("diff-index", "--quiet", "HEAD", "--", check=False).ok

    def modified_files(self) -> list[str]:
        """``git status --short`` lines."""
        output = self._git("status", "--short").stdout
        return [line for line in output.splitlines() if line.strip()]

    def has_ref(self, ref: str) -> bool:
        return self._git("show-ref", "--verify", "--quiet", ref, check=False).ok

    def remote_branches(self, remote_prefix: str) -> list[str]:
        """Branch names mirrored under ``refs/remotes/<remote_prefix>/``."""
        base = f"refs/remotes/{remote_prefix}/"
        output = self._git("for-each-ref", "--format=%(refname)", base).stdout
        names = [
            line.strip()[len(base):]
            for line in output.splitlines()
            if line.strip().startswith(base)
        ]
        return sorted(n for n in names if n and n != "HEAD")

    def last_commit(self) -> str:
        result = self._git("log", "-1", "--oneline", check=False)
        return result.stdout.strip() if result.ok else ""

    def stash_list(self) -> list[str]:
        output = self._git("stash", "list").stdout
        return [line for line in output.splitlines() if line.strip()]

    # ── Operations ──────────────────────────────────────────────

    def clone(self, source: str) -> ProcessResult:
        return self._check(self.runner.run(
            [*self.exec_prefix, "git", "clone", source, self.repo_path]
        ))

    def fetch(self, source: str, refspec: str) -> ProcessResult:
        return self._git("fetch", source, refspec)

    def stash(self, message: str) -> str:
        """Stash tracked changes and return the stash commit's short hash.

        ``stash@{0}`` shifts as soon as anything else is stashed; the hash
        keeps naming these changes.
        """
        self._git("stash", "push", "-m", message)
        return self._git("rev-parse", "--short", "stash@{0}").stdout.strip()

    def pull(self, source: str, branch: str) -> ProcessResult:
        return self._git("pull", "--no-rebase", "--no-edit", source, branch)

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, *args: str, check: bool = True) -> ProcessResult:
        result = self.runner.run([*self.exec_prefix, "git", "-C", self.repo_path, *args])
        if check:
            self._check(result)
        return result

    @staticmethod
    def _check(result: ProcessResult) -> ProcessResult:
        if not result.ok:
            raise ExternalToolFailure(result.error, result.return_code)
        return result
