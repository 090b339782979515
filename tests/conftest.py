"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from devbench.adapters.containers.docker import DockerAdapter
from devbench.adapters.mock import MockRunner
from devbench.core.interaction import ScriptedInteraction
from devbench.core.models.config import ContainerSettings, DevbenchConfig

CONTAINER = "libsemigroups-x86-dev"
WORKSPACE = "/workspace/libsemigroups"
HOST_REPO = "/host-repo"


@pytest.fixture
def runner() -> MockRunner:
    """A MockRunner where every command succeeds with no output."""
    return MockRunner()


@pytest.fixture
def config(tmp_path: Path) -> DevbenchConfig:
    return DevbenchConfig(
        container=ContainerSettings(
            name=CONTAINER,
            workspace=WORKSPACE,
            host_repo=HOST_REPO,
            compose_dir=str(tmp_path),
            compose_command=["docker", "compose"],
        )
    )


@pytest.fixture
def docker(config: DevbenchConfig, runner: MockRunner) -> DockerAdapter:
    return DockerAdapter(config.container, runner=runner)


@pytest.fixture
def ui() -> ScriptedInteraction:
    return ScriptedInteraction()


# ── Container state helpers ─────────────────────────────────────────


def set_running(runner: MockRunner, name: str = CONTAINER) -> None:
    runner.on_output("docker", "ps", "--format", stdout=f"other\n{name}\n")
    runner.on_output("docker", "ps", "-a", "--format", stdout=f"other\n{name}\n")


def set_stopped(runner: MockRunner, name: str = CONTAINER) -> None:
    runner.on_output("docker", "ps", "--format", stdout="other\n")
    runner.on_output("docker", "ps", "-a", "--format", stdout=f"other\n{name}\n")


def set_not_created(runner: MockRunner) -> None:
    runner.on_output("docker", "ps", "--format", stdout="")
    runner.on_output("docker", "ps", "-a", "--format", stdout="")


def set_workspace_repo(runner: MockRunner, exists: bool = True) -> None:
    runner.on_output(
        "docker", "exec", CONTAINER, "test", "-d", f"{WORKSPACE}/.git",
        code=0 if exists else 1,
    )


def set_host_repo(runner: MockRunner, exists: bool = True) -> None:
    runner.on_output(
        "docker", "exec", CONTAINER, "test", "-d", f"{HOST_REPO}/.git",
        code=0 if exists else 1,
    )


def only_probes(runner: MockRunner) -> bool:
    """True when nothing but ``docker ps`` queries were issued."""
    return all(args[:2] == ["docker", "ps"] for args in runner.commands)


# ── Real git repositories ───────────────────────────────────────────


def git(path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(path), *args],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> str:
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message)
    return git(repo, "rev-parse", "HEAD")


@pytest.fixture
def git_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Commits and stashes need an identity; don't depend on the host's."""
    for key, value in {
        "GIT_AUTHOR_NAME": "Devbench Tester",
        "GIT_AUTHOR_EMAIL": "tester@example.com",
        "GIT_COMMITTER_NAME": "Devbench Tester",
        "GIT_COMMITTER_EMAIL": "tester@example.com",
        "GIT_CONFIG_NOSYSTEM": "1",
    }.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def host_and_clone(tmp_path: Path, git_identity: None) -> tuple[Path, Path]:
    """A source repo on ``main`` with one commit, and a clone of it."""
    host = tmp_path / "host"
    host.mkdir()
    subprocess.run(["git", "init", "-q", str(host)], check=True)
    git(host, "symbolic-ref", "HEAD", "refs/heads/main")
    commit_file(host, "README.md", "# host\n", "initial")
    commit_file(host, "notes.txt", "one\n", "add notes")

    work = tmp_path / "work"
    subprocess.run(["git", "clone", "-q", str(host), str(work)], check=True)
    return host, work
