"""
Tests for domain models — process results, container state, sync, build.
"""

from devbench.core.models import (
    SANITIZERS,
    BuildStep,
    ContainerSettings,
    ContainerState,
    DevbenchConfig,
    ProcessResult,
    RepositorySyncRequest,
    SyncOutcome,
)

# ── ProcessResult ────────────────────────────────────────────────────


class TestProcessResult:
    def test_success(self):
        r = ProcessResult.success(["git", "status"], stdout="clean")
        assert r.ok
        assert r.stdout == "clean"

    def test_failure(self):
        r = ProcessResult.failure(["git", "pull"], return_code=128, stderr="fatal: no\n")
        assert not r.ok
        assert r.return_code == 128
        assert r.error == "fatal: no"

    def test_error_falls_back_to_stdout(self):
        r = ProcessResult(args=["x"], return_code=2, stdout="oops\n")
        assert r.error == "oops"

    def test_error_falls_back_to_exit_code(self):
        r = ProcessResult(args=["docker", "ps", "-a"], return_code=3)
        assert r.error == "docker ps exited with code 3"


# ── ContainerState ───────────────────────────────────────────────────


class TestContainerState:
    def test_values(self):
        assert ContainerState.RUNNING.value == "running"
        assert ContainerState("not-created") is ContainerState.NOT_CREATED

    def test_labels(self):
        assert ContainerState.NOT_CREATED.label == "Not created"
        assert ContainerState.STOPPED.label == "Stopped"
        assert ContainerState.RUNNING.label == "Running"


# ── Sync ─────────────────────────────────────────────────────────────


class TestRepositorySyncRequest:
    def test_refspec_uses_prefix(self):
        req = RepositorySyncRequest(local_path="/w", remote_source="/h")
        assert req.fetch_refspec == "+refs/heads/*:refs/remotes/host/*"
        assert req.tracking_ref("main") == "refs/remotes/host/main"

    def test_custom_prefix(self):
        req = RepositorySyncRequest(local_path="/w", remote_source="/h", remote_prefix="up")
        assert req.tracking_ref("dev") == "refs/remotes/up/dev"


class TestSyncOutcome:
    def test_synced(self):
        o = SyncOutcome.synced("abc123 Fix", branch="main")
        assert o.kind == "synced"
        assert o.ok
        assert not o.stashed

    def test_stashed_only(self):
        o = SyncOutcome.stashed_only("stash@{0}")
        assert o.kind == "stashed"
        assert o.ok
        assert o.stashed

    def test_cancelled_is_ok(self):
        assert SyncOutcome.cancelled().ok

    def test_branch_not_found(self):
        o = SyncOutcome.branch_not_found("feat", ["main", "dev"])
        assert not o.ok
        assert o.available_branches == ["main", "dev"]

    def test_failed_keeps_stash(self):
        o = SyncOutcome.failed("merge conflict", stash_ref="stash@{0}")
        assert not o.ok
        assert o.reason == "merge conflict"
        assert o.stashed


# ── Build ────────────────────────────────────────────────────────────


class TestSanitizers:
    def test_known_names(self):
        assert set(SANITIZERS) == {"asan", "tsan", "ubsan"}

    def test_flags_and_tags(self):
        asan = SANITIZERS["asan"]
        assert asan.flag == "address"
        assert asan.test_tags == "[quick][exclude:no-sanitize-address]"
        assert SANITIZERS["tsan"].test_tags == "[quick][exclude:no-sanitize-thread]"

    def test_options(self):
        assert SANITIZERS["asan"].options == ""
        assert SANITIZERS["tsan"].options == "suppressions=tsan-suppression.cfg"
        assert SANITIZERS["ubsan"].options_env == "UBSAN_OPTIONS"
        assert SANITIZERS["ubsan"].log_dir == "ubsan-logs"

    def test_build_step_env_default(self):
        assert BuildStep(name="x", command="true").env == {}


# ── Config ───────────────────────────────────────────────────────────


class TestDevbenchConfig:
    def test_defaults(self):
        cfg = DevbenchConfig()
        assert cfg.container.name == "libsemigroups-x86-dev"
        assert cfg.container.workspace == "/workspace/libsemigroups"
        assert cfg.container.host_repo == "/host-repo"
        assert cfg.build.jobs == 12
        assert cfg.packages["core"] == ["automake"]
        assert cfg.packages["doc"] == ["doxygen", "graphviz", "inkscape", "mactex"]

    def test_compose_command_string_is_split(self):
        settings = ContainerSettings(compose_command="docker compose")
        assert settings.compose_command == ["docker", "compose"]
