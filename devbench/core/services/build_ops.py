"""
Build & instrumented test runs inside the dev container.

A run is an ordered list of BuildSteps (configure → build → test under
valgrind or a sanitizer).  Steps execute one ``docker exec`` at a time
with output streamed to the operator; the first non-zero exit stops
the run and becomes its exit code.
"""

from __future__ import annotations

import logging
import shlex

from devbench.adapters.containers.docker import DockerAdapter
from devbench.core.errors import InvalidArgument
from devbench.core.interaction import Interaction
from devbench.core.models.build import SANITIZERS, UBSAN_LOG_PREFIX, BuildStep, Sanitizer
from devbench.core.models.config import BuildSettings

logger = logging.getLogger(__name__)

SANITIZER_USAGE = "sanitizer <asan|tsan|ubsan> [test_target]"


def resolve_sanitizer(name: str | None) -> Sanitizer:
    """Map a short sanitizer name to its profile.

    Raises:
        InvalidArgument: for anything but asan, tsan or ubsan.
    """
    sanitizer = SANITIZERS.get((name or "").strip())
    if sanitizer is None:
        raise InvalidArgument("Invalid sanitizer. Choose: asan, tsan, or ubsan")
    return sanitizer


# ── Step construction ───────────────────────────────────────────


def _build_steps(build: BuildSettings, configure: str, target: str) -> list[BuildStep]:
    return [
        BuildStep(name="prepare", command="mkdir -p m4"),
        BuildStep(name="autogen", command="./autogen.sh"),
        BuildStep(name="configure", command=configure),
        BuildStep(name="build", command=f"make -j{build.jobs}"),
        BuildStep(name="build-tests", command=f"make {shlex.quote(target)} -j{build.jobs}"),
    ]


def valgrind_steps(build: BuildSettings, target: str, tags: str) -> list[BuildStep]:
    configure = shlex.join(["./configure", *build.configure_flags])
    test = shlex.join([
        "libtool", "--mode=execute",
        "valgrind", "--leak-check=full", "--error-exitcode=1",
        f"./{target}", tags,
    ])
    return [
        *_build_steps(build, configure, target),
        BuildStep(name="valgrind-version", command="valgrind --version"),
        BuildStep(name="test", command=test),
    ]


def sanitizer_steps(build: BuildSettings, sanitizer: Sanitizer, target: str) -> list[BuildStep]:
    cxxflags = f"-fsanitize={sanitizer.flag} -fdiagnostics-color -fno-omit-frame-pointer -g -O1"
    configure = shlex.join([
        "./configure",
        f"CXX={build.sanitizer_cxx}",
        f"CXXFLAGS={cxxflags}",
    ])
    steps = _build_steps(build, configure, target)
    if sanitizer.log_dir:
        log_dir = shlex.quote(sanitizer.log_dir)
        steps.append(BuildStep(name="reset-logs", command=f"rm -rf {log_dir} && mkdir -p {log_dir}"))

    env = {sanitizer.options_env: sanitizer.options} if sanitizer.options else {}
    steps.append(BuildStep(
        name="test",
        command=shlex.join([f"./{target}", sanitizer.test_tags]),
        env=env,
    ))
    return steps


# ── Execution ───────────────────────────────────────────────────


def run_in_container(
    docker: DockerAdapter,
    workdir: str,
    steps: list[BuildStep],
    ui: Interaction,
) -> int:
    """Run steps in order, stopping at the first failure.

    Returns:
        0 if every step passed, else the failing step's exit code.
    """
    for step in steps:
        logger.info("Step %s: %s", step.name, step.command)
        code = docker.exec_stream(
            ["bash", "-c", step.command],
            ui.line,
            workdir=workdir,
            env=step.env,
        )
        if code != 0:
            ui.error(f"Step '{step.name}' failed with exit code {code}")
            return code
    return 0


def collect_sanitizer_logs(
    docker: DockerAdapter,
    workdir: str,
    sanitizer: Sanitizer,
) -> dict[str, str]:
    """Read every report the sanitizer wrote into its log directory.

    The runtime names each file ``<prefix>.<pid>``; the directory is
    emptied before the test run, so whatever is here came from it.
    """
    if not sanitizer.log_dir:
        return {}
    listing = docker.exec(
        ["find", sanitizer.log_dir, "-type", "f", "-name", f"{UBSAN_LOG_PREFIX}*"],
        workdir=workdir,
    )
    if not listing.ok:
        return {}

    logs: dict[str, str] = {}
    for path in sorted(p.strip() for p in listing.stdout.splitlines() if p.strip()):
        content = docker.exec(["cat", path], workdir=workdir)
        if content.ok and content.stdout.strip():
            logs[path] = content.stdout
    return logs


def run_valgrind(
    docker: DockerAdapter,
    workdir: str,
    build: BuildSettings,
    ui: Interaction,
    target: str | None = None,
    tags: str | None = None,
) -> int:
    target = target or build.default_target
    ui.success(f"Running valgrind on {target}...")
    steps = valgrind_steps(build, target, tags or build.valgrind_tags)
    return run_in_container(docker, workdir, steps, ui)


def run_sanitizer(
    docker: DockerAdapter,
    workdir: str,
    build: BuildSettings,
    sanitizer: Sanitizer,
    ui: Interaction,
    target: str | None = None,
) -> int:
    target = target or build.default_target
    ui.success(f"Running {sanitizer.flag} sanitizer on {target}...")
    *setup, test = sanitizer_steps(build, sanitizer, target)
    code = run_in_container(docker, workdir, setup, ui)
    if code != 0:
        return code

    code = run_in_container(docker, workdir, [test], ui)

    # Only reports from this test run count, and they outrank its exit status.
    logs = collect_sanitizer_logs(docker, workdir, sanitizer)
    if logs:
        ui.error("UndefinedBehaviorSanitizer found issues:")
        for path, content in logs.items():
            ui.echo(f"── {path}")
            for line in content.splitlines():
                ui.echo(line)
        return 1

    if code == 0:
        ui.success("All tests passed!")
    return code
