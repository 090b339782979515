"""
Build models — steps run inside the container and sanitizer profiles.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class BuildStep(BaseModel):
    """One shell command run in the container's repository directory."""

    name: str
    command: str
    env: dict[str, str] = Field(default_factory=dict)


class Sanitizer(BaseModel):
    """A compiler sanitizer and how its test run is configured."""

    name: str                       # short name: asan, tsan, ubsan
    flag: str                       # -fsanitize=<flag>
    options_env: str                # e.g. TSAN_OPTIONS
    options: str = ""
    log_dir: str | None = None      # sanitizer writes reports here

    @property
    def exclude_tag(self) -> str:
        return f"no-sanitize-{self.flag}"

    @property
    def test_tags(self) -> str:
        return f"[quick][exclude:{self.exclude_tag}]"


UBSAN_LOG_DIR = "ubsan-logs"
UBSAN_LOG_PREFIX = "ubsan.log"

SANITIZERS: dict[str, Sanitizer] = {
    "asan": Sanitizer(name="asan", flag="address", options_env="ASAN_OPTIONS"),
    "tsan": Sanitizer(
        name="tsan",
        flag="thread",
        options_env="TSAN_OPTIONS",
        options="suppressions=tsan-suppression.cfg",
    ),
    "ubsan": Sanitizer(
        name="ubsan",
        flag="undefined",
        options_env="UBSAN_OPTIONS",
        options=f"log_path={UBSAN_LOG_DIR}/{UBSAN_LOG_PREFIX}",
        log_dir=UBSAN_LOG_DIR,
    ),
}
