"""
Configuration loader — reads devbench.yml into the config model.

A missing file is not an error: every setting has a default taken
from the layout the dev container was built for. An unreadable or
invalid file is.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from devbench.core.models.config import DevbenchConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "devbench.yml"


class ConfigError(Exception):
    """Raised when devbench configuration is invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for devbench.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to devbench.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> DevbenchConfig:
    """Load and validate devbench configuration.

    Relative directories in the file (``container.compose_dir``,
    ``local_bin.source_dir``) are resolved against the file's directory.
    Without a file they are resolved against the cwd.

    Args:
        path: Explicit path to devbench.yml. If None, searches upward.

    Returns:
        Validated DevbenchConfig.

    Raises:
        ConfigError: If an explicit path is missing, or any file is invalid.
    """
    explicit = path is not None
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return _resolve_paths(DevbenchConfig(), Path.cwd())

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return _resolve_paths(DevbenchConfig(), Path.cwd())

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = DevbenchConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid devbench configuration: {e}") from e

    logger.info("Loaded config for container '%s'", config.container.name)
    return _resolve_paths(config, path.parent.resolve())


def _resolve_paths(config: DevbenchConfig, base: Path) -> DevbenchConfig:
    compose_dir = Path(config.container.compose_dir).expanduser()
    if not compose_dir.is_absolute():
        config.container.compose_dir = str((base / compose_dir).resolve())

    source_dir = Path(config.local_bin.source_dir).expanduser()
    if not source_dir.is_absolute():
        config.local_bin.source_dir = str((base / source_dir).resolve())

    config.local_bin.target_dir = str(Path(config.local_bin.target_dir).expanduser())
    return config


def check_config(config: DevbenchConfig) -> list[str]:
    """Non-fatal problems worth telling the user about."""
    warnings: list[str] = []
    compose_dir = Path(config.container.compose_dir)
    if not any((compose_dir / name).is_file() for name in _COMPOSE_FILES):
        warnings.append(f"No compose file in {compose_dir}")
    if not config.packages:
        warnings.append("No package groups defined")
    for group, packages in config.packages.items():
        if not packages:
            warnings.append(f"Package group '{group}' is empty")
    return warnings


_COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml")
