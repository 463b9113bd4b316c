"""
Configuration loader — reads tsgen.yml into a GeneratorConfig.

The file is optional: without one, defaults apply and paths resolve
against the working directory.  It may be flat or wrap everything
under a ``tsgen:`` key.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from schematsgen.core.models.generator import GeneratorConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "tsgen.yml"


class ConfigError(Exception):
    """Raised when the generator configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for tsgen.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to tsgen.yml, or None if not found.
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


def load_config(path: Path | None = None) -> tuple[GeneratorConfig, Path]:
    """Load and validate the generator configuration.

    Args:
        path: Explicit path to tsgen.yml. If None, searches upward and
            falls back to defaults when nothing is found.

    Returns:
        (config, root) where ``root`` is the directory relative paths
        in the config resolve against.

    Raises:
        ConfigError: If an explicit file is missing, or a file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return GeneratorConfig(), Path.cwd().resolve()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading generator config from %s", path)

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

    if "tsgen" in data:
        data = data["tsgen"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping under 'tsgen' in {path}")

    # a single pattern is accepted as shorthand
    if isinstance(data.get("model_paths"), str):
        data["model_paths"] = [data["model_paths"]]

    try:
        config = GeneratorConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid generator configuration: {e}") from e

    logger.info("Loaded config from %s (%d model pattern(s))", path, len(config.model_paths))
    return config, path.parent.resolve()
