"""
Configuration loader — reads installer.yml into an InstallerConfig.

The file is optional. Lookup order: explicit path (``--config``),
the PWI_CONFIG env var, then ``installer.yml`` in the current
directory. With none of those, the stock defaults are used.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from passwall_installer.core.errors import ConfigurationError
from passwall_installer.core.models.config import InstallerConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "installer.yml"
CONFIG_ENV = "PWI_CONFIG"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Locate the config file from the env var or the working directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)

    candidate = (start_dir or Path.cwd()) / CONFIG_FILE
    return candidate if candidate.is_file() else None


def load_config(path: Path | None = None) -> InstallerConfig:
    """Load and validate installer configuration.

    Args:
        path: Explicit config path. If None, uses ``find_config_file()``.

    Returns:
        Validated InstallerConfig (defaults when no file is found).

    Raises:
        ConfigurationError: If the file is missing, unreadable, or invalid.
    """
    if path is None:
        path = find_config_file()
    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return InstallerConfig()

    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Accept the settings either flat or under an "installer:" key
    if isinstance(data.get("installer"), dict):
        data = data["installer"]

    try:
        config = InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid installer configuration: {e}") from e

    logger.debug(
        "Loaded config: %d feeds, %d packages", len(config.feeds), len(config.packages)
    )
    return config
