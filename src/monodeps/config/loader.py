"""Configuration file loading."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from monodeps.config.schema import MonodepsConfig
from monodeps.errors import ConfigurationError

CONFIG_FILENAME = "monodeps.yaml"

logger = logging.getLogger(__name__)


def find_config(start: Path) -> Path | None:
    """Find monodeps.yaml in start or any of its parents.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to the configuration file, or None if there is none.
    """
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> MonodepsConfig:
    """Load and validate a configuration file.

    An empty file yields the default configuration.

    Args:
        path: Path to monodeps.yaml.

    Returns:
        Validated configuration.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration: {e}", path=path) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", path=path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping", path=path)

    try:
        config = MonodepsConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}", path=path) from e

    logger.debug("Loaded configuration from %s", path)
    return config
