"""Workspace configuration."""

from monodeps.config.loader import CONFIG_FILENAME, find_config, load_config
from monodeps.config.schema import ClientType, MonodepsConfig, PublishConfig

__all__ = [
    "CONFIG_FILENAME",
    "ClientType",
    "MonodepsConfig",
    "PublishConfig",
    "find_config",
    "load_config",
]
