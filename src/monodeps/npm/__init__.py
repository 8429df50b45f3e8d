"""npm / yarn operations."""

from monodeps.npm.client import (
    INSTALL_COMMANDS,
    detect_client,
    has_yarn,
    install_dependencies,
    publish_package,
)

__all__ = [
    "INSTALL_COMMANDS",
    "detect_client",
    "has_yarn",
    "install_dependencies",
    "publish_package",
]
