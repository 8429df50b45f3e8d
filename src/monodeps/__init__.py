"""monodeps - manage packages that are versioned and published together.

Provides:
- Workspace discovery and package.json loading
- Dependency graph with cycle detection
- Publish queue planning with version propagation to dependents
- Sequential publishing with manifest rollback on failure
"""

from monodeps.config import MonodepsConfig, load_config
from monodeps.errors import (
    ConfigurationError,
    CyclicDependencyError,
    InvalidVersionError,
    ManifestError,
    MonodepsError,
    PackageNotFoundError,
    PublishError,
    WorkspaceNotFoundError,
)
from monodeps.planning import (
    DependencyUpdate,
    PublishRecord,
    arrange_publish_queue,
    plan_sync,
)
from monodeps.versioning import BumpLevel, BumpType, ExplicitVersion, Version
from monodeps.workspace import DependencyGraph, Package, Workspace

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Workspace",
    "Package",
    "DependencyGraph",
    "MonodepsConfig",
    "load_config",
    # Versioning
    "Version",
    "BumpType",
    "BumpLevel",
    "ExplicitVersion",
    # Planning
    "PublishRecord",
    "DependencyUpdate",
    "arrange_publish_queue",
    "plan_sync",
    # Errors
    "MonodepsError",
    "ConfigurationError",
    "WorkspaceNotFoundError",
    "PackageNotFoundError",
    "ManifestError",
    "InvalidVersionError",
    "CyclicDependencyError",
    "PublishError",
]
