"""Publish queue planning."""

from monodeps.planning.outdated import (
    OutdatedDependency,
    find_outdated,
    plan_sync,
    sync_entries,
)
from monodeps.planning.queue import (
    EXPLICIT,
    DependencyUpdate,
    PublishRecord,
    arrange_publish_queue,
    build_records,
    compute_versions,
    expand_affected,
)

__all__ = [
    "EXPLICIT",
    "DependencyUpdate",
    "OutdatedDependency",
    "PublishRecord",
    "arrange_publish_queue",
    "build_records",
    "compute_versions",
    "expand_affected",
    "find_outdated",
    "plan_sync",
    "sync_entries",
]
