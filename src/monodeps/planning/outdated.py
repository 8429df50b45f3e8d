"""Detection of requirements lagging behind workspace packages."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace

from monodeps.planning.queue import DependencyUpdate, PublishRecord, arrange_publish_queue
from monodeps.versioning import BumpLevel, BumpType, Version, VersionTarget
from monodeps.workspace.graph import DependencyGraph
from monodeps.workspace.package import Package

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OutdatedDependency:
    """A requirement lower than the current version of the required package.

    Attributes:
        package: Name of the package holding the requirement.
        dependency: Name of the required package.
        required: Version currently required.
        actual: Current version of the required package.
        level: Component by which the requirement lags.
    """

    package: str
    dependency: str
    required: Version
    actual: Version
    level: BumpType

    @property
    def updated_requirement(self) -> Version:
        return self.actual.with_prefix(self.required.prefix)


def find_outdated(packages: Mapping[str, Package]) -> list[OutdatedDependency]:
    """Find every requirement on a workspace package that lags behind it."""
    outdated: list[OutdatedDependency] = []

    for pkg in packages.values():
        for dep_name, required in pkg.dependencies.items():
            dep_pkg = packages.get(dep_name)
            if dep_pkg is None:
                continue

            diff = required.compare(dep_pkg.version)
            if diff.is_less and diff.level is not None:
                outdated.append(
                    OutdatedDependency(
                        package=pkg.name,
                        dependency=dep_name,
                        required=required,
                        actual=dep_pkg.version,
                        level=diff.level,
                    )
                )

    return outdated


def sync_entries(outdated: list[OutdatedDependency]) -> dict[str, VersionTarget]:
    """Turn each lagging package into an entry at its most severe lag level."""
    levels: dict[str, BumpType] = {}
    for item in outdated:
        current = levels.get(item.package)
        if current is None or item.level > current:
            levels[item.package] = item.level
    return {name: BumpLevel(level) for name, level in levels.items()}


def plan_sync(
    packages: Mapping[str, Package],
    graph: DependencyGraph,
) -> list[PublishRecord]:
    """Plan republishing every package with lagging requirements.

    The planned queue is extended so each lagging requirement is rewritten
    to the required package's current version, keeping its prefix.

    Args:
        packages: Package catalog.
        graph: Dependency graph of the catalog.

    Returns:
        Publish records, dependencies before dependents.
    """
    outdated = find_outdated(packages)
    if not outdated:
        return []

    for item in outdated:
        logger.debug(
            "%s requires %s@%s, current is %s",
            item.package,
            item.dependency,
            item.required,
            item.actual,
        )

    records = arrange_publish_queue(sync_entries(outdated), packages, graph)

    catch_up: dict[str, list[OutdatedDependency]] = {}
    for item in outdated:
        catch_up.setdefault(item.package, []).append(item)

    result: list[PublishRecord] = []
    for record in records:
        planned = {u.name for u in record.dependencies}
        extra = tuple(
            DependencyUpdate(item.dependency, item.required, item.updated_requirement)
            for item in catch_up.get(record.name, [])
            if item.dependency not in planned
        )
        if extra:
            record = replace(record, dependencies=record.dependencies + extra)
        result.append(record)

    return result
