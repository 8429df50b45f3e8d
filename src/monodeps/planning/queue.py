"""Publish queue planning.

When a package gets a new version, every package depending on it has to be
republished too, after it, with its requirement updated. Planning runs in
three steps:

1. Expand the entry packages through ``used_by`` edges into the affected
   set, remembering which package pulled each one in.
2. Compute the new version of every affected package, dependencies first.
   Entries take the version requested by the caller. Other packages take
   the most severe change among their affected dependencies, compared
   against the version they currently require, defaulting to ``patch``.
3. Sort by weight (1 + the weights of the affected dependencies) so every
   package comes after all of its affected dependencies.

Planning only reads packages and graph; the resulting records are the
only thing allowed to change a package (see :meth:`Package.apply`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from monodeps.errors import PackageNotFoundError
from monodeps.versioning import BumpType, Version, VersionTarget
from monodeps.workspace.graph import DependencyGraph
from monodeps.workspace.package import Package

# Provenance marker for packages requested directly by the caller
EXPLICIT = None

Provenance = set[str | None]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DependencyUpdate:
    """A requirement rewritten because the dependency is republished."""

    name: str
    previous: Version
    new: Version


@dataclass(frozen=True, slots=True)
class PublishRecord:
    """Everything needed to republish one package.

    Attributes:
        name: Package name.
        previous_version: Version before publishing.
        new_version: Version to publish.
        dependencies: Requirements to rewrite.
        provenance: Packages that caused this one to be queued; contains
            ``EXPLICIT`` if it was requested directly.
        weight: Topological sort key, higher publishes later.
    """

    name: str
    previous_version: Version
    new_version: Version
    dependencies: tuple[DependencyUpdate, ...]
    provenance: frozenset[str | None]
    weight: int = 1

    @property
    def is_entry(self) -> bool:
        return EXPLICIT in self.provenance


@dataclass(frozen=True, slots=True)
class ComputedVersion:
    name: str
    weight: int
    version: Version
    level: BumpType | None


def expand_affected(
    entries: Iterable[str],
    packages: Mapping[str, Package],
    graph: DependencyGraph,
) -> dict[str, Provenance]:
    """Collect the entries and every package depending on them.

    Args:
        entries: Names of the packages requested by the caller.
        packages: Package catalog.
        graph: Dependency graph of the catalog.

    Returns:
        Mapping of affected package name to the set of packages that caused
        its inclusion (``EXPLICIT`` for entries), in discovery order.
    """
    affected: dict[str, Provenance] = {}

    for entry in entries:
        stack: list[tuple[str, str | None]] = [(entry, EXPLICIT)]
        while stack:
            name, source = stack.pop()
            if name not in packages:
                continue
            if name in affected:
                affected[name].add(source)
                continue

            affected[name] = {source}
            # Reversed so dependents are visited in declaration order
            for dependent in reversed(graph.get_dependents(name)):
                stack.append((dependent, name))

    return affected


def _affected_dependencies(
    name: str,
    affected: Mapping[str, Provenance],
    graph: DependencyGraph,
) -> list[str]:
    return [d for d in graph.get_dependencies(name) if d in affected]


def compute_versions(
    affected: Mapping[str, Provenance],
    entries: Mapping[str, VersionTarget],
    packages: Mapping[str, Package],
    graph: DependencyGraph,
) -> dict[str, ComputedVersion]:
    """Compute weight and new version of every affected package.

    Dependencies are resolved before their dependents with an explicit
    post-order traversal; results are memoized by package name.

    Args:
        affected: Affected set from :func:`expand_affected`.
        entries: Requested target for each entry package.
        packages: Package catalog.
        graph: Dependency graph of the catalog.

    Returns:
        Computed versions keyed by package name.
    """
    computed: dict[str, ComputedVersion] = {}

    def resolve(name: str) -> ComputedVersion:
        pkg = packages[name]
        dep_names = _affected_dependencies(name, affected, graph)

        weight = 1 + sum(computed[d].weight for d in dep_names)

        if name in entries:
            return ComputedVersion(name, weight, pkg.version.update(entries[name]), None)

        level = BumpType.PATCH
        for dep_name in dep_names:
            diff = computed[dep_name].version.compare(pkg.dependencies[dep_name])
            if diff.is_greater and diff.level is not None and diff.level > level:
                level = diff.level

        return ComputedVersion(name, weight, pkg.version.bump(level), level)

    for start in affected:
        stack = [start]
        while stack:
            current = stack[-1]
            if current in computed:
                stack.pop()
                continue

            pending = [
                d for d in _affected_dependencies(current, affected, graph) if d not in computed
            ]
            if pending:
                stack.extend(pending)
                continue

            stack.pop()
            computed[current] = resolve(current)

    return computed


def build_records(
    computed: Mapping[str, ComputedVersion],
    affected: Mapping[str, Provenance],
    packages: Mapping[str, Package],
) -> list[PublishRecord]:
    """Order computed versions by weight and turn them into publish records."""
    ordered = sorted(computed.values(), key=lambda c: c.weight)

    records: list[PublishRecord] = []
    for result in ordered:
        pkg = packages[result.name]

        updates = []
        for dep_name, required in pkg.dependencies.items():
            dep_result = computed.get(dep_name)
            if dep_result is None:
                continue
            updates.append(
                DependencyUpdate(
                    name=dep_name,
                    previous=required,
                    new=dep_result.version.with_prefix(required.prefix),
                )
            )

        records.append(
            PublishRecord(
                name=result.name,
                previous_version=pkg.version,
                new_version=result.version,
                dependencies=tuple(updates),
                provenance=frozenset(affected[result.name]),
                weight=result.weight,
            )
        )

    return records


def arrange_publish_queue(
    entries: Mapping[str, VersionTarget],
    packages: Mapping[str, Package],
    graph: DependencyGraph,
) -> list[PublishRecord]:
    """Plan the publish queue for a set of entry packages.

    Args:
        entries: Package name to requested version (explicit or bump level).
        packages: Package catalog.
        graph: Dependency graph of the catalog.

    Returns:
        Publish records, dependencies before dependents.

    Raises:
        PackageNotFoundError: If an entry is not in the catalog.
    """
    for name in entries:
        if name not in packages:
            raise PackageNotFoundError(name, list(packages))

    affected = expand_affected(entries, packages, graph)
    computed = compute_versions(affected, entries, packages, graph)
    records = build_records(computed, affected, packages)

    logger.debug(
        "Planned %d packages from entries %s",
        len(records),
        ", ".join(entries),
    )
    return records
