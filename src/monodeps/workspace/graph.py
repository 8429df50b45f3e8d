"""Dependency graph over workspace packages.

Edges point both ways: ``dependencies`` from a package to the packages it
requires, ``used_by`` from a package to the packages requiring it. Nodes are
keyed by package name, so traversals never follow object references.

Only dependencies on packages of the same workspace become edges, and
packages without any edge are left out of the graph.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from monodeps.errors import CyclicDependencyError

if TYPE_CHECKING:
    from monodeps.workspace.package import Package

logger = logging.getLogger(__name__)


@dataclass
class GraphNode:
    """A package in the graph.

    Attributes:
        name: Package name.
        dependencies: Names of packages this package depends on.
        used_by: Names of packages depending on this package.
    """

    name: str
    dependencies: list[str] = field(default_factory=list)
    used_by: list[str] = field(default_factory=list)

    @property
    def is_isolated(self) -> bool:
        return not self.dependencies and not self.used_by


class DependencyGraph:
    """Acyclic dependency graph of a workspace.

    Use :meth:`build` to construct one; it refuses cyclic workspaces.
    """

    def __init__(self, nodes: dict[str, GraphNode]) -> None:
        self._nodes = nodes

    @classmethod
    def build(cls, packages: Mapping[str, Package]) -> DependencyGraph:
        """Build the graph for a set of packages.

        Args:
            packages: Mapping of package name to package.

        Returns:
            The dependency graph.

        Raises:
            CyclicDependencyError: If the packages depend on each other in a cycle.
        """
        nodes: dict[str, GraphNode] = {}

        def node_for(name: str) -> GraphNode:
            if name not in nodes:
                nodes[name] = GraphNode(name)
            return nodes[name]

        for pkg in packages.values():
            pkg_node = node_for(pkg.name)
            for dep_name in pkg.dependencies:
                if dep_name not in packages:
                    continue
                dep_node = node_for(dep_name)
                pkg_node.dependencies.append(dep_name)
                dep_node.used_by.append(pkg.name)

        for name in [n.name for n in nodes.values() if n.is_isolated]:
            del nodes[name]

        cycle = find_cycle(nodes)
        if cycle is not None:
            raise CyclicDependencyError(cycle)

        logger.debug("Built dependency graph with %d packages", len(nodes))
        return cls(nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def names(self) -> list[str]:
        """Sorted names of all packages in the graph."""
        return sorted(self._nodes)

    def get_node(self, name: str) -> GraphNode | None:
        return self._nodes.get(name)

    def get_dependencies(self, name: str) -> list[str]:
        """Get the packages a package directly depends on."""
        node = self._nodes.get(name)
        return list(node.dependencies) if node else []

    def get_dependents(self, name: str) -> list[str]:
        """Get the packages directly depending on a package."""
        node = self._nodes.get(name)
        return list(node.used_by) if node else []

    def get_transitive_dependents(self, name: str) -> set[str]:
        """Get every package depending on a package, directly or not."""
        seen: set[str] = set()
        stack = self.get_dependents(name)
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self.get_dependents(current))
        return seen


def find_cycle(nodes: Mapping[str, GraphNode]) -> list[str] | None:
    """Search the graph for a dependency cycle.

    Depth-first search from every node along ``dependencies`` edges,
    tracking the current path of ancestors.

    Args:
        nodes: Graph nodes keyed by name.

    Returns:
        The cycle as a list of names starting and ending with the repeated
        package, or None if the graph is acyclic.
    """
    finished: set[str] = set()

    for start in nodes:
        if start in finished:
            continue

        path: list[str] = [start]
        on_path: set[str] = {start}
        # One iterator over the remaining dependencies per path entry
        pending = [iter(nodes[start].dependencies)]

        while pending:
            next_name = next(pending[-1], None)
            if next_name is None:
                pending.pop()
                done = path.pop()
                on_path.discard(done)
                finished.add(done)
                continue

            if next_name in on_path:
                return path[path.index(next_name) :] + [next_name]
            if next_name in finished or next_name not in nodes:
                continue

            path.append(next_name)
            on_path.add(next_name)
            pending.append(iter(nodes[next_name].dependencies))

    return None
