"""Tests for the dependency graph."""

from __future__ import annotations

import pytest

from monodeps.errors import CyclicDependencyError
from monodeps.workspace.graph import DependencyGraph, GraphNode, find_cycle


class TestBuild:
    """Tests for DependencyGraph.build."""

    def test_links_both_directions(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "a": ("1.0.0", {}),
                "b": ("1.0.0", {"a": "^1.0.0"}),
                "c": ("1.0.0", {"b": "^1.0.0", "a": "1.0.0"}),
            }
        )
        graph = DependencyGraph.build(catalog)

        assert graph.get_dependencies("c") == ["b", "a"]
        assert graph.get_dependencies("a") == []
        assert graph.get_dependents("a") == ["b", "c"]
        assert graph.get_dependents("c") == []

    def test_forward_references(self, make_catalog) -> None:
        """A package may depend on one that comes later in the catalog."""
        catalog = make_catalog(
            {
                "app": ("1.0.0", {"lib": "^2.0.0"}),
                "lib": ("2.0.0", {}),
            }
        )
        graph = DependencyGraph.build(catalog)

        assert graph.get_dependencies("app") == ["lib"]
        assert graph.get_dependents("lib") == ["app"]

    def test_external_dependencies_dropped(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "a": ("1.0.0", {"lodash": "^4.0.0"}),
                "b": ("1.0.0", {"a": "^1.0.0", "react": "^18.0.0"}),
            }
        )
        graph = DependencyGraph.build(catalog)

        assert graph.get_dependencies("b") == ["a"]
        assert "lodash" not in graph
        assert "react" not in graph

    def test_isolated_packages_pruned(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "a": ("1.0.0", {}),
                "b": ("1.0.0", {"a": "^1.0.0"}),
                "alone": ("1.0.0", {"lodash": "^4.0.0"}),
            }
        )
        graph = DependencyGraph.build(catalog)

        assert "alone" not in graph
        assert len(graph) == 2
        assert graph.names == ["a", "b"]

    def test_forward_dependencies_are_catalog_members(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "a": ("1.0.0", {"x": "1.0.0"}),
                "b": ("1.0.0", {"a": "1.0.0", "y": "1.0.0"}),
                "c": ("1.0.0", {"a": "1.0.0", "b": "1.0.0", "z": "1.0.0"}),
                "d": ("1.0.0", {"c": "1.0.0"}),
            }
        )
        graph = DependencyGraph.build(catalog)

        for name in graph.names:
            assert set(graph.get_dependencies(name)) <= set(catalog)

    def test_empty_catalog(self) -> None:
        graph = DependencyGraph.build({})
        assert len(graph) == 0

    def test_unknown_name_queries(self, make_catalog) -> None:
        graph = DependencyGraph.build(make_catalog({"a": ("1.0.0", {})}))
        assert graph.get_dependencies("missing") == []
        assert graph.get_dependents("missing") == []
        assert graph.get_node("missing") is None

    def test_transitive_dependents(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "a": ("1.0.0", {}),
                "b": ("1.0.0", {"a": "1.0.0"}),
                "c": ("1.0.0", {"b": "1.0.0"}),
                "d": ("1.0.0", {"a": "1.0.0"}),
                "e": ("1.0.0", {"d": "1.0.0"}),
            }
        )
        graph = DependencyGraph.build(catalog)

        assert graph.get_transitive_dependents("a") == {"b", "c", "d", "e"}
        assert graph.get_transitive_dependents("d") == {"e"}
        assert graph.get_transitive_dependents("c") == set()


class TestCycles:
    """Tests for cycle detection."""

    def test_three_package_cycle(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "A": ("1.0.0", {"B": "1.0.0"}),
                "B": ("1.0.0", {"C": "1.0.0"}),
                "C": ("1.0.0", {"A": "1.0.0"}),
            }
        )

        with pytest.raises(CyclicDependencyError) as exc_info:
            DependencyGraph.build(catalog)

        assert exc_info.value.cycle == ["A", "B", "C", "A"]
        assert "A -> B -> C -> A" in exc_info.value.message

    def test_cycle_reported_from_first_repeated_ancestor(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "root": ("1.0.0", {"x": "1.0.0"}),
                "x": ("1.0.0", {"y": "1.0.0"}),
                "y": ("1.0.0", {"x": "1.0.0"}),
            }
        )

        with pytest.raises(CyclicDependencyError) as exc_info:
            DependencyGraph.build(catalog)

        assert exc_info.value.cycle == ["x", "y", "x"]

    def test_self_dependency(self, make_catalog) -> None:
        catalog = make_catalog({"a": ("1.0.0", {"a": "1.0.0"})})

        with pytest.raises(CyclicDependencyError) as exc_info:
            DependencyGraph.build(catalog)

        assert exc_info.value.cycle == ["a", "a"]

    def test_diamond_is_not_a_cycle(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "base": ("1.0.0", {}),
                "left": ("1.0.0", {"base": "1.0.0"}),
                "right": ("1.0.0", {"base": "1.0.0"}),
                "top": ("1.0.0", {"left": "1.0.0", "right": "1.0.0"}),
            }
        )

        graph = DependencyGraph.build(catalog)
        assert graph.get_dependents("base") == ["left", "right"]

    def test_find_cycle_on_nodes(self) -> None:
        nodes = {
            "a": GraphNode("a", dependencies=["b"]),
            "b": GraphNode("b", dependencies=["c"], used_by=["a"]),
            "c": GraphNode("c", used_by=["b"]),
        }
        assert find_cycle(nodes) is None

        nodes["c"].dependencies.append("a")
        assert find_cycle(nodes) == ["a", "b", "c", "a"]

    def test_long_chain_does_not_recurse(self, make_catalog) -> None:
        spec = {"p0": ("1.0.0", {})}
        for i in range(1, 3000):
            spec[f"p{i}"] = ("1.0.0", {f"p{i - 1}": "1.0.0"})

        graph = DependencyGraph.build(make_catalog(spec))
        assert len(graph) == 3000
