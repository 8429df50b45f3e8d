"""Tests for publish queue planning."""

from __future__ import annotations

import pytest

from monodeps.errors import PackageNotFoundError
from monodeps.planning import (
    EXPLICIT,
    DependencyUpdate,
    arrange_publish_queue,
    expand_affected,
)
from monodeps.versioning import BumpLevel, BumpType, ExplicitVersion, Version
from monodeps.workspace import DependencyGraph

MAJOR = BumpLevel(BumpType.MAJOR)
MINOR = BumpLevel(BumpType.MINOR)
PATCH = BumpLevel(BumpType.PATCH)


@pytest.fixture
def chain(make_catalog):
    """C depends on B, B depends on A."""
    return make_catalog(
        {
            "A": ("1.0.0", {}),
            "B": ("1.0.0", {"A": "^1.0.0"}),
            "C": ("1.0.0", {"B": "^1.0.0"}),
        }
    )


@pytest.fixture
def diamond(make_catalog):
    """left and right depend on base, top depends on both."""
    return make_catalog(
        {
            "base": ("1.0.0", {}),
            "left": ("1.0.0", {"base": "^1.0.0"}),
            "right": ("2.0.0", {"base": "~1.0.0"}),
            "top": ("0.1.0", {"left": "^1.0.0", "right": "^2.0.0"}),
        }
    )


def plan(catalog, entries):
    return arrange_publish_queue(entries, catalog, DependencyGraph.build(catalog))


class TestArrangePublishQueue:
    """Tests for arrange_publish_queue."""

    def test_major_propagates_down_chain(self, chain) -> None:
        records = plan(chain, {"A": MAJOR})

        assert [r.name for r in records] == ["A", "B", "C"]
        assert [str(r.new_version) for r in records] == ["2.0.0", "2.0.0", "2.0.0"]
        assert [r.weight for r in records] == [1, 2, 3]

    def test_dependency_updates(self, chain) -> None:
        records = {r.name: r for r in plan(chain, {"A": MAJOR})}

        assert records["A"].dependencies == ()
        assert records["B"].dependencies == (
            DependencyUpdate("A", Version(1, 0, 0, "^"), Version(2, 0, 0, "^")),
        )
        assert records["C"].dependencies == (
            DependencyUpdate("B", Version(1, 0, 0, "^"), Version(2, 0, 0, "^")),
        )

    def test_minor_entry_bumps_dependent_minor(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "pkg-a": ("1.0.0", {"lodash": "^4.17.21"}),
                "pkg-b": ("1.0.0", {"pkg-a": "^1.0.0"}),
            }
        )
        records = plan(catalog, {"pkg-a": MINOR})

        assert [(r.name, str(r.previous_version), str(r.new_version)) for r in records] == [
            ("pkg-a", "1.0.0", "1.1.0"),
            ("pkg-b", "1.0.0", "1.1.0"),
        ]
        update = records[1].dependencies[0]
        assert (str(update.previous), str(update.new)) == ("^1.0.0", "^1.1.0")

    def test_dependents_default_to_patch(self, chain) -> None:
        records = plan(chain, {"A": ExplicitVersion(Version(1, 0, 0))})

        assert [str(r.new_version) for r in records] == ["1.0.0", "1.0.1", "1.0.1"]

    def test_requirement_already_ahead_is_patch(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "lib": ("1.0.0", {}),
                "app": ("3.2.1", {"lib": ">=5.0.0"}),
            }
        )
        records = plan(catalog, {"lib": MAJOR})

        assert str(records[1].new_version) == "3.2.2"
        assert str(records[1].dependencies[0].new) == ">=2.0.0"

    def test_explicit_version(self, chain) -> None:
        records = plan(chain, {"A": ExplicitVersion(Version(3, 0, 0))})

        assert [str(r.new_version) for r in records] == ["3.0.0", "2.0.0", "2.0.0"]

    def test_most_severe_dependency_wins(self, diamond) -> None:
        records = {r.name: r for r in plan(diamond, {"base": MINOR, "right": MAJOR})}

        assert str(records["base"].new_version) == "1.1.0"
        assert str(records["left"].new_version) == "1.1.0"
        assert str(records["right"].new_version) == "3.0.0"
        assert str(records["top"].new_version) == "1.0.0"

    def test_diamond_order_and_provenance(self, diamond) -> None:
        records = plan(diamond, {"base": PATCH})

        assert [r.name for r in records] == ["base", "left", "right", "top"]
        assert [r.weight for r in records] == [1, 2, 2, 5]

        by_name = {r.name: r for r in records}
        assert by_name["base"].provenance == frozenset({EXPLICIT})
        assert by_name["base"].is_entry
        assert by_name["left"].provenance == frozenset({"base"})
        assert by_name["top"].provenance == frozenset({"left", "right"})
        assert not by_name["top"].is_entry

    def test_prefix_kept_per_requirement(self, diamond) -> None:
        records = {r.name: r for r in plan(diamond, {"base": PATCH})}

        assert str(records["left"].dependencies[0].new) == "^1.0.1"
        assert str(records["right"].dependencies[0].new) == "~1.0.1"

    def test_every_dependency_precedes_dependent(self, diamond) -> None:
        records = plan(diamond, {"base": MAJOR})
        position = {r.name: i for i, r in enumerate(records)}

        for record in records:
            for update in record.dependencies:
                assert position[update.name] < position[record.name]

    def test_entry_also_dependent(self, chain) -> None:
        records = {r.name: r for r in plan(chain, {"A": MINOR, "B": MAJOR})}

        assert records["B"].provenance == frozenset({EXPLICIT, "A"})
        assert str(records["B"].new_version) == "2.0.0"
        assert str(records["B"].dependencies[0].new) == "^1.1.0"
        assert str(records["C"].new_version) == "2.0.0"

    def test_isolated_entry(self, make_catalog) -> None:
        catalog = make_catalog(
            {
                "solo": ("0.3.0", {"react": "^18.2.0"}),
                "a": ("1.0.0", {}),
                "b": ("1.0.0", {"a": "1.0.0"}),
            }
        )
        records = plan(catalog, {"solo": MINOR})

        assert len(records) == 1
        assert str(records[0].new_version) == "0.4.0"
        assert records[0].dependencies == ()

    def test_unknown_entry(self, chain) -> None:
        with pytest.raises(PackageNotFoundError) as exc_info:
            plan(chain, {"Z": PATCH})
        assert "Package Z not exists" in exc_info.value.message

    def test_does_not_modify_packages(self, chain) -> None:
        plan(chain, {"A": MAJOR})

        assert chain["A"].version == Version(1, 0, 0)
        assert chain["B"].dependencies["A"] == Version(1, 0, 0, "^")

    def test_empty_entries(self, chain) -> None:
        assert plan(chain, {}) == []


class TestExpandAffected:
    """Tests for expand_affected."""

    def test_idempotent(self, diamond) -> None:
        graph = DependencyGraph.build(diamond)

        once = expand_affected(["base"], diamond, graph)
        twice = expand_affected(["base", "base"], diamond, graph)

        assert set(once) == set(twice) == {"base", "left", "right", "top"}
        assert twice["top"] == once["top"]

    def test_leaf_entry(self, chain) -> None:
        graph = DependencyGraph.build(chain)
        assert expand_affected(["C"], chain, graph) == {"C": {EXPLICIT}}
