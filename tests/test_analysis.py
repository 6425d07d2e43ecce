"""Tests for connectivity counting and inheritance depth."""
from __future__ import annotations

from erd_autolayout.analysis import (
    compute_hierarchy_levels,
    count_connections,
    inheritance_relations,
)
from erd_autolayout.types import Entity, Relation


def entities(*ids: str) -> list[Entity]:
    return [Entity(id=i, label=i) for i in ids]


# ============================================================================
# count_connections
# ============================================================================


class TestCountConnections:
    def test_counts_both_endpoints_of_every_relation(self):
        result = count_connections(
            entities("A", "B", "C"),
            [Relation("A", "B"), Relation("B", "C", "composition")],
        )
        assert result == {"A": 1, "B": 2, "C": 1}

    def test_self_relation_counts_twice(self):
        result = count_connections(entities("A"), [Relation("A", "A")])
        assert result == {"A": 2}

    def test_unconnected_entities_map_to_zero(self):
        result = count_connections(entities("A", "B"), [])
        assert result == {"A": 0, "B": 0}

    def test_relations_to_unknown_entities_are_ignored(self):
        result = count_connections(
            entities("A", "B"),
            [Relation("A", "Ghost"), Relation("Ghost", "B"), Relation("A", "B")],
        )
        assert result == {"A": 1, "B": 1}
        assert "Ghost" not in result

    def test_empty_graph(self):
        assert count_connections([], []) == {}


# ============================================================================
# compute_hierarchy_levels
# ============================================================================


class TestHierarchyLevels:
    def test_inheritance_chain_gets_increasing_levels(self):
        levels = compute_hierarchy_levels(
            entities("A", "B", "C"),
            [Relation("B", "A", "inheritance"), Relation("C", "B", "inheritance")],
        )
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_entities_without_inheritance_are_level_zero(self):
        levels = compute_hierarchy_levels(
            entities("A", "B", "C"),
            [Relation("A", "B"), Relation("B", "C", "dependency")],
        )
        assert levels == {"A": 0, "B": 0, "C": 0}

    def test_non_inheritance_relations_do_not_create_levels(self):
        levels = compute_hierarchy_levels(
            entities("A", "B", "C"),
            [Relation("B", "A", "inheritance"), Relation("C", "B", "aggregation")],
        )
        assert levels == {"A": 0, "B": 1, "C": 0}

    def test_multiple_parents_take_the_shallowest_level(self):
        levels = compute_hierarchy_levels(
            entities("A", "B", "C", "D"),
            [
                Relation("B", "A", "inheritance"),
                Relation("C", "B", "inheritance"),
                Relation("C", "D", "inheritance"),
            ],
        )
        assert levels["C"] == 1
        assert levels["D"] == 0

    def test_cycle_without_root_defaults_to_level_zero(self):
        levels = compute_hierarchy_levels(
            entities("X", "Y", "Z"),
            [Relation("X", "Y", "inheritance"), Relation("Y", "X", "inheritance")],
        )
        assert levels == {"X": 0, "Y": 0, "Z": 0}

    def test_cycle_below_a_root_terminates(self):
        levels = compute_hierarchy_levels(
            entities("R", "A", "B"),
            [
                Relation("A", "R", "inheritance"),
                Relation("B", "A", "inheritance"),
                Relation("A", "B", "inheritance"),
            ],
        )
        assert levels == {"R": 0, "A": 1, "B": 2}

    def test_self_inheritance_stays_at_level_zero(self):
        levels = compute_hierarchy_levels(entities("A"), [Relation("A", "A", "inheritance")])
        assert levels == {"A": 0}

    def test_unknown_parent_is_ignored(self):
        levels = compute_hierarchy_levels(
            entities("A"), [Relation("A", "Ghost", "inheritance")]
        )
        assert levels == {"A": 0}

    def test_order_follows_traversal(self):
        levels = compute_hierarchy_levels(
            entities("C", "B", "A", "D"),
            [Relation("B", "A", "inheritance"), Relation("C", "A", "inheritance")],
        )
        # Roots in entity order, then children in relation order
        assert list(levels) == ["A", "D", "B", "C"]

    def test_every_entity_has_a_level(self):
        ids = [f"E{i}" for i in range(10)]
        rels = [Relation(f"E{i}", f"E{i - 1}", "inheritance") for i in range(1, 5)]
        levels = compute_hierarchy_levels(entities(*ids), rels)
        assert set(levels) == set(ids)
        assert levels["E4"] == 4
        assert all(levels[f"E{i}"] == 0 for i in range(5, 10))


class TestInheritanceRelations:
    def test_keeps_only_known_inheritance_relations(self):
        rels = [
            Relation("B", "A", "inheritance"),
            Relation("A", "B"),
            Relation("B", "Ghost", "inheritance"),
        ]
        assert inheritance_relations(entities("A", "B"), rels) == [rels[0]]
