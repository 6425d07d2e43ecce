"""Tests for the single-pass overlap relaxation."""
from __future__ import annotations

import math

import pytest

from erd_autolayout.overlap import resolve_overlaps
from erd_autolayout.types import Entity, Point


def placed(*coords: tuple[float, float] | None) -> list[Entity]:
    return [
        Entity(id=f"E{i}", label=f"E{i}", position=Point(*c) if c is not None else None)
        for i, c in enumerate(coords)
    ]


def distance(a: Entity, b: Entity) -> float:
    return math.hypot(a.position.x - b.position.x, a.position.y - b.position.y)


class TestResolveOverlaps:
    def test_well_separated_entities_are_unchanged(self):
        ents = placed((0, 0), (300, 0), (0, 300), (300, 300))
        before = [Point(e.position.x, e.position.y) for e in ents]
        moved = resolve_overlaps(ents)
        assert moved == 0
        assert [e.position for e in ents] == before

    def test_close_pair_is_pushed_apart_symmetrically(self):
        a, b = placed((0, 0), (50, 0))
        moved = resolve_overlaps([a, b])
        assert moved == 1
        assert a.position == Point(pytest.approx(-75), pytest.approx(0))
        assert b.position == Point(pytest.approx(125), pytest.approx(0))

    def test_distance_increases_along_a_diagonal(self):
        a, b = placed((100, 100), (130, 140))
        before = distance(a, b)
        resolve_overlaps([a, b])
        after = distance(a, b)
        assert after > before
        assert after == pytest.approx(200)
        # Still on the line through both initial centers
        assert (b.position.y - a.position.y) / (b.position.x - a.position.x) == pytest.approx(40 / 30)

    def test_exactly_at_threshold_is_left_alone(self):
        a, b = placed((0, 0), (200, 0))
        assert resolve_overlaps([a, b]) == 0
        assert a.position == Point(0, 0)

    def test_coincident_entities_are_untouched_by_default(self):
        a, b = placed((10, 10), (10, 10))
        assert resolve_overlaps([a, b]) == 0
        assert a.position == Point(10, 10)
        assert b.position == Point(10, 10)

    def test_coincident_entities_can_be_separated(self):
        a, b = placed((10, 10), (10, 10))
        assert resolve_overlaps([a, b], separate_coincident=True) == 1
        assert distance(a, b) == pytest.approx(200)

    def test_coincident_separation_is_deterministic(self):
        first = placed((0, 0), (0, 0), (0, 0))
        second = placed((0, 0), (0, 0), (0, 0))
        resolve_overlaps(first, separate_coincident=True)
        resolve_overlaps(second, separate_coincident=True)
        assert [e.position for e in first] == [e.position for e in second]

    def test_entities_without_position_are_skipped(self):
        a, b, c = placed((0, 0), None, (10, 0))
        assert resolve_overlaps([a, b, c]) == 1
        assert b.position is None

    def test_single_pass_may_leave_residual_overlap(self):
        ents = placed((0, 0), (10, 0), (20, 0))
        resolve_overlaps(ents)
        pairs = [(0, 1), (0, 2), (1, 2)]
        assert any(distance(ents[i], ents[j]) < 200 for i, j in pairs)

    def test_custom_threshold(self):
        a, b = placed((0, 0), (50, 0))
        resolve_overlaps([a, b], min_distance=60)
        assert distance(a, b) == pytest.approx(60)

    def test_empty_and_single(self):
        assert resolve_overlaps([]) == 0
        assert resolve_overlaps(placed((0, 0))) == 0
