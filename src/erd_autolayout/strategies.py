from __future__ import annotations

import logging
import math
import random
import time

from grandalf.graphs import Vertex, Edge, Graph
from grandalf.layouts import SugiyamaLayout

from .types import (
    CATEGORY_ORDER,
    Category,
    Entity,
    LayoutError,
    LayoutOptions,
    Point,
    Relation,
)
from .categorize import group_by_category

logger = logging.getLogger(__name__)

# ============================================================================
# Placement strategies
#
# Every strategy takes the entities plus whatever auxiliary map it needs and
# returns a fresh {entity id: top-left Point} dict. None of them touch the
# entities themselves.
#
#   circular      -- small graphs, most connected first around a circle
#   hierarchical  -- one horizontal band per inheritance level
#   grid          -- category bands, rows of 2..4 boxes
#   force         -- spring/repulsion simulation (opt-in, randomized)
#   layered       -- grandalf Sugiyama per component (opt-in)
# ============================================================================


def circular_layout(
    entities: list[Entity],
    connections: dict[str, int],
    options: LayoutOptions,
) -> dict[str, Point]:
    """Place entities evenly on a circle, starting at the top, clockwise.

    Most-connected entities come first; ties keep input order.
    """
    positions: dict[str, Point] = {}
    n = len(entities)
    if n == 0:
        return positions

    ordered = sorted(entities, key=lambda e: -connections.get(e.id, 0))
    cx, cy = options.circle_center.x, options.circle_center.y
    r = options.circle_radius

    for index, entity in enumerate(ordered):
        angle = (index / n) * 2 * math.pi - math.pi / 2
        positions[entity.id] = Point(
            x=cx + r * math.cos(angle),
            y=cy + r * math.sin(angle),
        )
    return positions


def _centered_row_start(count: int, canvas_width: float, options: LayoutOptions) -> float:
    """Left x of a row of ``count`` boxes centered in ``canvas_width``."""
    row_width = count * (options.node_width + options.horizontal_gap)
    return max(options.margin, (canvas_width - row_width) / 2)


def hierarchical_layout(
    entities: list[Entity],
    levels: dict[str, int],
    options: LayoutOptions,
) -> dict[str, Point]:
    """One horizontal band per inheritance level, each row centered.

    Within a level entities keep the order of ``levels`` (traversal order),
    not input order: entities the traversal never reaches, such as members
    of a rootless inheritance cycle, come after every reached level-0 entity.
    """
    positions: dict[str, Point] = {}
    known = {e.id for e in entities}

    by_level: dict[int, list[str]] = {}
    for entity_id, level in levels.items():
        if entity_id in known:
            by_level.setdefault(level, []).append(entity_id)
    # Entities missing from the level map sit with the roots
    for e in entities:
        if e.id not in levels:
            by_level.setdefault(0, []).append(e.id)

    pitch = options.node_width + options.horizontal_gap
    for level in sorted(by_level):
        ids = by_level[level]
        y = options.margin + level * options.layer_gap
        start_x = _centered_row_start(len(ids), options.hierarchy_canvas_width, options)
        for index, entity_id in enumerate(ids):
            positions[entity_id] = Point(x=start_x + index * pitch, y=y)
    return positions


def categorized_grid_layout(
    entities: list[Entity],
    categories: dict[str, Category],
    options: LayoutOptions,
) -> dict[str, Point]:
    """Stack category bands top to bottom, each band a centered grid."""
    positions: dict[str, Point] = {}
    groups = group_by_category(entities, categories)
    pitch = options.node_width + options.horizontal_gap
    row_step = options.node_height + options.vertical_gap
    current_y = options.margin

    for name in CATEGORY_ORDER:
        members = groups[name]
        if not members:
            continue

        per_row = min(
            options.grid_max_columns,
            max(options.grid_min_columns, math.ceil(math.sqrt(len(members)))),
        )
        for row_start in range(0, len(members), per_row):
            row = members[row_start:row_start + per_row]
            start_x = _centered_row_start(len(row), options.grid_canvas_width, options)
            for col, entity in enumerate(row):
                positions[entity.id] = Point(x=start_x + col * pitch, y=current_y)
            current_y += row_step

        current_y += options.category_gap

    return positions


# ============================================================================
# Force-directed simulation (opt-in)
#
# Attraction is d^2 / k rather than a linear spring, so far-apart neighbours
# are pulled hard. The run ends when the iteration budget (or the optional
# wall-clock budget) is spent, not when the system settles.
# ============================================================================


def force_directed_layout(
    entities: list[Entity],
    relations: list[Relation],
    options: LayoutOptions,
) -> dict[str, Point]:
    rng = random.Random(options.force_seed)
    positions: dict[str, Point] = {}
    for i, entity in enumerate(entities):
        positions[entity.id] = Point(
            x=200 + (i % 4) * 300 + rng.random() * 50,
            y=200 + (i // 4) * 250 + rng.random() * 50,
        )

    min_x, min_y, max_x, max_y = options.force_bounds
    deadline = (
        time.monotonic() + options.force_time_budget
        if options.force_time_budget is not None
        else None
    )

    iterations_run = 0
    for _ in range(options.force_iterations):
        if deadline is not None and time.monotonic() >= deadline:
            logger.debug("force layout stopped by time budget after %d iterations", iterations_run)
            break

        forces: dict[str, list[float]] = {e.id: [0.0, 0.0] for e in entities}

        # Repulsion between every pair
        for i in range(len(entities)):
            for j in range(i + 1, len(entities)):
                a = entities[i].id
                b = entities[j].id
                pa, pb = positions[a], positions[b]
                dx = pb.x - pa.x
                dy = pb.y - pa.y
                dist = math.hypot(dx, dy) or 1
                force = options.repulsion / (dist * dist)
                fx = dx / dist * force
                fy = dy / dist * force
                forces[a][0] -= fx
                forces[a][1] -= fy
                forces[b][0] += fx
                forces[b][1] += fy

        # Attraction along relations, half to each endpoint
        for rel in relations:
            pa = positions.get(rel.source)
            pb = positions.get(rel.target)
            if pa is None or pb is None:
                continue
            dx = pb.x - pa.x
            dy = pb.y - pa.y
            dist = math.hypot(dx, dy) or 1
            force = dist * dist / options.spring_constant
            fx = dx / dist * force
            fy = dy / dist * force
            forces[rel.source][0] += fx * 0.5
            forces[rel.source][1] += fy * 0.5
            forces[rel.target][0] -= fx * 0.5
            forces[rel.target][1] -= fy * 0.5

        for entity_id, (fx, fy) in forces.items():
            pos = positions[entity_id]
            pos.x = max(min_x, min(max_x, pos.x + fx * options.damping))
            pos.y = max(min_y, min(max_y, pos.y + fy * options.damping))

        iterations_run += 1

    return positions


# ============================================================================
# Layered layout via grandalf (opt-in)
#
# Sugiyama layering on each connected component. Inheritance edges point
# parent -> child so supertypes end up in the upper layers. Components are
# laid side by side from the left margin.
# ============================================================================


class _VertexView:
    """Minimal view object required by grandalf's SugiyamaLayout."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        # xy is set by the layout engine (center coordinates)
        self.xy = (0.0, 0.0)


def layered_layout(
    entities: list[Entity],
    relations: list[Relation],
    options: LayoutOptions,
) -> dict[str, Point]:
    positions: dict[str, Point] = {}
    if not entities:
        return positions

    vertices: dict[str, Vertex] = {}
    for entity in entities:
        v = Vertex(entity.id)
        v.view = _VertexView(entity.width, entity.height)
        vertices[entity.id] = v

    edges: list[Edge] = []
    seen_pairs: set[frozenset[str]] = set()
    for rel in relations:
        if rel.kind == "inheritance":
            upper, lower = rel.target, rel.source
        else:
            upper, lower = rel.source, rel.target
        if upper == lower or upper not in vertices or lower not in vertices:
            continue
        pair = frozenset((upper, lower))
        if pair in seen_pairs:
            continue
        seen_pairs.add(pair)
        edges.append(Edge(vertices[upper], vertices[lower]))

    graph = Graph(list(vertices.values()), edges)

    cursor_x = options.margin
    for component in graph.C:
        try:
            sug = SugiyamaLayout(component)
            sug.xspace = options.horizontal_gap
            sug.yspace = options.vertical_gap
            sug.init_all()
            sug.draw()
        except Exception as err:
            raise LayoutError(f"Grandalf layout failed (layered): {err}") from err

        members = list(component.sV)
        lefts = [v.view.xy[0] - v.view.w / 2 for v in members]
        tops = [v.view.xy[1] - v.view.h / 2 for v in members]
        rights = [v.view.xy[0] + v.view.w / 2 for v in members]
        dx = cursor_x - min(lefts)
        dy = options.margin - min(tops)

        for v, left, top in zip(members, lefts, tops):
            positions[v.data] = Point(x=left + dx, y=top + dy)

        cursor_x += max(rights) - min(lefts) + options.horizontal_gap

    return positions
