from __future__ import annotations

import logging
from dataclasses import replace
from typing import get_args

from .types import (
    Entity,
    LayoutError,
    LayoutOptions,
    LayoutResult,
    LayoutStrategy,
    Point,
    Relation,
)
from .analysis import count_connections, compute_hierarchy_levels
from .categorize import categorize_entities
from .overlap import resolve_overlaps
from .strategies import (
    categorized_grid_layout,
    circular_layout,
    force_directed_layout,
    hierarchical_layout,
    layered_layout,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Auto-layout engine
#
#   1. connectivity, inheritance levels and categories are computed
#   2. one strategy is picked (or the caller's explicit choice is used)
#   3. the strategy's positions are copied onto fresh entities
#   4. optionally, one overlap relaxation pass
# ============================================================================


def select_strategy(
    entity_count: int,
    relations: list[Relation],
    levels: dict[str, int],
    options: LayoutOptions | None = None,
) -> LayoutStrategy:
    """Pick circular, hierarchical or grid. Never picks the opt-in strategies."""
    if options is None:
        options = LayoutOptions()

    if entity_count <= options.circular_threshold:
        return "circular"
    has_inheritance = any(r.kind == "inheritance" for r in relations)
    max_level = max(levels.values(), default=0)
    if has_inheritance and max_level > 0:
        return "hierarchical"
    return "grid"


def compute_layout(
    entities: list[Entity],
    relations: list[Relation],
    options: LayoutOptions | None = None,
    strategy: LayoutStrategy | None = None,
) -> LayoutResult:
    """Run exactly one strategy and return its raw position map.

    ``strategy`` forces a specific strategy; this is the only way to reach
    "force" and "layered". If a forced strategy fails, the automatically
    selected one is used instead.
    """
    if options is None:
        options = LayoutOptions()
    if strategy is not None and strategy not in get_args(LayoutStrategy):
        raise ValueError(f"Unknown layout strategy: {strategy!r}")

    connections = count_connections(entities, relations)
    levels = compute_hierarchy_levels(entities, relations)
    categories = categorize_entities(entities)

    selected = select_strategy(len(entities), relations, levels, options)

    if strategy == "force":
        return LayoutResult("force", force_directed_layout(entities, relations, options))
    if strategy == "layered":
        try:
            return LayoutResult("layered", layered_layout(entities, relations, options))
        except LayoutError as err:
            logger.warning("%s; falling back to %s layout", err, selected)
    elif strategy is not None:
        selected = strategy

    logger.debug("laying out %d entities with %s strategy", len(entities), selected)

    if selected == "circular":
        positions = circular_layout(entities, connections, options)
    elif selected == "hierarchical":
        positions = hierarchical_layout(entities, levels, options)
    else:
        positions = categorized_grid_layout(entities, categories, options)
    return LayoutResult(selected, positions)


def apply_auto_layout(
    entities: list[Entity],
    relations: list[Relation],
    options: LayoutOptions | None = None,
    strategy: LayoutStrategy | None = None,
) -> list[Entity]:
    """Return copies of ``entities`` with layout positions applied.

    An entity the strategy did not place keeps its previous position, or
    gets ``options.fallback_position`` if it never had one. The input list
    and its entities are left untouched; an empty input is returned as is.
    """
    if not entities:
        return entities
    if options is None:
        options = LayoutOptions()

    result = compute_layout(entities, relations, options, strategy)

    placed: list[Entity] = []
    for entity in entities:
        pos = result.positions.get(entity.id) or entity.position or options.fallback_position
        placed.append(replace(entity, position=Point(pos.x, pos.y)))

    if options.resolve_overlaps:
        optimize_edge_crossings(placed, options)
    return placed


def optimize_edge_crossings(
    entities: list[Entity],
    options: LayoutOptions | None = None,
) -> list[Entity]:
    """Single overlap-relaxation pass over already positioned entities.

    Mutates positions in place and returns the same list, so it can be run
    on its own after the user drags boxes around.
    """
    if options is None:
        options = LayoutOptions()
    resolve_overlaps(
        entities,
        min_distance=options.min_distance,
        separate_coincident=options.separate_coincident,
    )
    return entities
