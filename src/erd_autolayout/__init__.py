"""erd-autolayout: automatic placement for entity-relationship diagrams."""

from __future__ import annotations

from .types import (
    Attribute,
    Category,
    CATEGORY_ORDER,
    Entity,
    LayoutError,
    LayoutOptions,
    LayoutResult,
    LayoutStrategy,
    Point,
    Relation,
    RelationKind,
)
from .analysis import count_connections, compute_hierarchy_levels
from .categorize import categorize_entities, categorize_entity
from .layout import (
    apply_auto_layout,
    compute_layout,
    optimize_edge_crossings,
    select_strategy,
)
from .overlap import resolve_overlaps
from .editor import layout_editor_graph

__all__ = [
    "apply_auto_layout",
    "optimize_edge_crossings",
    "compute_layout",
    "select_strategy",
    "count_connections",
    "compute_hierarchy_levels",
    "categorize_entities",
    "categorize_entity",
    "resolve_overlaps",
    "layout_editor_graph",
    "Attribute",
    "Category",
    "CATEGORY_ORDER",
    "Entity",
    "LayoutError",
    "LayoutOptions",
    "LayoutResult",
    "LayoutStrategy",
    "Point",
    "Relation",
    "RelationKind",
]
