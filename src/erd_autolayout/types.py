from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ============================================================================
# Entity-relationship graph -- what the editor hands to the layout engine
# ============================================================================

RelationKind = Literal[
    "association",   # plain link between two entities
    "aggregation",   # whole/part, parts may outlive the whole
    "composition",   # whole/part, parts owned by the whole
    "inheritance",   # source is the subtype, target the supertype
    "dependency",    # source uses target
]

Category = Literal[
    "core",
    "users",
    "transactions",
    "catalog",
    "details",
    "auxiliary",
    "joins",
]

# Order in which the categorized grid stacks its bands
CATEGORY_ORDER: tuple[Category, ...] = (
    "users",
    "core",
    "catalog",
    "transactions",
    "details",
    "joins",
    "auxiliary",
)

LayoutStrategy = Literal[
    "circular",
    "hierarchical",
    "grid",
    # Opt-in only, never chosen automatically
    "force",
    "layered",
]


@dataclass(slots=True)
class Point:
    x: float
    y: float


@dataclass(slots=True)
class Attribute:
    """A single entity attribute (column / field)."""

    name: str
    # Type tag as typed in the editor (e.g., "Integer", "String")
    type: str | None = None


@dataclass(slots=True)
class Entity:
    """A box in the diagram. Only ``position`` is ever changed by layout."""

    id: str
    label: str
    attributes: list[Attribute] = field(default_factory=list)
    # Top-left corner on the canvas, None until placed
    position: Point | None = None
    width: float = 220
    height: float = 150


@dataclass(slots=True)
class Relation:
    source: str
    target: str
    kind: RelationKind = "association"


# ============================================================================
# Layout options -- every tunable constant of the engine in one place
# ============================================================================


@dataclass(slots=True)
class LayoutOptions:
    # Nominal box size used by the row-based strategies
    node_width: float = 220
    node_height: float = 150
    horizontal_gap: float = 180
    vertical_gap: float = 120
    # Vertical distance between inheritance levels
    layer_gap: float = 200
    # Left clamp and top start for row-based strategies
    margin: float = 100

    # Graphs with at most this many entities go on a circle
    circular_threshold: int = 7
    circle_center: Point = field(default_factory=lambda: Point(600, 400))
    circle_radius: float = 300

    # Nominal canvas widths rows are centered in
    hierarchy_canvas_width: float = 1200
    grid_canvas_width: float = 1400
    grid_min_columns: int = 2
    grid_max_columns: int = 4
    category_gap: float = 60

    # Overlap pass
    min_distance: float = 200
    resolve_overlaps: bool = False
    separate_coincident: bool = False

    # Force-directed simulation (opt-in)
    force_iterations: int = 50
    spring_constant: float = 200
    repulsion: float = 10000
    damping: float = 0.8
    force_bounds: tuple[float, float, float, float] = (50, 50, 1800, 1200)
    force_seed: int | None = None
    # Wall-clock cap in seconds, None for iteration budget only
    force_time_budget: float | None = None

    # Used when no strategy placed an entity and it had no prior position
    fallback_position: Point = field(default_factory=lambda: Point(100, 100))


@dataclass(slots=True)
class LayoutResult:
    strategy: LayoutStrategy
    positions: dict[str, Point] = field(default_factory=dict)


class LayoutError(RuntimeError):
    """Raised when a layout strategy backed by an external engine fails."""
