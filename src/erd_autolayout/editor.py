from __future__ import annotations

import copy
import logging
from typing import Any

from .types import Attribute, Entity, LayoutOptions, LayoutStrategy, Point, Relation, RelationKind
from .layout import apply_auto_layout, optimize_edge_crossings

logger = logging.getLogger(__name__)

# ============================================================================
# Editor interop
#
# The diagram editor keeps its graph as plain node / edge records:
#
#   node: {"id", "type", "position": {"x", "y"},
#          "data": {"label", "attrs": [{"name", "type"}, ...]}}
#   edge: {"source", "target", "data": {"relKind": "ASSOC" | "INHERIT" | ...}}
#
# Conversion is lenient: malformed records are skipped, never fatal.
# ============================================================================

# Editor relation codes -> relation kinds
REL_KIND_CODES: dict[str, RelationKind] = {
    "ASSOC": "association",
    "AGGR": "aggregation",
    "COMP": "composition",
    "INHERIT": "inheritance",
    "DEPEND": "dependency",
}

_DEFAULT_WIDTH = 220
_DEFAULT_HEIGHT = 150


def _parse_kind(code: Any) -> RelationKind:
    if not code:
        return "association"
    text = str(code)
    if text.upper() in REL_KIND_CODES:
        return REL_KIND_CODES[text.upper()]
    if text.lower() in REL_KIND_CODES.values():
        return text.lower()  # type: ignore[return-value]
    logger.debug("unknown relation kind %r, treating as association", code)
    return "association"


def _parse_point(raw: Any) -> Point | None:
    if not isinstance(raw, dict):
        return None
    try:
        return Point(x=float(raw["x"]), y=float(raw["y"]))
    except (KeyError, TypeError, ValueError):
        return None


def _parse_size(raw: Any, default: float) -> float:
    if not raw:
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def entity_from_node(node: dict[str, Any]) -> Entity | None:
    """Build an Entity from an editor node record, None if it has no id."""
    if not isinstance(node, dict):
        return None
    node_id = node.get("id")
    if node_id is None:
        return None
    data = node.get("data")
    if not isinstance(data, dict):
        data = {}

    attrs = data.get("attrs")
    attributes: list[Attribute] = []
    for attr in attrs if isinstance(attrs, list) else []:
        if isinstance(attr, dict) and attr.get("name"):
            attributes.append(Attribute(name=str(attr["name"]), type=attr.get("type")))

    return Entity(
        id=str(node_id),
        label=str(data.get("label") or node_id),
        attributes=attributes,
        position=_parse_point(node.get("position")),
        width=_parse_size(node.get("width"), _DEFAULT_WIDTH),
        height=_parse_size(node.get("height"), _DEFAULT_HEIGHT),
    )


def entities_from_nodes(nodes: list[dict[str, Any]]) -> list[Entity]:
    entities: list[Entity] = []
    for node in nodes:
        entity = entity_from_node(node)
        if entity is None:
            logger.warning("skipping node that is not a record with an id: %r", node)
            continue
        entities.append(entity)
    return entities


def relations_from_edges(edges: list[dict[str, Any]]) -> list[Relation]:
    relations: list[Relation] = []
    for edge in edges:
        if not isinstance(edge, dict):
            logger.warning("skipping edge that is not a record: %r", edge)
            continue
        source, target = edge.get("source"), edge.get("target")
        if source is None or target is None:
            logger.warning("skipping edge without endpoints: %r", edge)
            continue
        data = edge.get("data")
        if not isinstance(data, dict):
            data = {}
        relations.append(
            Relation(source=str(source), target=str(target), kind=_parse_kind(data.get("relKind")))
        )
    return relations


def apply_positions_to_nodes(
    nodes: list[dict[str, Any]], entities: list[Entity]
) -> list[dict[str, Any]]:
    """Copies of ``nodes`` with ``position`` taken from the matching entity."""
    by_id = {e.id: e for e in entities}
    updated: list[dict[str, Any]] = []
    for node in nodes:
        node_copy = copy.deepcopy(node)
        if not isinstance(node, dict):
            updated.append(node_copy)
            continue
        entity = by_id.get(str(node.get("id")))
        if entity is not None and entity.position is not None:
            node_copy["position"] = {"x": entity.position.x, "y": entity.position.y}
        updated.append(node_copy)
    return updated


def layout_editor_graph(
    nodes: list[dict[str, Any]],
    edges: list[dict[str, Any]],
    options: LayoutOptions | None = None,
    strategy: LayoutStrategy | None = None,
    overlap_pass: bool = True,
) -> list[dict[str, Any]]:
    """Auto layout followed by one overlap pass, on editor records."""
    if not nodes:
        return nodes
    entities = entities_from_nodes(nodes)
    relations = relations_from_edges(edges)
    placed = apply_auto_layout(entities, relations, options, strategy)
    # apply_auto_layout already ran the pass when the options ask for it
    if overlap_pass and not (options is not None and options.resolve_overlaps):
        optimize_edge_crossings(placed, options)
    return apply_positions_to_nodes(nodes, placed)
