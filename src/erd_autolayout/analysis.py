from __future__ import annotations

from collections import deque

from .types import Entity, Relation

# ============================================================================
# Graph analysis -- connectivity and inheritance depth
#
# Both passes are pure functions over (entities, relations). Relations that
# reference an id not present in the entity list are dropped: the editor can
# briefly hold dangling edges while an entity is being deleted.
# ============================================================================


def _known_relations(
    entities: list[Entity], relations: list[Relation]
) -> list[Relation]:
    ids = {e.id for e in entities}
    return [r for r in relations if r.source in ids and r.target in ids]


def count_connections(
    entities: list[Entity], relations: list[Relation]
) -> dict[str, int]:
    """Number of relations touching each entity (a self relation counts twice)."""
    counts: dict[str, int] = {e.id: 0 for e in entities}
    for rel in _known_relations(entities, relations):
        counts[rel.source] += 1
        counts[rel.target] += 1
    return counts


def inheritance_relations(
    entities: list[Entity], relations: list[Relation]
) -> list[Relation]:
    """The inheritance subset of ``relations`` whose endpoints both exist."""
    return [r for r in _known_relations(entities, relations) if r.kind == "inheritance"]


def compute_hierarchy_levels(
    entities: list[Entity], relations: list[Relation]
) -> dict[str, int]:
    """Inheritance depth of every entity, 0 for roots and unrelated entities.

    Breadth-first from every entity that is never the child side of an
    inheritance relation. The visited set stops cycles; entities only
    reachable through a cycle keep level 0.

    The returned dict is ordered by traversal: roots in entity order, then
    children in relation order, then whatever the traversal never reached.
    """
    inherits = inheritance_relations(entities, relations)

    children: dict[str, list[str]] = {}
    child_ids: set[str] = set()
    for rel in inherits:
        children.setdefault(rel.target, []).append(rel.source)
        child_ids.add(rel.source)

    levels: dict[str, int] = {}
    queue: deque[tuple[str, int]] = deque(
        (e.id, 0) for e in entities if e.id not in child_ids
    )
    visited: set[str] = set()

    while queue:
        entity_id, level = queue.popleft()
        if entity_id in visited:
            continue
        visited.add(entity_id)
        levels[entity_id] = level

        for child_id in children.get(entity_id, []):
            if child_id not in visited:
                queue.append((child_id, level + 1))

    for e in entities:
        if e.id not in levels:
            levels[e.id] = 0

    return levels
