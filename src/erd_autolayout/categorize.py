from __future__ import annotations

import re
import unicodedata

from .types import CATEGORY_ORDER, Category, Entity

# ============================================================================
# Semantic categorizer
#
# Buckets entities by name so the grid layout can keep related concepts in
# the same band. Rules are tried in order and the first match wins; anything
# unmatched is "core". "auxiliary" has no rule and stays empty.
#
# Names are matched after lower-casing and stripping accents, so "Categoría"
# and "categoria" land in the same bucket.
# ============================================================================

# Suffixes that mark an attribute as a reference to another entity
_REFERENCE_SUFFIXES = ("_id", "Id")

# A join entity carries little besides its foreign keys
_JOIN_MAX_ATTRIBUTES = 3
_JOIN_MIN_REFERENCES = 2

CATEGORY_RULES: tuple[tuple[Category, re.Pattern[str]], ...] = (
    ("users", re.compile(r"usuario|user|perfil|profile|rol|role|auth")),
    (
        "transactions",
        re.compile(r"venta|pedido|orden|order|pago|payment|factura|invoice|transac"),
    ),
    # "itempedido" is an order line, not a catalog item
    ("catalog", re.compile(r"producto|product|categoria|category|articulo|item(?!pedido)")),
    ("details", re.compile(r"detalle|detail|linea|line|item")),
)


def normalize_name(text: str) -> str:
    """Lower-case ``text`` and drop diacritics."""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def is_join_entity(entity: Entity) -> bool:
    """True for many-to-many association tables (mostly foreign keys)."""
    if len(entity.attributes) > _JOIN_MAX_ATTRIBUTES:
        return False
    references = [a for a in entity.attributes if a.name.endswith(_REFERENCE_SUFFIXES)]
    return len(references) >= _JOIN_MIN_REFERENCES


def categorize_entity(entity: Entity) -> Category:
    if is_join_entity(entity):
        return "joins"
    name = normalize_name(entity.label)
    for category, pattern in CATEGORY_RULES:
        if pattern.search(name):
            return category
    return "core"


def categorize_entities(entities: list[Entity]) -> dict[str, Category]:
    """Map every entity id to exactly one category."""
    return {e.id: categorize_entity(e) for e in entities}


def group_by_category(
    entities: list[Entity], categories: dict[str, Category]
) -> dict[Category, list[Entity]]:
    """Entities per bucket, input order kept; every bucket is present."""
    groups: dict[Category, list[Entity]] = {name: [] for name in CATEGORY_ORDER}
    for e in entities:
        groups[categories.get(e.id, "core")].append(e)
    return groups
