from __future__ import annotations

import logging
import math

from .types import Entity

logger = logging.getLogger(__name__)

# ============================================================================
# Overlap relaxation
#
# One pass over every pair: entities closer than ``min_distance`` are pushed
# apart symmetrically along the line joining them, each by half the deficit.
# Later pairs see positions already moved by earlier pairs, and the pass is
# not repeated, so some overlap can remain.
# ============================================================================

# Spread of push directions for coincident pairs, in radians
_COINCIDENT_ANGLE_STEP = 2.399963229728653  # golden angle


def resolve_overlaps(
    entities: list[Entity],
    min_distance: float = 200,
    separate_coincident: bool = False,
) -> int:
    """Push apart entities closer than ``min_distance``, in place.

    Pairs sitting exactly on top of each other have no direction to push
    along and are left alone, unless ``separate_coincident`` is set: then
    they are pushed along a fixed angle derived from the pair index.

    Returns the number of pairs that were moved.
    """
    moved = 0
    pair_index = 0
    for i in range(len(entities)):
        first = entities[i]
        for j in range(i + 1, len(entities)):
            second = entities[j]
            pair_index += 1
            if first.position is None or second.position is None:
                continue

            dx = second.position.x - first.position.x
            dy = second.position.y - first.position.y
            dist = math.hypot(dx, dy)
            if dist >= min_distance:
                continue

            if dist > 0:
                angle = math.atan2(dy, dx)
            elif separate_coincident:
                angle = pair_index * _COINCIDENT_ANGLE_STEP
            else:
                continue

            push = (min_distance - dist) / 2
            ux, uy = math.cos(angle), math.sin(angle)
            first.position.x -= ux * push
            first.position.y -= uy * push
            second.position.x += ux * push
            second.position.y += uy * push
            moved += 1

    logger.debug("overlap pass moved %d of %d pairs", moved, pair_index)
    return moved
