"""Pointer hit-testing and proximity links over laid-out circles."""

import math
from typing import Iterable, List, Mapping, Optional, Tuple

from ..models.circle import LayoutResult, RenderCircle
from .physics import quadrant_key
from ..config.settings import PROXIMITY_LINK_DISTANCE


def hit_test(result: LayoutResult, x: float, y: float) -> Optional[str]:
    """
    Id of the circle under the pointer, or None.

    When circles touch at the pointer, the one whose center is relatively
    closest (distance / radius) wins.
    """
    best_id = None
    best_score = math.inf
    for circle in result:
        if circle.radius <= 0:
            continue
        score = math.hypot(circle.x - x, circle.y - y) / circle.radius
        if score <= 1.0 and score < best_score:
            best_score = score
            best_id = circle.id
    return best_id


def select_from_points(result: LayoutResult, points: Iterable[Mapping]) -> Optional[str]:
    """
    Resolve chart click points to a circle id.

    A point carrying the id in `customdata` wins; otherwise its x/y is
    hit-tested against the current frame.
    """
    for point in points:
        custom = point.get("customdata")
        if isinstance(custom, (list, tuple)):
            custom = custom[0] if custom else None
        if custom is not None and result.get(str(custom)) is not None:
            return str(custom)

        x, y = point.get("x"), point.get("y")
        if x is None or y is None:
            continue
        hit = hit_test(result, x, y)
        if hit is not None:
            return hit
    return None


def proximity_links(
    circles: Iterable[RenderCircle], max_distance: float = PROXIMITY_LINK_DISTANCE
) -> List[Tuple[str, str]]:
    """Pairs of circles in the same quadrant whose centers are close."""
    items = list(circles)
    links = []
    for i, a in enumerate(items):
        for b in items[i + 1 :]:
            if quadrant_key(a) != quadrant_key(b):
                continue
            if a.distance_to(b) < max_distance:
                links.append((a.id, b.id))
    return links
