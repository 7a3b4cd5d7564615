"""Render circle and layout result dataclasses."""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .entity import Side, Tier


@dataclass
class RenderCircle:
    """A positioned circle owned by the layout engine for one pass/frame."""

    id: str
    side: Side
    tier: Tier
    magnitude: float
    radius: float
    x: float = 0.0
    y: float = 0.0

    # Velocity (physics variant only)
    vx: float = 0.0
    vy: float = 0.0

    # Zone layout bookkeeping: distance from the side center we aim for
    target_radius: float = 0.0

    def distance_to(self, other: "RenderCircle") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def overlap_with(self, other: "RenderCircle", padding: float = 0.0) -> float:
        """Penetration depth in px (0 when the circles do not touch)."""
        return max(0.0, self.radius + other.radius + padding - self.distance_to(other))

    def contains(self, x: float, y: float) -> bool:
        return math.hypot(self.x - x, self.y - y) <= self.radius

    def to_dict(self, include_velocity: bool = False) -> dict:
        """Convert to the {x, y, radius} shape consumed by the renderer."""
        data = {"x": self.x, "y": self.y, "radius": self.radius}
        if include_velocity:
            data["vx"] = self.vx
            data["vy"] = self.vy
        return data


@dataclass
class LayoutResult:
    """Mapping from entity id to its positioned circle."""

    width: float = 0.0
    height: float = 0.0
    circles: Dict[str, RenderCircle] = field(default_factory=dict)
    generation: int = 0

    def __len__(self) -> int:
        return len(self.circles)

    def __iter__(self) -> Iterator[RenderCircle]:
        return iter(self.circles.values())

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self.circles

    def get(self, entity_id: str) -> Optional[RenderCircle]:
        return self.circles.get(entity_id)

    def by_side(self, side: Side) -> List[RenderCircle]:
        return [c for c in self.circles.values() if c.side == side]

    def max_overlap(self, padding: float = 0.0) -> float:
        """Largest pairwise overlap in the result."""
        items = list(self.circles.values())
        worst = 0.0
        for i, a in enumerate(items):
            for b in items[i + 1 :]:
                worst = max(worst, a.overlap_with(b, padding))
        return worst

    def to_dict(self, include_velocity: bool = False) -> dict:
        """Convert to {id: {x, y, radius}} for serialization."""
        return {
            entity_id: circle.to_dict(include_velocity)
            for entity_id, circle in self.circles.items()
        }
