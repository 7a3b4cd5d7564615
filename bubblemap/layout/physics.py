"""Continuous drift/collision simulation for the live wallet distribution."""

import logging
import math
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.entity import Side, Tier, WeightedEntity
from ..models.circle import LayoutResult, RenderCircle
from .tiers import RadiusScale, PHYSICS_SCALE
from ..config.settings import (
    FRAME_MS,
    MAX_FRAME_DELTA_MS,
    DRIFT_STRENGTH,
    VELOCITY_DAMPING,
    BOUNCE_RETENTION,
    COLLISION_VELOCITY_SHARE,
    COLLISION_PASSES,
    INITIAL_SPEED,
    EPSILON,
)

logger = logging.getLogger(__name__)


class Bucket(Enum):
    """Coarse size bucket for the quadrant grid."""

    WHALE = "whale"  # $10k+
    SUB_WHALE = "sub_whale"  # under $10k

    @classmethod
    def for_tier(cls, tier: Tier) -> "Bucket":
        return cls.WHALE if tier == Tier.WHALE else cls.SUB_WHALE


@dataclass(frozen=True)
class Quadrant:
    """Bounding box for one (side, bucket) cell of the 2x2 grid."""

    side: Side
    bucket: Bucket
    left: float
    top: float
    right: float
    bottom: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.left + self.right) / 2, (self.top + self.bottom) / 2

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


QuadrantKey = Tuple[Side, Bucket]


def quadrant_key(circle: RenderCircle) -> QuadrantKey:
    return circle.side, Bucket.for_tier(circle.tier)


def compute_quadrants(width: float, height: float) -> Dict[QuadrantKey, Quadrant]:
    """YES on the left, NO on the right; whales on top."""
    half_w = width / 2
    half_h = height / 2
    quadrants = {}
    for side, left in ((Side.YES, 0.0), (Side.NO, half_w)):
        for bucket, top in ((Bucket.WHALE, 0.0), (Bucket.SUB_WHALE, half_h)):
            quadrants[(side, bucket)] = Quadrant(
                side=side,
                bucket=bucket,
                left=left,
                top=top,
                right=left + half_w,
                bottom=top + half_h,
            )
    return quadrants


class PhysicsSimulation:
    """
    A living bubble field: each frame circles drift toward their quadrant's
    center, lose speed to damping, bounce off quadrant walls and push each
    other apart on contact.

    Circles are mutated in place across frames. `sync` merges each new data
    generation without resetting circles that are still present.
    """

    def __init__(
        self,
        width: float,
        height: float,
        scale: RadiusScale = PHYSICS_SCALE,
        rng: Optional[random.Random] = None,
    ):
        self.width = width
        self.height = height
        self.scale = scale
        self.rng = rng or random.Random()
        self.frame = 0
        self.generation = 0
        self._circles: Dict[str, RenderCircle] = {}

    def __len__(self) -> int:
        return len(self._circles)

    @property
    def measured(self) -> bool:
        return self.width > 0 and self.height > 0

    def resize(self, width: float, height: float) -> None:
        """Update the container size from the hosting UI."""
        self.width = width
        self.height = height

    def quadrants(self) -> Dict[QuadrantKey, Quadrant]:
        return compute_quadrants(self.width, self.height)

    # ==================== Data updates ====================

    def sync(self, entities: Iterable[WeightedEntity]) -> None:
        """
        Merge a new generation of entities.

        New ids enter at a random spot in their quadrant, existing ids keep
        position and velocity, ids missing from the generation are dropped.
        """
        unique = {e.id: e for e in entities}
        self.generation += 1

        if not unique:
            self._circles = {}
            return

        max_magnitude = max(e.magnitude for e in unique.values())
        quadrants = self.quadrants() if self.measured else {}

        merged: Dict[str, RenderCircle] = {}
        added = 0
        for entity_id, entity in unique.items():
            tier = entity.tier
            radius = self.scale.radius_for(entity.magnitude, tier, max_magnitude)
            circle = self._circles.get(entity_id)

            if circle is not None:
                circle.side = entity.side
                circle.tier = tier
                circle.magnitude = entity.magnitude
                circle.radius = radius
            else:
                circle = RenderCircle(
                    id=entity_id,
                    side=entity.side,
                    tier=tier,
                    magnitude=entity.magnitude,
                    radius=radius,
                    vx=(self.rng.random() - 0.5) * INITIAL_SPEED,
                    vy=(self.rng.random() - 0.5) * INITIAL_SPEED,
                )
                quadrant = quadrants.get(quadrant_key(circle))
                if quadrant is not None:
                    circle.x = self._random_coordinate(quadrant.left, quadrant.right, radius)
                    circle.y = self._random_coordinate(quadrant.top, quadrant.bottom, radius)
                added += 1
            merged[entity_id] = circle

        removed = len(set(self._circles) - set(merged))
        self._circles = merged
        logger.debug(
            f"Physics sync gen {self.generation}: {len(merged)} circles "
            f"(+{added}, -{removed})"
        )

    def _random_coordinate(self, lo: float, hi: float, radius: float) -> float:
        if hi - lo <= 2 * radius:
            return (lo + hi) / 2
        return self.rng.uniform(lo + radius, hi - radius)

    # ==================== Frame step ====================

    def step(self, elapsed_ms: float) -> None:
        """Advance the simulation by one frame of `elapsed_ms` real time."""
        if not self._circles or not self.measured:
            return

        elapsed = min(max(elapsed_ms, 0.0), MAX_FRAME_DELTA_MS)
        dt = elapsed / FRAME_MS  # in 60fps frames
        if dt <= 0:
            return

        quadrants = self.quadrants()
        damping = VELOCITY_DAMPING ** dt
        groups: Dict[QuadrantKey, List[RenderCircle]] = {}

        for circle in self._circles.values():
            key = quadrant_key(circle)
            quadrant = quadrants[key]
            cx, cy = quadrant.center

            # Drift toward the quadrant center
            circle.vx += (cx - circle.x) * DRIFT_STRENGTH * dt
            circle.vy += (cy - circle.y) * DRIFT_STRENGTH * dt

            circle.vx *= damping
            circle.vy *= damping

            circle.x += circle.vx * dt
            circle.y += circle.vy * dt

            self._bounce(circle, quadrant)
            groups.setdefault(key, []).append(circle)

        for key, circles in groups.items():
            for _ in range(COLLISION_PASSES):
                if not self._collide(circles):
                    break
            # Separation can push circles past a wall
            for circle in circles:
                self._contain(circle, quadrants[key])

        self.frame += 1

    @staticmethod
    def _bounce(circle: RenderCircle, quadrant: Quadrant) -> None:
        """Reflect off quadrant walls, keeping part of the energy."""
        r = circle.radius

        if quadrant.width <= 2 * r:
            circle.x = quadrant.center[0]
            circle.vx = 0.0
        elif circle.x - r < quadrant.left:
            circle.x = quadrant.left + r
            circle.vx = abs(circle.vx) * BOUNCE_RETENTION
        elif circle.x + r > quadrant.right:
            circle.x = quadrant.right - r
            circle.vx = -abs(circle.vx) * BOUNCE_RETENTION

        if quadrant.height <= 2 * r:
            circle.y = quadrant.center[1]
            circle.vy = 0.0
        elif circle.y - r < quadrant.top:
            circle.y = quadrant.top + r
            circle.vy = abs(circle.vy) * BOUNCE_RETENTION
        elif circle.y + r > quadrant.bottom:
            circle.y = quadrant.bottom - r
            circle.vy = -abs(circle.vy) * BOUNCE_RETENTION

    @staticmethod
    def _contain(circle: RenderCircle, quadrant: Quadrant) -> None:
        """Clamp the position into the quadrant without touching velocity."""
        r = circle.radius
        if quadrant.width <= 2 * r:
            circle.x = quadrant.center[0]
        else:
            circle.x = min(max(circle.x, quadrant.left + r), quadrant.right - r)
        if quadrant.height <= 2 * r:
            circle.y = quadrant.center[1]
        else:
            circle.y = min(max(circle.y, quadrant.top + r), quadrant.bottom - r)

    @staticmethod
    def _collide(circles: List[RenderCircle]) -> bool:
        """
        Separate overlapping pairs and trade a damped share of velocity.

        Returns True if any pair was touching.
        """
        touched = False
        for i, a in enumerate(circles):
            for b in circles[i + 1 :]:
                dx = b.x - a.x
                dy = b.y - a.y
                dist = math.hypot(dx, dy)
                min_dist = a.radius + b.radius

                if dist >= min_dist or dist < EPSILON:
                    continue

                touched = True
                nx = dx / dist
                ny = dy / dist
                half = (min_dist - dist) / 2

                a.x -= nx * half
                a.y -= ny * half
                b.x += nx * half
                b.y += ny * half

                # Only exchange velocity when approaching
                closing = (a.vx - b.vx) * nx + (a.vy - b.vy) * ny
                if closing > 0:
                    impulse = closing * COLLISION_VELOCITY_SHARE
                    a.vx -= impulse * nx
                    a.vy -= impulse * ny
                    b.vx += impulse * nx
                    b.vy += impulse * ny

        return touched

    # ==================== Accessors ====================

    def circles(self) -> List[RenderCircle]:
        return list(self._circles.values())

    def get(self, entity_id: str) -> Optional[RenderCircle]:
        return self._circles.get(entity_id)

    def result(self) -> LayoutResult:
        """Snapshot of the current frame for the renderer."""
        return LayoutResult(
            width=self.width,
            height=self.height,
            circles={cid: replace(c) for cid, c in self._circles.items()},
            generation=self.generation,
        )

    def max_overlap(self) -> float:
        return self.result().max_overlap()
