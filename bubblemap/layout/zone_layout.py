"""Zone-based radial layout for per-market wallet maps."""

import logging
import math
import random
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.entity import Side, WeightedEntity
from ..models.circle import LayoutResult, RenderCircle
from .tiers import RadiusScale, ZONE_SCALE
from ..config.settings import (
    ZONE_BANDS,
    CANDIDATE_ATTEMPTS,
    RELAXATION_ITERATIONS,
    CIRCLE_PADDING,
    DIVIDER_GUTTER,
    TARGET_DEVIATION_WEIGHT,
    OVERLAP_TOLERANCE,
    REPULSION_STRENGTH,
    TARGET_PULL_STRENGTH,
    EPSILON,
)

logger = logging.getLogger(__name__)

# Semicircle facing away from the opposing side: (start, end, default angle)
SIDE_ARCS = {
    Side.YES: (math.pi / 2, 3 * math.pi / 2, math.pi),
    Side.NO: (-math.pi / 2, math.pi / 2, 0.0),
}

Bounds = Tuple[float, float, float, float]


class ZoneLayout:
    """
    Places wallet circles in tier zones of their side's half-plane.

    YES occupies the left half, NO the right. Each side's center sits on the
    middle divider and circles fan out on the semicircle facing away from the
    other side: small stakes near the center, whales on the outer ring.
    """

    def __init__(
        self,
        scale: RadiusScale = ZONE_SCALE,
        rng: Optional[random.Random] = None,
        max_attempts: int = CANDIDATE_ATTEMPTS,
        max_iterations: int = RELAXATION_ITERATIONS,
        padding: float = CIRCLE_PADDING,
        gutter: float = DIVIDER_GUTTER,
    ):
        self.scale = scale
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts
        self.max_iterations = max_iterations
        self.padding = padding
        self.gutter = gutter

    # ==================== Geometry ====================

    def side_center(self, side: Side, width: float, height: float) -> Tuple[float, float]:
        """Center of a side's radial zones."""
        if side == Side.YES:
            return width / 2 - self.gutter, height / 2
        return width / 2 + self.gutter, height / 2

    def side_bounds(self, side: Side, width: float, height: float) -> Bounds:
        """Half-plane rectangle (left, top, right, bottom) for a side."""
        if side == Side.YES:
            return 0.0, 0.0, width / 2, height
        return width / 2, 0.0, width, height

    def max_radius(self, width: float, height: float) -> float:
        return max(min(width / 2 - self.gutter, height / 2), 0.0)

    def target_radius(
        self, entity: WeightedEntity, max_magnitude: float, max_radius: float
    ) -> float:
        """Distance from the side center inside the entity's tier band."""
        tier = entity.tier
        inner, outer = ZONE_BANDS[tier.value]
        t = self.scale.normalized_magnitude(entity.magnitude, tier, max_magnitude)
        return (inner + t * (outer - inner)) * max_radius

    @staticmethod
    def _clamp(circle: RenderCircle, bounds: Bounds) -> None:
        left, top, right, bottom = bounds
        if right - left <= 2 * circle.radius:
            circle.x = (left + right) / 2
        else:
            circle.x = min(max(circle.x, left + circle.radius), right - circle.radius)
        if bottom - top <= 2 * circle.radius:
            circle.y = (top + bottom) / 2
        else:
            circle.y = min(max(circle.y, top + circle.radius), bottom - circle.radius)

    # ==================== Layout ====================

    def layout(
        self, entities: Iterable[WeightedEntity], width: float, height: float
    ) -> LayoutResult:
        """
        Compute positions for one generation of entities.

        Returns an empty result (no error) when the container has not been
        measured yet or there is nothing to place.
        """
        result = LayoutResult(width=width, height=height)

        if width <= 0 or height <= 0:
            logger.warning(f"Skipping layout: container not measured ({width}x{height})")
            return result

        unique: Dict[str, WeightedEntity] = {e.id: e for e in entities}
        if not unique:
            return result

        max_radius = self.max_radius(width, height)
        if max_radius <= 0:
            logger.warning(f"Skipping layout: container too small ({width}x{height})")
            return result

        max_magnitude = max(e.magnitude for e in unique.values())

        # Smallest first; targets come from the tier, not placement order
        ordered = sorted(unique.values(), key=lambda e: (e.magnitude, e.id))

        placed: Dict[Side, List[RenderCircle]] = {Side.YES: [], Side.NO: []}
        for entity in ordered:
            circle = RenderCircle(
                id=entity.id,
                side=entity.side,
                tier=entity.tier,
                magnitude=entity.magnitude,
                radius=self.scale.radius_for(entity.magnitude, entity.tier, max_magnitude),
            )
            circle.target_radius = self.target_radius(entity, max_magnitude, max_radius)
            self._place(circle, placed[entity.side], width, height, max_radius)
            placed[entity.side].append(circle)

        iterations, worst = self._relax(placed, width, height)
        logger.debug(
            f"Zone layout: {len(ordered)} circles, {iterations} relaxation rounds, "
            f"max overlap {worst:.2f}px"
        )
        if worst >= OVERLAP_TOLERANCE:
            logger.debug("Zone layout did not fully resolve overlap within budget")

        for circle in placed[Side.YES] + placed[Side.NO]:
            result.circles[circle.id] = circle
        return result

    def _place(
        self,
        circle: RenderCircle,
        placed: List[RenderCircle],
        width: float,
        height: float,
        max_radius: float,
    ) -> None:
        """Best-of-N candidate search against already placed circles."""
        cx, cy = self.side_center(circle.side, width, height)
        bounds = self.side_bounds(circle.side, width, height)
        start, end, default_angle = SIDE_ARCS[circle.side]

        if not placed:
            self._place_on_angle(circle, cx, cy, default_angle, bounds)
            return

        inner, outer = ZONE_BANDS[circle.tier.value]
        band_width = (outer - inner) * max_radius

        best: Optional[Tuple[float, float]] = None
        best_penalty = math.inf

        for attempt in range(self.max_attempts):
            # Widen the radial jitter as attempts run out
            jitter = band_width * (0.25 + attempt / self.max_attempts)
            angle = start + self.rng.random() * (end - start)
            r = max(0.0, circle.target_radius + self.rng.uniform(-1.0, 1.0) * jitter)

            circle.x = cx + r * math.cos(angle)
            circle.y = cy + r * math.sin(angle)
            self._clamp(circle, bounds)

            overlap = sum(circle.overlap_with(other, self.padding) for other in placed)
            deviation = abs(math.hypot(circle.x - cx, circle.y - cy) - circle.target_radius)
            penalty = overlap + TARGET_DEVIATION_WEIGHT * deviation

            if penalty < best_penalty:
                best_penalty = penalty
                best = (circle.x, circle.y)

            if overlap < OVERLAP_TOLERANCE:
                break

        if best is None:
            self._place_on_angle(circle, cx, cy, default_angle, bounds)
        else:
            circle.x, circle.y = best

    def _place_on_angle(
        self, circle: RenderCircle, cx: float, cy: float, angle: float, bounds: Bounds
    ) -> None:
        circle.x = cx + circle.target_radius * math.cos(angle)
        circle.y = cy + circle.target_radius * math.sin(angle)
        self._clamp(circle, bounds)

    def _relax(
        self, placed: Dict[Side, List[RenderCircle]], width: float, height: float
    ) -> Tuple[int, float]:
        """
        Pairwise repulsion plus a weak pull toward each target radius.

        Returns (iterations run, max overlap seen in the last round).
        """
        worst = 0.0
        iterations = 0

        for iterations in range(1, self.max_iterations + 1):
            worst = 0.0
            # Pull fades out so the final rounds are pure repulsion
            pull_strength = TARGET_PULL_STRENGTH * (1 - iterations / self.max_iterations)

            for side, circles in placed.items():
                cx, cy = self.side_center(side, width, height)
                bounds = self.side_bounds(side, width, height)

                for i, a in enumerate(circles):
                    for b in circles[i + 1 :]:
                        min_dist = a.radius + b.radius + self.padding
                        dx = b.x - a.x
                        dy = b.y - a.y
                        dist = math.hypot(dx, dy)
                        if dist >= min_dist:
                            continue

                        overlap = min_dist - dist
                        worst = max(worst, overlap)

                        if dist < EPSILON:
                            angle = self.rng.random() * 2 * math.pi
                            nx, ny = math.cos(angle), math.sin(angle)
                        else:
                            nx, ny = dx / dist, dy / dist

                        # Larger circles move less
                        push = overlap * REPULSION_STRENGTH
                        total = a.radius + b.radius
                        a.x -= nx * push * (b.radius / total)
                        a.y -= ny * push * (b.radius / total)
                        b.x += nx * push * (a.radius / total)
                        b.y += ny * push * (a.radius / total)

                for c in circles:
                    dx = c.x - cx
                    dy = c.y - cy
                    dist = math.hypot(dx, dy)
                    if dist > EPSILON:
                        pull = (c.target_radius - dist) * pull_strength
                        c.x += dx / dist * pull
                        c.y += dy / dist * pull
                    self._clamp(c, bounds)

            if worst < OVERLAP_TOLERANCE:
                break

        return iterations, worst
