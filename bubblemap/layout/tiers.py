"""Tier classification and magnitude-to-radius mapping."""

import math
from typing import Dict, Optional, Tuple

from ..models.entity import Tier
from ..config.settings import (
    WHALE_THRESHOLD,
    LARGE_THRESHOLD,
    WHALE_REFERENCE_MAGNITUDE,
    ZONE_RADIUS_RANGES,
    PHYSICS_RADIUS_RANGES,
)


def classify_tier(magnitude: float) -> Tier:
    """Classify a stake: >= 10k whale, >= 1k large, else small."""
    return Tier.from_magnitude(magnitude)


def _clean(magnitude: Optional[float]) -> float:
    if magnitude is None or not math.isfinite(magnitude) or magnitude < 0:
        return 0.0
    return float(magnitude)


class RadiusScale:
    """
    Maps magnitudes to pixel radii within tier-specific clamped ranges.

    Magnitudes are normalized within their tier's sub-range on a sqrt scale
    (circle area tracks stake). The whale sub-range is open-ended, so its
    ceiling is the larger of `whale_reference` and the observed set maximum.
    """

    def __init__(
        self,
        ranges: Dict[str, Tuple[float, float]],
        whale_reference: float = WHALE_REFERENCE_MAGNITUDE,
    ):
        self.ranges = {Tier(name): bounds for name, bounds in ranges.items()}
        self.whale_reference = whale_reference

    def tier_bounds(self, tier: Tier, max_magnitude_in_set: float = 0.0) -> Tuple[float, float]:
        """Magnitude sub-range [lo, hi] covered by a tier."""
        if tier == Tier.WHALE:
            ceiling = max(self.whale_reference, _clean(max_magnitude_in_set))
            return float(WHALE_THRESHOLD), float(ceiling)
        if tier == Tier.LARGE:
            return float(LARGE_THRESHOLD), float(WHALE_THRESHOLD)
        return 0.0, float(LARGE_THRESHOLD)

    def normalized_magnitude(
        self, magnitude: float, tier: Tier, max_magnitude_in_set: float = 0.0
    ) -> float:
        """Position of the magnitude within its tier's sub-range, in [0, 1]."""
        lo, hi = self.tier_bounds(tier, max_magnitude_in_set)
        span = math.sqrt(hi) - math.sqrt(lo)
        if span <= 0:
            return 1.0
        t = (math.sqrt(_clean(magnitude)) - math.sqrt(lo)) / span
        return min(max(t, 0.0), 1.0)

    def radius_for(
        self, magnitude: float, tier: Optional[Tier] = None, max_magnitude_in_set: float = 0.0
    ) -> float:
        """Radius in px, clamped to the tier's range."""
        if tier is None:
            tier = classify_tier(magnitude)
        min_r, max_r = self.ranges[tier]
        t = self.normalized_magnitude(magnitude, tier, max_magnitude_in_set)
        return min_r + t * (max_r - min_r)


ZONE_SCALE = RadiusScale(ZONE_RADIUS_RANGES)
PHYSICS_SCALE = RadiusScale(PHYSICS_RADIUS_RANGES)
