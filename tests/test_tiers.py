import math

import pytest

from bubblemap.layout.tiers import ZONE_SCALE, PHYSICS_SCALE, classify_tier
from bubblemap.models.entity import Tier


@pytest.mark.parametrize(
    "magnitude, tier",
    [
        (0, Tier.SMALL),
        (999.99, Tier.SMALL),
        (1000, Tier.LARGE),
        (9999, Tier.LARGE),
        (10000, Tier.WHALE),
        (2_500_000, Tier.WHALE),
        (-50, Tier.SMALL),
        (float("nan"), Tier.SMALL),
    ],
)
def test_classify_tier_thresholds(magnitude, tier):
    assert classify_tier(magnitude) == tier


def test_zone_radius_ranges_per_tier():
    assert ZONE_SCALE.radius_for(0) == pytest.approx(16)
    assert 16 <= ZONE_SCALE.radius_for(500) <= 30
    assert 30 <= ZONE_SCALE.radius_for(1000) <= 55
    assert 55 <= ZONE_SCALE.radius_for(15000) <= 90
    assert ZONE_SCALE.radius_for(10_000_000) == pytest.approx(90)


@pytest.mark.parametrize("scale", [ZONE_SCALE, PHYSICS_SCALE])
def test_radius_monotonic_within_tier(scale):
    for lo, hi in ((0, 1000), (1000, 10000), (10000, 200000)):
        magnitudes = [lo + (hi - lo) * i / 50 for i in range(50)]
        radii = [scale.radius_for(m, classify_tier(m), max_magnitude_in_set=hi) for m in magnitudes]
        assert radii == sorted(radii)


def test_whale_ceiling_follows_observed_max():
    # With a larger set max the same whale shrinks, but stays in range
    small_set = ZONE_SCALE.radius_for(100000, Tier.WHALE, max_magnitude_in_set=100000)
    large_set = ZONE_SCALE.radius_for(100000, Tier.WHALE, max_magnitude_in_set=1_000_000)
    assert small_set == pytest.approx(90)
    assert 55 <= large_set < small_set


def test_degenerate_magnitudes_do_not_produce_nan():
    for magnitude in (0, -10, float("nan")):
        radius = ZONE_SCALE.radius_for(magnitude)
        assert not math.isnan(radius)
        assert radius == pytest.approx(16)


def test_infinite_magnitudes_are_treated_as_invalid():
    assert ZONE_SCALE.radius_for(float("inf"), Tier.WHALE) == pytest.approx(55)
    radius = ZONE_SCALE.radius_for(500, Tier.SMALL, max_magnitude_in_set=float("inf"))
    assert 16 <= radius <= 30
    whale = ZONE_SCALE.radius_for(20000, Tier.WHALE, max_magnitude_in_set=float("inf"))
    assert math.isfinite(whale) and 55 <= whale <= 90
