import math
import random
from statistics import mean

import pytest

from bubblemap.layout.zone_layout import ZoneLayout
from bubblemap.models.entity import Side, Tier

WIDTH, HEIGHT = 700, 600


def _distance_from_center(layout, circle):
    cx, cy = layout.side_center(circle.side, WIDTH, HEIGHT)
    return math.hypot(circle.x - cx, circle.y - cy)


def test_whale_placed_outside_small(rng, make_entity):
    layout = ZoneLayout(rng=rng)
    entities = [make_entity("a", "yes", 15000), make_entity("b", "yes", 500)]

    result = layout.layout(entities, WIDTH, HEIGHT)

    a, b = result.get("a"), result.get("b")
    assert a.tier == Tier.WHALE and 55 <= a.radius <= 90
    assert b.tier == Tier.SMALL and 16 <= b.radius <= 30
    assert _distance_from_center(layout, a) > _distance_from_center(layout, b)
    assert a.distance_to(b) >= a.radius + b.radius
    assert set(result.to_dict()["a"]) == {"x", "y", "radius"}


def test_empty_input_yields_empty_map(rng):
    result = ZoneLayout(rng=rng).layout([], WIDTH, HEIGHT)
    assert len(result) == 0
    assert result.to_dict() == {}


def test_unmeasured_container_skips(rng, make_entity):
    entities = [make_entity("a", "yes", 15000)]
    assert len(ZoneLayout(rng=rng).layout(entities, 0, 600)) == 0
    assert len(ZoneLayout(rng=rng).layout(entities, 700, 0)) == 0


def test_single_entity_sits_on_default_angle(rng, make_entity):
    layout = ZoneLayout(rng=rng)
    result = layout.layout([make_entity("w", "no", 500)], WIDTH, HEIGHT)

    circle = result.get("w")
    cx, cy = layout.side_center(Side.NO, WIDTH, HEIGHT)
    assert circle.y == pytest.approx(cy)
    assert circle.x > cx
    assert _distance_from_center(layout, circle) == pytest.approx(circle.target_radius)


def test_sides_stay_in_their_half(rng, mixed_entities):
    result = ZoneLayout(rng=rng).layout(mixed_entities, WIDTH, HEIGHT)

    assert len(result) == len(mixed_entities)
    for circle in result:
        assert circle.x - circle.radius >= -1e-6
        assert circle.x + circle.radius <= WIDTH + 1e-6
        assert circle.y - circle.radius >= -1e-6
        assert circle.y + circle.radius <= HEIGHT + 1e-6
        if circle.side == Side.YES:
            assert circle.x + circle.radius <= WIDTH / 2 + 1e-6
        else:
            assert circle.x - circle.radius >= WIDTH / 2 - 1e-6


def test_mostly_overlap_free(rng, mixed_entities):
    result = ZoneLayout(rng=rng).layout(mixed_entities, WIDTH, HEIGHT)

    circles = list(result)
    pairs = [(a, b) for i, a in enumerate(circles) for b in circles[i + 1 :]]
    clear = [a.distance_to(b) >= a.radius + b.radius - 1.0 for a, b in pairs]
    assert sum(clear) / len(pairs) >= 0.95


def test_zone_ordering_holds_on_average(make_entity):
    entities = []
    for i in range(4):
        entities.append(make_entity(f"w{i}", "yes", 12000 + i * 5000))
        entities.append(make_entity(f"s{i}", "yes", 150 + i * 200))

    for seed in range(5):
        layout = ZoneLayout(rng=random.Random(seed))
        result = layout.layout(entities, WIDTH, HEIGHT)
        whales = [_distance_from_center(layout, c) for c in result if c.tier == Tier.WHALE]
        smalls = [_distance_from_center(layout, c) for c in result if c.tier == Tier.SMALL]
        assert mean(whales) > mean(smalls)


def test_rerun_is_overlap_free_each_time(make_entity):
    entities = [
        make_entity("a", "yes", 15000),
        make_entity("b", "yes", 500),
        make_entity("c", "yes", 3000),
        make_entity("d", "no", 25000),
        make_entity("e", "no", 1200),
        make_entity("f", "no", 80),
    ]
    layout = ZoneLayout(rng=random.Random(7))
    for _ in range(3):
        result = layout.layout(entities, WIDTH, HEIGHT)
        assert result.max_overlap() < 0.5


def test_same_seed_same_positions(mixed_entities):
    first = ZoneLayout(rng=random.Random(3)).layout(mixed_entities, WIDTH, HEIGHT)
    second = ZoneLayout(rng=random.Random(3)).layout(mixed_entities, WIDTH, HEIGHT)
    assert first.to_dict() == second.to_dict()


def test_coincident_circles_are_separated(make_entity):
    # No candidate budget: every circle starts on the default angle
    layout = ZoneLayout(rng=random.Random(1), max_attempts=0)
    entities = [make_entity(f"s{i}", "yes", 400) for i in range(3)]

    result = layout.layout(entities, WIDTH, HEIGHT)

    for circle in result:
        assert not math.isnan(circle.x) and not math.isnan(circle.y)
    assert result.max_overlap() < 0.5


def test_dense_tier_degrades_without_error(rng, make_entity):
    entities = [make_entity(f"w{i}", "yes", 90000) for i in range(25)]
    result = ZoneLayout(rng=rng, max_iterations=10).layout(entities, 300, 300)
    assert len(result) == 25


def test_infinite_magnitude_does_not_poison_neighbours(make_entity):
    entities = [make_entity("a", "yes", float("inf")), make_entity("b", "yes", 500)]
    result = ZoneLayout(rng=random.Random(1)).layout(entities, WIDTH, HEIGHT)

    for circle in result:
        assert math.isfinite(circle.x) and math.isfinite(circle.y)
        assert math.isfinite(circle.radius)
