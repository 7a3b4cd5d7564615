import random

import pytest

from bubblemap.models.entity import Side, WeightedEntity


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def make_entity():
    def _make(entity_id, side, magnitude, **kwargs):
        return WeightedEntity(id=entity_id, side=Side.parse(side), magnitude=magnitude, **kwargs)

    return _make


@pytest.fixture
def mixed_entities(make_entity):
    """Six wallets per side across all tiers."""
    magnitudes = [200, 800, 2500, 7000, 15000, 40000]
    entities = []
    for side in ("yes", "no"):
        for i, magnitude in enumerate(magnitudes):
            entities.append(make_entity(f"{side}-{i}", side, magnitude))
    return entities
