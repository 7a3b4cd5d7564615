import asyncio
import random

from bubblemap.layout.session import LayoutSession
from bubblemap.layout.zone_layout import ZoneLayout


def _session():
    return LayoutSession(ZoneLayout(rng=random.Random(0)))


def test_refresh_replaces_previous_generation(make_entity):
    session = _session()
    assert len(session.current) == 0

    first = session.refresh([make_entity("a", "yes", 500), make_entity("b", "no", 800)], 700, 600)
    second = session.refresh([make_entity("a", "yes", 500)], 700, 600)

    assert first.generation == 1
    assert second.generation == 2
    assert session.current is second
    assert set(session.current.to_dict()) == {"a"}


def test_refresh_handles_empty_set(make_entity):
    session = _session()
    session.refresh([make_entity("a", "yes", 500)], 700, 600)
    assert session.refresh([], 700, 600).to_dict() == {}


def test_stale_async_refresh_is_discarded(make_entity):
    session = _session()
    old = [make_entity("old", "yes", 500)]
    new = [make_entity("new", "no", 20000)]

    async def main():
        return await asyncio.gather(
            session.refresh_async(old, 700, 600),
            session.refresh_async(new, 700, 600),
        )

    stale, fresh = asyncio.run(main())

    assert stale is None
    assert fresh is session.current
    assert set(session.current.to_dict()) == {"new"}
    assert session.current.generation == 2
