import random

from bubblemap.layout.zone_layout import ZoneLayout
from bubblemap.render.figures import bubble_figure, format_amount


def test_format_amount():
    assert format_amount(25000) == "$25k"
    assert format_amount(2500) == "$2.5k"
    assert format_amount(800) == "$800"


def test_bubble_figure_draws_each_circle(make_entity):
    entities = [
        make_entity("a", "yes", 15000, wallet_address="0xaaa"),
        make_entity("b", "yes", 500),
        make_entity("c", "no", 3000),
    ]
    result = ZoneLayout(rng=random.Random(0)).layout(entities, 700, 600)

    fig = bubble_figure(result, {e.id: e for e in entities}, links=[("a", "b")], selected_id="a")

    circles = [s for s in fig.layout.shapes if s.type == "circle"]
    lines = [s for s in fig.layout.shapes if s.type == "line"]
    assert len(circles) == 3
    assert len(lines) == 2  # link + divider
    assert len(fig.data) == 2  # one hover trace per side
    assert "0xaaa" in " ".join(fig.data[0].hovertext)
    assert fig.layout.template.layout.paper_bgcolor is not None


def test_bubble_figure_empty_result():
    fig = bubble_figure(ZoneLayout().layout([], 700, 600))
    assert len(fig.data) == 0
