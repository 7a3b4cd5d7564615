"""Plotly figures built from layout results."""

from typing import Dict, Iterable, List, Optional, Tuple

import plotly.graph_objects as go

from ..models.circle import LayoutResult, RenderCircle
from ..models.entity import Side, WeightedEntity

SIDE_COLORS = {
    Side.YES: ("rgba(0, 192, 118, 0.45)", "#00C076"),
    Side.NO: ("rgba(255, 58, 58, 0.45)", "#FF3A3A"),
}


def format_amount(amount: float) -> str:
    """$12k / $1.5k / $800 style label."""
    if amount >= 10000:
        return f"${amount / 1000:.0f}k"
    if amount >= 1000:
        return f"${amount / 1000:.1f}k"
    return f"${amount:,.0f}"


def bubble_figure(
    result: LayoutResult,
    entities: Optional[Dict[str, WeightedEntity]] = None,
    links: Iterable[Tuple[str, str]] = (),
    selected_id: Optional[str] = None,
    title: str = "Wallet Distribution",
    quadrant_grid: bool = False,
) -> go.Figure:
    """
    Draw laid-out circles as plotly shapes with a hover marker per circle.

    Plot coordinates match container pixels with y pointing down.
    """
    entities = entities or {}
    fig = go.Figure()

    for a_id, b_id in links:
        a, b = result.get(a_id), result.get(b_id)
        if a is None or b is None:
            continue
        fig.add_shape(
            type="line",
            x0=a.x, y0=a.y, x1=b.x, y1=b.y,
            line=dict(color=SIDE_COLORS[a.side][1], width=1),
            opacity=0.15,
            layer="below",
        )

    for circle in result:
        fill, line = SIDE_COLORS[circle.side]
        fig.add_shape(
            type="circle",
            x0=circle.x - circle.radius,
            y0=circle.y - circle.radius,
            x1=circle.x + circle.radius,
            y1=circle.y + circle.radius,
            fillcolor=fill,
            line=dict(color=line, width=3 if circle.id == selected_id else 1),
        )

    for side in Side:
        circles: List[RenderCircle] = result.by_side(side)
        if not circles:
            continue
        fig.add_trace(go.Scatter(
            x=[c.x for c in circles],
            y=[c.y for c in circles],
            mode="text",
            text=[format_amount(c.magnitude) for c in circles],
            customdata=[c.id for c in circles],
            hovertext=[_hover_text(c, entities.get(c.id)) for c in circles],
            hoverinfo="text",
            name=f"{side.value} positions",
            textfont=dict(color="white", size=10),
        ))

    # Center divider
    fig.add_shape(
        type="line",
        x0=result.width / 2, y0=0, x1=result.width / 2, y1=result.height,
        line=dict(color="#363945", width=1, dash="dot"),
    )
    if quadrant_grid:
        fig.add_shape(
            type="line",
            x0=0, y0=result.height / 2, x1=result.width, y1=result.height / 2,
            line=dict(color="#363945", width=1, dash="dot"),
        )

    fig.update_layout(
        title=title,
        template="plotly_dark",
        width=result.width or None,
        height=result.height or None,
        showlegend=False,
        margin=dict(l=0, r=0, t=40, b=0),
        xaxis=dict(range=[0, result.width], visible=False),
        yaxis=dict(range=[result.height, 0], visible=False, scaleanchor="x"),
    )
    return fig


def _hover_text(circle: RenderCircle, entity: Optional[WeightedEntity]) -> str:
    lines = [f"{circle.side.value} · {circle.tier.value}", format_amount(circle.magnitude)]
    if entity is not None:
        if entity.wallet_address:
            lines.insert(0, entity.wallet_address)
        if entity.market_title:
            lines.append(entity.market_title)
    return "<br>".join(lines)
