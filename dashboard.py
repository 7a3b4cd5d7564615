"""Streamlit dashboard for the wallet bubble maps."""

import streamlit as st
import pandas as pd
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from bubblemap.io.snapshot import load_transactions, load_price_points
from bubblemap.analysis.aggregation import (
    aggregate_transactions,
    build_wallet_details,
    summarize_sides,
)
from bubblemap.analysis.sparkline import PriceHistoryStore, sparkline_path
from bubblemap.layout.zone_layout import ZoneLayout
from bubblemap.layout.session import LayoutSession
from bubblemap.layout.physics import PhysicsSimulation
from bubblemap.layout.ticker import FixedStepTicker
from bubblemap.layout.live import LiveDistribution
from bubblemap.layout.selection import proximity_links, select_from_points
from bubblemap.models.entity import Side
from bubblemap.render.figures import bubble_figure, format_amount
from bubblemap.config.env import Env
from bubblemap.config.settings import DEFAULT_WIDTH, DEFAULT_HEIGHT, MIN_TRANSACTION_AMOUNT

# Page Config
st.set_page_config(
    page_title="Wallet Bubble Map",
    layout="wide",
    initial_sidebar_state="collapsed",
    page_icon="🫧"
)

# --- CSS STYLING ---
st.markdown("""
<style>
    .stApp {
        font-family: 'IBM Plex Mono', 'Courier New', monospace;
    }
    div[data-testid="stMetric"] {
        background-color: #262730;
        border: 1px solid #363945;
        padding: 10px;
        border-radius: 5px;
    }
    .terminal-header {
        border-bottom: 2px solid #00C076;
        padding-bottom: 10px;
        margin-bottom: 20px;
        color: #00C076;
        font-weight: bold;
        text-transform: uppercase;
        letter-spacing: 0.1em;
    }
</style>
""", unsafe_allow_html=True)


def load_snapshot(path):
    """Load transactions, or an empty list if the snapshot is missing."""
    if not Path(path).exists():
        return []
    return load_transactions(path)


def get_layout_session():
    """One zone layout session per browser session."""
    if "layout_session" not in st.session_state:
        st.session_state["layout_session"] = LayoutSession(ZoneLayout(rng=random.Random(Env.seed())))
    return st.session_state["layout_session"]


def get_live_distribution(width, height):
    """Physics state persists across reruns so bubbles keep their motion."""
    live = st.session_state.get("live_distribution")
    if live is None:
        simulation = PhysicsSimulation(width, height, rng=random.Random(Env.seed()))
        live = LiveDistribution(simulation, FixedStepTicker())
        st.session_state["live_distribution"] = live
    live.simulation.resize(width, height)
    return live


def render_sidebar():
    """Render sidebar with data source and canvas controls."""
    st.sidebar.markdown("### 🫧 MAP CONTROL")
    snapshot = st.sidebar.text_input("Transactions snapshot", Env.SNAPSHOT_PATH)
    prices = st.sidebar.text_input("Price history snapshot (optional)", "")

    with st.sidebar.expander("📐 CANVAS", expanded=False):
        width = st.number_input("Width (px)", 200, 2000, DEFAULT_WIDTH, step=50)
        height = st.number_input("Height (px)", 200, 2000, DEFAULT_HEIGHT, step=50)

    st.sidebar.markdown("---")
    st.sidebar.code("python scripts/run_layout.py --output out/positions.json", language="bash")
    return snapshot, prices, width, height


def render_side_cards(entities):
    """YES / NO / total header cards."""
    summaries = summarize_sides(entities)
    yes, no = summaries[Side.YES], summaries[Side.NO]
    c1, c2, c3 = st.columns(3)
    c1.metric("YES SIDE", format_amount(yes.total_amount), f"{yes.trader_count} traders")
    c2.metric("NO SIDE", format_amount(no.total_amount), f"{no.trader_count} traders", delta_color="inverse")
    c3.metric(
        "TOTAL VOLUME",
        format_amount(yes.total_amount + no.total_amount),
        f"{yes.trader_count + no.trader_count} total traders",
        delta_color="off",
    )


def clicked_wallet(result, chart_key):
    """Id of the bubble clicked on the chart during the last rerun, if any."""
    event = st.session_state.get(chart_key) or {}
    points = (event.get("selection") or {}).get("points") or []
    return select_from_points(result, points)


def render_wallet_details(transactions, entities_by_id, key, clicked_id=None):
    """Selection by id feeds the details panel. A chart click wins over the picker."""
    if not entities_by_id:
        return None

    options = ["(none)"] + sorted(entities_by_id)
    selected_id = st.selectbox(
        "Inspect wallet",
        options,
        format_func=lambda i: i if i == "(none)" else (
            f"{entities_by_id[i].wallet_address} ({entities_by_id[i].side.value}, "
            f"{format_amount(entities_by_id[i].magnitude)})"
        ),
        key=key,
    )
    if clicked_id in entities_by_id:
        selected_id = clicked_id
    if selected_id == "(none)":
        return None

    entity = entities_by_id[selected_id]
    details = build_wallet_details(entity.wallet_address, transactions)

    st.markdown(f"<div class='terminal-header'>WALLET :: {details.wallet_address}</div>", unsafe_allow_html=True)
    m1, m2 = st.columns(2)
    m1.metric("TOTAL AMOUNT", f"${details.total_amount:,.0f}")
    m2.metric("RECENT TRADES", len(details.trades))
    if details.trades:
        st.dataframe(
            pd.DataFrame([t.to_dict() for t in details.trades])[
                ["timestamp", "side", "amount", "price", "market_title"]
            ],
            use_container_width=True,
            hide_index=True,
        )
    if details.url:
        st.link_button("↗ VIEW ON POLYMARKET", details.url)
    return selected_id


def render_market_map(transactions, width, height):
    """Per-market zone layout."""
    markets = sorted({t.market_id for t in transactions if t.market_id})
    market_id = st.selectbox("Market", ["All markets"] + markets)
    scoped = transactions if market_id == "All markets" else [
        t for t in transactions if t.market_id == market_id
    ]

    entities = aggregate_transactions(scoped, min_amount=0)
    render_side_cards(entities)

    session = get_layout_session()
    map_key = (market_id, width, height, len(scoped))
    if st.button("↻ RE-LAYOUT") or st.session_state.get("map_key") != map_key:
        session.refresh(entities, width, height)
        st.session_state["map_key"] = map_key

    entities_by_id = {e.id: e for e in entities}
    clicked_id = clicked_wallet(session.current, "map_chart")
    selected_id = render_wallet_details(scoped, entities_by_id, key="map_wallet", clicked_id=clicked_id)
    st.plotly_chart(
        bubble_figure(session.current, entities_by_id, selected_id=selected_id),
        use_container_width=False,
        key="map_chart",
        on_select="rerun",
        selection_mode="points",
    )


def render_live_distribution(transactions, width, height):
    """Aggregate physics view, advanced a batch of frames per rerun."""
    entities = aggregate_transactions(transactions, min_amount=MIN_TRANSACTION_AMOUNT)
    live = get_live_distribution(width, height)
    live.update(entities)

    frames = st.slider("Frames per refresh", 1, 240, 60)
    live.start()
    try:
        live.ticker.run(frames)
    finally:
        live.stop()

    result = live.simulation.result()
    entities_by_id = {e.id: e for e in entities}
    clicked_id = clicked_wallet(result, "live_chart")
    selected_id = render_wallet_details(transactions, entities_by_id, key="live_wallet", clicked_id=clicked_id)
    st.plotly_chart(
        bubble_figure(
            result,
            entities_by_id,
            links=proximity_links(result),
            selected_id=selected_id,
            title="Live Wallet Distribution",
            quadrant_grid=True,
        ),
        use_container_width=False,
        key="live_chart",
        on_select="rerun",
        selection_mode="points",
    )
    st.caption(f"Frame {live.simulation.frame} · max overlap {result.max_overlap():.1f}px")


def render_sparklines(prices_path):
    """Recent YES price trend per market."""
    if not prices_path or not Path(prices_path).exists():
        st.info("Provide a price history snapshot in the sidebar.")
        return

    store = st.session_state.setdefault("price_store", PriceHistoryStore())
    grouped = store.ingest(load_price_points(prices_path))

    for market_id in sorted(grouped):
        path, is_positive = sparkline_path(store.history(market_id), width=120, height=32)
        color = "#00C076" if is_positive else "#FF3A3A"
        st.markdown(
            f"<code>{market_id}</code> "
            f"<svg width='120' height='32'><path d='{path}' fill='none' stroke='{color}' stroke-width='1.5'/></svg>",
            unsafe_allow_html=True,
        )


def main():
    snapshot, prices, width, height = render_sidebar()

    try:
        transactions = load_snapshot(snapshot)
    except Exception as e:
        st.error(f"Snapshot error: {e}")
        return

    if not transactions:
        st.warning(f"No transactions found at {snapshot}")

    tab_map, tab_live, tab_prices = st.tabs(["🗺️ Market Map", "🫧 Live Distribution", "📈 Price Trends"])

    with tab_map:
        render_market_map(transactions, width, height)

    with tab_live:
        render_live_distribution(transactions, width, height)

    with tab_prices:
        render_sparklines(prices)

if __name__ == "__main__":
    main()
