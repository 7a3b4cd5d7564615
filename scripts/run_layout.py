#!/usr/bin/env python
"""
Lay out a snapshot of wallet transactions and write the position map as JSON.

Usage:
    python scripts/run_layout.py [--snapshot data/transactions.csv] [--width 700] [--height 600]
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from bubblemap.io.snapshot import load_transactions
from bubblemap.analysis.aggregation import aggregate_transactions, summarize_sides
from bubblemap.layout.zone_layout import ZoneLayout
from bubblemap.config.env import Env
from bubblemap.config.settings import DEFAULT_WIDTH, DEFAULT_HEIGHT, MIN_TRANSACTION_AMOUNT

logging.basicConfig(
    level=Env.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def run_layout(
    snapshot: str,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    min_amount: float = 0,
    seed: int = None,
    output: str = None,
) -> dict:
    """Load, aggregate, lay out and (optionally) write the result."""
    transactions = load_transactions(snapshot)
    logger.info(f"Loaded {len(transactions)} transactions from {snapshot}")

    entities = aggregate_transactions(transactions, min_amount=min_amount)
    if not entities:
        logger.warning("No positions to lay out!")

    layout = ZoneLayout(rng=random.Random(seed))
    result = layout.layout(entities, width, height)
    positions = result.to_dict()

    summaries = summarize_sides(entities)
    max_overlap = result.max_overlap()

    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w") as f:
            json.dump(positions, f, indent=2)
        logger.info(f"Wrote {len(positions)} positions to {output}")

    # Print summary
    print("\n" + "=" * 60)
    print("LAYOUT SUMMARY")
    print("=" * 60)
    for side, summary in summaries.items():
        print(
            f"{side.value:>3} side: {summary.trader_count} wallets, "
            f"${summary.total_amount:,.0f} staked"
        )
    print(f"Container: {width:g}x{height:g}")
    print(f"Max overlap: {max_overlap:.2f}px")
    print("=" * 60)

    return positions


def main():
    parser = argparse.ArgumentParser(
        description="Compute a zone-based wallet bubble layout from a snapshot"
    )
    parser.add_argument(
        "--snapshot",
        default=Env.SNAPSHOT_PATH,
        help=f"CSV/JSON transaction snapshot (default: {Env.SNAPSHOT_PATH})",
    )
    parser.add_argument("--width", type=float, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=float, default=DEFAULT_HEIGHT)
    parser.add_argument(
        "--min-amount",
        type=float,
        default=0,
        help=f"Ignore trades below this amount (live view uses {MIN_TRANSACTION_AMOUNT})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=Env.seed(),
        help="Random seed for a reproducible layout",
    )
    parser.add_argument("--output", default=None, help="Write positions JSON here")

    args = parser.parse_args()
    run_layout(
        args.snapshot,
        args.width,
        args.height,
        args.min_amount,
        args.seed,
        args.output,
    )


if __name__ == "__main__":
    main()
