#!/usr/bin/env python
"""
Run the live-distribution physics for a number of frames and report overlap.

Usage:
    python scripts/simulate.py [--frames 300] [--snapshot data/transactions.csv]
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
from bubblemap.analysis.aggregation import aggregate_transactions
from bubblemap.layout.physics import PhysicsSimulation
from bubblemap.layout.ticker import FixedStepTicker
from bubblemap.layout.live import LiveDistribution
from bubblemap.config.env import Env
from bubblemap.config.settings import DEFAULT_WIDTH, DEFAULT_HEIGHT

logging.basicConfig(
    level=Env.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def simulate(
    snapshot: str,
    frames: int = 300,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    seed: int = None,
    output: str = None,
) -> dict:
    """Settle the simulation headlessly and return the final frame."""
    entities = aggregate_transactions(load_transactions(snapshot))
    logger.info(f"Simulating {len(entities)} wallet bubbles for {frames} frames")

    simulation = PhysicsSimulation(width, height, rng=random.Random(seed))
    ticker = FixedStepTicker()
    live = LiveDistribution(simulation, ticker)
    live.update(entities)

    live.start()
    try:
        ran = ticker.run(frames)
    finally:
        live.stop()

    result = simulation.result()
    positions = result.to_dict(include_velocity=True)

    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w") as f:
            json.dump(positions, f, indent=2)
        logger.info(f"Wrote final frame to {output}")

    print("\n" + "=" * 60)
    print("SIMULATION SUMMARY")
    print("=" * 60)
    print(f"Frames run: {ran}")
    print(f"Bubbles: {len(result)}")
    print(f"Max overlap: {result.max_overlap():.2f}px")
    print("=" * 60)

    return positions


def main():
    parser = argparse.ArgumentParser(
        description="Run the live wallet distribution physics headlessly"
    )
    parser.add_argument("--snapshot", default=Env.SNAPSHOT_PATH)
    parser.add_argument("--frames", type=int, default=300)
    parser.add_argument("--width", type=float, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=float, default=DEFAULT_HEIGHT)
    parser.add_argument("--seed", type=int, default=Env.seed())
    parser.add_argument("--output", default=None, help="Write final frame JSON here")

    args = parser.parse_args()
    simulate(args.snapshot, args.frames, args.width, args.height, args.seed, args.output)


if __name__ == "__main__":
    main()
