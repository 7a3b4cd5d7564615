"""Price history store and sparkline path generation."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..cache import TTLCache
from ..config.settings import PRICE_HISTORY_POINTS, PRICE_HISTORY_TTL_SECONDS

logger = logging.getLogger(__name__)


@dataclass
class PricePoint:
    """One YES/NO price observation for a market."""

    market_id: str
    yes_price: float
    no_price: float
    timestamp: str  # ISO-8601

    @classmethod
    def from_dict(cls, data: dict) -> "PricePoint":
        return cls(
            market_id=str(data["market_id"]),
            yes_price=float(data.get("yes_price") or 0.0),
            no_price=float(data.get("no_price") or 0.0),
            timestamp=str(data.get("timestamp") or ""),
        )


class PriceHistoryStore:
    """Recent price points per market, oldest first, cached with a TTL."""

    def __init__(
        self,
        ttl_seconds: float = PRICE_HISTORY_TTL_SECONDS,
        max_points: int = PRICE_HISTORY_POINTS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_points = max_points
        self.cache = TTLCache(ttl_seconds, clock=clock)

    def ingest(self, points: Iterable[PricePoint]) -> Dict[str, List[PricePoint]]:
        """Group points by market, keep the newest N, store oldest-first."""
        grouped: Dict[str, List[PricePoint]] = {}
        for point in sorted(points, key=lambda p: p.timestamp, reverse=True):
            bucket = grouped.setdefault(point.market_id, [])
            if len(bucket) < self.max_points:
                bucket.append(point)

        for market_id, bucket in grouped.items():
            bucket.reverse()
            self.cache.set(market_id, bucket)

        logger.debug(f"Stored price history for {len(grouped)} markets")
        return grouped

    def history(self, market_id: str) -> Optional[List[PricePoint]]:
        """Cached history, or None when missing or stale."""
        return self.cache.get(market_id)


def sparkline_path(
    history: Optional[List[PricePoint]],
    width: float = 60,
    height: float = 30,
    padding: float = 4,
) -> Tuple[str, bool]:
    """
    SVG path of YES prices, smoothed with quadratic segments.

    Returns:
        (path, is_positive) - flat midline and True with under two points
    """
    if not history or len(history) < 2:
        return f"M0,{height / 2:g} L{width:g},{height / 2:g}", True

    prices = [p.yes_price for p in history]
    low = min(prices)
    price_range = (max(prices) - low) or 0.01
    chart_height = height - padding * 2

    points = [
        (
            i / (len(prices) - 1) * width,
            padding + chart_height - (price - low) / price_range * chart_height,
        )
        for i, price in enumerate(prices)
    ]

    parts = [f"M{points[0][0]:g},{points[0][1]:g}"]
    for (px, py), (x, y) in zip(points, points[1:]):
        mid_x = (px + x) / 2
        parts.append(f"Q{px + (mid_x - px) / 2:g},{py:g} {mid_x:g},{(py + y) / 2:g}")
        parts.append(f"T{x:g},{y:g}")

    return " ".join(parts), prices[-1] >= prices[0]
