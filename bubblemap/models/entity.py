"""Weighted entity dataclass for wallet positions on one side of a market."""

import math
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from ..config.settings import WHALE_THRESHOLD, LARGE_THRESHOLD


class Side(Enum):
    """Which side of the market the position is on."""

    YES = "YES"
    NO = "NO"

    @classmethod
    def parse(cls, value) -> "Side":
        """Parse 'yes'/'YES'/Side.YES into a Side. Raises ValueError otherwise."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown side: {value!r}") from None


class Tier(Enum):
    """Size bucket derived from stake magnitude."""

    SMALL = "small"
    LARGE = "large"
    WHALE = "whale"

    @classmethod
    def from_magnitude(cls, magnitude: float) -> "Tier":
        """Classify a magnitude using the fixed whale/large thresholds."""
        if magnitude is None or math.isnan(magnitude):
            return cls.SMALL
        if magnitude >= WHALE_THRESHOLD:
            return cls.WHALE
        if magnitude >= LARGE_THRESHOLD:
            return cls.LARGE
        return cls.SMALL

    @property
    def rank(self) -> int:
        """Zone order: 0 is innermost."""
        return _TIER_RANK[self]


_TIER_RANK = {Tier.SMALL: 0, Tier.LARGE: 1, Tier.WHALE: 2}


@dataclass(frozen=True)
class WeightedEntity:
    """A wallet (or aggregated trade group) with a stake on one side."""

    id: str
    side: Side
    magnitude: float  # Stake amount in USD

    # Metadata passed through to tooltips and the details panel
    wallet_address: Optional[str] = None
    market_title: Optional[str] = None
    market_id: Optional[str] = None
    timestamp: Optional[str] = None

    @property
    def tier(self) -> Tier:
        return Tier.from_magnitude(self.magnitude)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "side": self.side.value,
            "magnitude": self.magnitude,
            "wallet_address": self.wallet_address,
            "market_title": self.market_title,
            "market_id": self.market_id,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WeightedEntity":
        """Create from dictionary. Raises ValueError on missing/invalid fields."""
        entity_id = data.get("id")
        if entity_id is None or str(entity_id) == "":
            raise ValueError("Entity is missing an id")
        try:
            raw = data.get("magnitude")
            if raw is None:
                raw = data.get("amount")
            magnitude = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Entity {entity_id} has no numeric magnitude") from None
        if not math.isfinite(magnitude):
            raise ValueError(f"Entity {entity_id} has no finite magnitude")
        return cls(
            id=str(entity_id),
            side=Side.parse(data.get("side")),
            magnitude=magnitude,
            wallet_address=data.get("wallet_address"),
            market_title=data.get("market_title"),
            market_id=data.get("market_id"),
            timestamp=data.get("timestamp"),
        )
