"""Wallet transaction and details-panel dataclasses."""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from .entity import Side


@dataclass
class WalletTransaction:
    """A single trade by a wallet, as delivered by the upstream data layer."""

    id: str
    wallet_address: str
    amount: float  # USD
    side: Side
    timestamp: str  # ISO-8601

    price: Optional[float] = None
    market_id: Optional[str] = None
    market_title: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "wallet_address": self.wallet_address,
            "amount": self.amount,
            "side": self.side.value,
            "timestamp": self.timestamp,
            "price": self.price,
            "market_id": self.market_id,
            "market_title": self.market_title,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WalletTransaction":
        """Create from dictionary. Raises ValueError on invalid rows."""
        wallet = data.get("wallet_address") or ""
        if not wallet:
            raise ValueError(f"Transaction {data.get('id')!r} has no wallet address")
        try:
            amount = float(data.get("amount"))
        except (TypeError, ValueError):
            raise ValueError(f"Transaction {data.get('id')!r} has no numeric amount") from None
        if not math.isfinite(amount):
            raise ValueError(f"Transaction {data.get('id')!r} has no finite amount")

        price = data.get("price")
        return cls(
            id=str(data.get("id")),
            wallet_address=str(wallet),
            amount=amount,
            side=Side.parse(data.get("side")),
            timestamp=str(data.get("timestamp") or ""),
            price=float(price) if price is not None else None,
            market_id=data.get("market_id"),
            market_title=data.get("market_title"),
        )


@dataclass
class WalletDetails:
    """Details panel payload for a selected wallet."""

    wallet_address: str
    total_amount: float
    trades: List[WalletTransaction] = field(default_factory=list)
    market_id: Optional[str] = None

    @property
    def url(self) -> Optional[str]:
        """Get Polymarket URL for the wallet's most recent market."""
        if not self.market_id:
            return None
        return f"https://polymarket.com/event/{self.market_id}"


@dataclass
class SideSummary:
    """Totals for one side, shown in the map's header cards."""

    side: Side
    total_amount: float = 0.0
    trader_count: int = 0
