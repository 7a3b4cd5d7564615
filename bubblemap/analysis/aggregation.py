"""Turn raw wallet transactions into weighted entities and panel data."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.entity import Side, WeightedEntity
from ..models.transaction import SideSummary, WalletDetails, WalletTransaction
from ..config.settings import MIN_TRANSACTION_AMOUNT, WALLET_DETAIL_TRADE_LIMIT

logger = logging.getLogger(__name__)


def _newest_first(transactions: Iterable[WalletTransaction]) -> List[WalletTransaction]:
    return sorted(transactions, key=lambda t: t.timestamp, reverse=True)


def aggregate_transactions(
    transactions: Iterable[WalletTransaction],
    min_amount: float = MIN_TRANSACTION_AMOUNT,
    limit: Optional[int] = None,
) -> List[WeightedEntity]:
    """
    Group transactions by (wallet, side) and sum their amounts.

    Args:
        transactions: Raw trades from the upstream data layer
        min_amount: Trades below this amount are ignored
        limit: Only consider the N most recent qualifying trades

    Returns:
        One entity per (wallet, side), keyed by its most recent trade id
    """
    qualifying = [t for t in transactions if t.amount >= min_amount]
    qualifying = _newest_first(qualifying)
    if limit is not None:
        qualifying = qualifying[:limit]

    groups: Dict[Tuple[str, Side], dict] = {}
    for tx in qualifying:
        key = (tx.wallet_address, tx.side)
        group = groups.get(key)
        if group is None:
            groups[key] = {
                "id": tx.id,
                "amount": tx.amount,
                "market_title": tx.market_title,
                "market_id": tx.market_id,
                "timestamp": tx.timestamp,
            }
        else:
            group["amount"] += tx.amount

    entities = [
        WeightedEntity(
            id=group["id"],
            side=side,
            magnitude=group["amount"],
            wallet_address=wallet,
            market_title=group["market_title"],
            market_id=group["market_id"],
            timestamp=group["timestamp"],
        )
        for (wallet, side), group in groups.items()
    ]

    logger.debug(f"Aggregated {len(qualifying)} trades into {len(entities)} wallet positions")
    return entities


def build_wallet_details(
    wallet_address: str,
    transactions: Iterable[WalletTransaction],
    limit: int = WALLET_DETAIL_TRADE_LIMIT,
) -> WalletDetails:
    """Details panel payload: the wallet's most recent trades and their total."""
    trades = _newest_first(t for t in transactions if t.wallet_address == wallet_address)
    trades = trades[:limit]

    return WalletDetails(
        wallet_address=wallet_address,
        total_amount=sum(t.amount for t in trades),
        trades=trades,
        market_id=trades[0].market_id if trades else None,
    )


def summarize_sides(entities: Iterable[WeightedEntity]) -> Dict[Side, SideSummary]:
    """Per-side stake totals and trader counts."""
    summaries = {side: SideSummary(side=side) for side in Side}
    for entity in entities:
        summary = summaries[entity.side]
        summary.total_amount += entity.magnitude
        summary.trader_count += 1
    return summaries
