import pytest

from bubblemap.analysis.aggregation import (
    aggregate_transactions,
    build_wallet_details,
    summarize_sides,
)
from bubblemap.models.entity import Side, Tier
from bubblemap.models.transaction import WalletTransaction


def _tx(tx_id, wallet, amount, side="yes", ts="2024-05-01T00:00:00Z", market="m1"):
    return WalletTransaction(
        id=tx_id,
        wallet_address=wallet,
        amount=amount,
        side=Side.parse(side),
        timestamp=ts,
        price=0.42,
        market_id=market,
        market_title="Will it rain?",
    )


@pytest.fixture
def transactions():
    return [
        _tx("t1", "0xaaa", 4000, ts="2024-05-01T10:00:00Z"),
        _tx("t2", "0xaaa", 7000, ts="2024-05-01T12:00:00Z"),
        _tx("t3", "0xaaa", 2000, side="no", ts="2024-05-01T11:00:00Z"),
        _tx("t4", "0xbbb", 500, ts="2024-05-01T13:00:00Z"),
        _tx("t5", "0xccc", 1500, side="no", ts="2024-05-01T09:00:00Z", market="m2"),
    ]


def test_groups_by_wallet_and_side(transactions):
    entities = {e.id: e for e in aggregate_transactions(transactions)}

    # Newest trade id names the group; sub-threshold trades are dropped
    assert set(entities) == {"t2", "t3", "t5"}
    assert entities["t2"].magnitude == 11000
    assert entities["t2"].tier == Tier.WHALE
    assert entities["t2"].wallet_address == "0xaaa"
    assert entities["t3"].side == Side.NO
    assert entities["t5"].market_id == "m2"


def test_min_amount_and_limit(transactions):
    everything = aggregate_transactions(transactions, min_amount=0)
    assert {e.wallet_address for e in everything} == {"0xaaa", "0xbbb", "0xccc"}

    newest_two = aggregate_transactions(transactions, min_amount=0, limit=2)
    assert {e.id for e in newest_two} == {"t4", "t2"}


def test_aggregate_empty():
    assert aggregate_transactions([]) == []


def test_wallet_details(transactions):
    details = build_wallet_details("0xaaa", transactions, limit=2)

    assert [t.id for t in details.trades] == ["t2", "t3"]
    assert details.total_amount == 9000
    assert details.market_id == "m1"
    assert details.url == "https://polymarket.com/event/m1"


def test_wallet_details_unknown_wallet(transactions):
    details = build_wallet_details("0xzzz", transactions)
    assert details.trades == []
    assert details.total_amount == 0
    assert details.url is None


def test_summarize_sides(transactions):
    summaries = summarize_sides(aggregate_transactions(transactions, min_amount=0))
    assert summaries[Side.YES].trader_count == 2
    assert summaries[Side.YES].total_amount == 11500
    assert summaries[Side.NO].trader_count == 2
    assert summaries[Side.NO].total_amount == 3500
