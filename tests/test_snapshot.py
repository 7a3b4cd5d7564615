import json

import pytest

from bubblemap.io.snapshot import load_entities, load_price_points, load_transactions
from bubblemap.models.entity import Side

CSV = """id,wallet_address,amount,side,timestamp,price,market_id,market_title
1,0xaaa,2500,yes,2024-05-01T10:00:00Z,0.41,m1,Rain
2,0xbbb,12000,NO,2024-05-01T11:00:00Z,,m1,Rain
3,,800,yes,2024-05-01T12:00:00Z,0.40,m1,Rain
4,0xccc,abc,yes,2024-05-01T12:00:00Z,0.40,m1,Rain
5,0xddd,900,maybe,2024-05-01T12:00:00Z,0.40,m1,Rain
"""


def test_load_transactions_csv_skips_bad_rows(tmp_path):
    path = tmp_path / "tx.csv"
    path.write_text(CSV)

    transactions = load_transactions(path)

    assert [t.id for t in transactions] == ["1", "2"]
    assert transactions[1].side == Side.NO
    assert transactions[1].price is None
    assert transactions[0].price == pytest.approx(0.41)


def test_load_entities_json(tmp_path):
    path = tmp_path / "entities.json"
    path.write_text(json.dumps([
        {"id": "a", "side": "yes", "magnitude": 15000},
        {"id": "b", "side": "no", "amount": 500},
        {"id": "c", "side": "no"},
    ]))

    entities = load_entities(path)

    assert [(e.id, e.side, e.magnitude) for e in entities] == [
        ("a", Side.YES, 15000.0),
        ("b", Side.NO, 500.0),
    ]


def test_load_price_points(tmp_path):
    path = tmp_path / "prices.csv"
    path.write_text(
        "market_id,yes_price,no_price,timestamp\n"
        "m1,0.4,0.6,2024-05-01T10:00:00Z\n"
        "m1,0.5,0.5,2024-05-01T11:00:00Z\n"
    )
    points = load_price_points(path)
    assert [p.yes_price for p in points] == [0.4, 0.5]


def test_unsupported_format(tmp_path):
    path = tmp_path / "tx.parquet"
    path.write_text("")
    with pytest.raises(ValueError):
        load_transactions(path)
