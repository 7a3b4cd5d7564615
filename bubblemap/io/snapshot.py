"""Load offline snapshots of transactions and positions from CSV/JSON."""

import logging
from pathlib import Path
from typing import Callable, List, TypeVar, Union

import pandas as pd

from ..models.entity import WeightedEntity
from ..models.transaction import WalletTransaction
from ..analysis.sparkline import PricePoint

logger = logging.getLogger(__name__)

T = TypeVar("T")


def read_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a CSV or JSON (records) file into a DataFrame."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path, dtype={"id": str, "market_id": str})
    elif suffix in (".json", ".jsonl"):
        df = pd.read_json(
            path,
            lines=suffix == ".jsonl",
            dtype={"id": str, "market_id": str},
            convert_dates=False,
        )
    else:
        raise ValueError(f"Unsupported snapshot format: {path.suffix}")

    # Missing cells become None rather than NaN
    return df.astype(object).where(pd.notna(df), None)


def _parse_rows(df: pd.DataFrame, parser: Callable[[dict], T], label: str) -> List[T]:
    items = []
    skipped = 0
    for row in df.to_dict("records"):
        try:
            items.append(parser(row))
        except (KeyError, ValueError) as e:
            skipped += 1
            logger.warning(f"Skipping {label} row: {e}")
    if skipped:
        logger.info(f"Loaded {len(items)} {label} rows ({skipped} skipped)")
    return items


def load_transactions(path: Union[str, Path]) -> List[WalletTransaction]:
    """Wallet transactions: id, wallet_address, amount, side, timestamp, ..."""
    return _parse_rows(read_table(path), WalletTransaction.from_dict, "transaction")


def load_entities(path: Union[str, Path]) -> List[WeightedEntity]:
    """Pre-aggregated positions: id, side, magnitude (or amount), ..."""
    return _parse_rows(read_table(path), WeightedEntity.from_dict, "entity")


def load_price_points(path: Union[str, Path]) -> List[PricePoint]:
    """Price history: market_id, yes_price, no_price, timestamp."""
    return _parse_rows(read_table(path), PricePoint.from_dict, "price")
