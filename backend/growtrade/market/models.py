"""Data models for market data."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PriceEntry:
    """Immutable current price of a single symbol."""

    symbol: str
    price: float

    def to_dict(self) -> dict:
        """Serialize for JSON / WebSocket transmission."""
        return {"symbol": self.symbol, "price": self.price}


def encode_snapshot(entries: Iterable[PriceEntry]) -> str:
    """Encode a snapshot as the JSON array pushed to streaming clients."""
    return json.dumps([entry.to_dict() for entry in entries])
