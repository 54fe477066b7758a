"""Thread-safe in-memory price table."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from threading import Lock

from .models import PriceEntry


class PriceTable:
    """Thread-safe table of the current price for each symbol.

    Writer: PriceDriver (one tick at a time).
    Readers: WebSocket snapshot on connect, GET /api/prices, broadcast.

    The symbol set is fixed by initialize() and never changes afterwards.
    """

    def __init__(self) -> None:
        self._entries: dict[str, PriceEntry] = {}
        self._lock = Lock()
        self._initialized = False
        self._version: int = 0  # Bumped once per applied perturbation

    def initialize(self, prices: Mapping[str, float]) -> None:
        """Set the symbol set and starting prices. Must be called exactly once."""
        entries: dict[str, PriceEntry] = {}
        for symbol, price in prices.items():
            symbol = symbol.upper().strip()
            if not symbol:
                raise ValueError("Symbol must not be empty")
            if price <= 0:
                raise ValueError(f"Starting price for {symbol} must be positive, got {price}")
            entries[symbol] = PriceEntry(symbol=symbol, price=float(price))

        with self._lock:
            if self._initialized:
                raise RuntimeError("PriceTable is already initialized")
            self._entries = entries
            self._initialized = True

    def snapshot(self) -> list[PriceEntry]:
        """Consistent copy of every entry, in initialization order."""
        with self._lock:
            return list(self._entries.values())

    def apply_perturbation(self, fn: Callable[[PriceEntry], PriceEntry]) -> list[PriceEntry]:
        """Apply ``fn`` to every entry as one atomic generation.

        Readers see either the whole previous generation or the whole new one.
        If ``fn`` raises or renames a symbol the table is left untouched.
        Returns the new snapshot.
        """
        with self._lock:
            updated: dict[str, PriceEntry] = {}
            for symbol, entry in self._entries.items():
                new_entry = fn(entry)
                if new_entry.symbol != symbol:
                    raise ValueError(f"Perturbation renamed {symbol} to {new_entry.symbol}")
                updated[symbol] = new_entry
            self._entries = updated
            self._version += 1
            return list(updated.values())

    @property
    def version(self) -> int:
        """Number of generations applied since initialization."""
        return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
