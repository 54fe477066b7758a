"""Order records per user."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from .db import Database

logger = logging.getLogger(__name__)

SIDES = ("buy", "sell")


@dataclass(frozen=True, slots=True)
class Order:
    """A recorded buy or sell order. Nothing is executed or matched."""

    id: int
    user_id: int
    symbol: str
    side: str
    quantity: int
    price: float
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "symbol": self.symbol,
            "side": self.side,
            "quantity": self.quantity,
            "price": self.price,
            "timestamp": self.timestamp.isoformat(),
        }


class OrderStore:
    def __init__(self, db: Database) -> None:
        self._db = db

    def create(
        self,
        user_id: int,
        symbol: str,
        side: str,
        quantity: int,
        price: float,
        timestamp: datetime | None = None,
    ) -> Order:
        """Append an order. Field validation happens at the API boundary."""
        if side not in SIDES:
            raise ValueError(f"side must be one of {SIDES}, got {side!r}")
        ts = timestamp or datetime.now(timezone.utc)
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO orders (user_id, symbol, side, quantity, price, timestamp)"
                " VALUES (?, ?, ?, ?, ?, ?)",
                (user_id, symbol, side, quantity, price, ts.isoformat()),
            )
        order = Order(
            id=cursor.lastrowid,
            user_id=user_id,
            symbol=symbol,
            side=side,
            quantity=quantity,
            price=price,
            timestamp=ts,
        )
        logger.info("Order %d: user %d %s %d %s @ %.2f", order.id, user_id, side, quantity, symbol, price)
        return order

    def list_for_user(self, user_id: int) -> list[Order]:
        """All orders of one user, newest first."""
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT id, user_id, symbol, side, quantity, price, timestamp FROM orders"
                " WHERE user_id = ? ORDER BY timestamp DESC, id DESC",
                (user_id,),
            ).fetchall()
        return [
            Order(
                id=row["id"],
                user_id=row["user_id"],
                symbol=row["symbol"],
                side=row["side"],
                quantity=row["quantity"],
                price=row["price"],
                timestamp=datetime.fromisoformat(row["timestamp"]),
            )
            for row in rows
        ]
