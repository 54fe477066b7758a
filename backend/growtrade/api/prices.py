"""Current price snapshot over REST."""

from __future__ import annotations

from fastapi import APIRouter

from ..market import PriceTable


def create_prices_router(table: PriceTable) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["prices"])

    @router.get("/prices")
    def get_prices() -> list[dict]:
        """Current price of every symbol: [{"symbol": ..., "price": ...}]."""
        return [entry.to_dict() for entry in table.snapshot()]

    return router
