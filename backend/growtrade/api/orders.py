"""Order entry and history for the authenticated user."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, Depends

from ..orders import OrderStore
from .schemas import OrderRequest


def create_orders_router(orders: OrderStore, current_user_id: Callable[..., int]) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["orders"])

    @router.post("/orders", status_code=201)
    def create_order(body: OrderRequest, user_id: int = Depends(current_user_id)) -> dict:
        order = orders.create(
            user_id=user_id,
            symbol=body.symbol,
            side=body.side,
            quantity=body.quantity,
            price=body.price,
        )
        return order.to_dict()

    @router.get("/orders")
    def list_orders(user_id: int = Depends(current_user_id)) -> list[dict]:
        """The caller's orders, newest first."""
        return [order.to_dict() for order in orders.list_for_user(user_id)]

    return router
