"""FastAPI application: REST API plus the live price stream."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .accounts import UserStore
from .api import (
    create_auth_dependency,
    create_auth_router,
    create_orders_router,
    create_prices_router,
    install_error_handlers,
)
from .config import Settings
from .db import Database
from .market import SEED_PRICES, BroadcastHub, PriceDriver, PriceTable, create_stream_router
from .orders import OrderStore
from .tokens import TokenService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Wire the stores, market components and routers into one app.

    The database is opened and the price table seeded here; the price driver
    only runs between lifespan startup and shutdown.
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    if settings.uses_dev_secret:
        logger.warning("JWT_SECRET not set, using the development secret")

    db = Database(settings.db_path)
    users = UserStore(db, rounds=settings.bcrypt_rounds)
    orders = OrderStore(db)
    tokens = TokenService(settings.jwt_secret, ttl=timedelta(hours=settings.token_ttl_hours))

    table = PriceTable()
    table.initialize(SEED_PRICES)
    hub = BroadcastHub(send_timeout=settings.send_timeout)
    driver = PriceDriver(table, hub, interval=settings.tick_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.seed_default_user:
            users.ensure_default_user()
        await driver.start()
        try:
            yield
        finally:
            await driver.stop()
            await hub.close()
            db.close()

    app = FastAPI(title="GrowTrade", lifespan=lifespan)
    app.state.settings = settings
    app.state.table = table
    app.state.hub = hub
    app.state.driver = driver
    app.state.users = users
    app.state.orders = orders
    app.state.tokens = tokens

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins) or ["*"],
        allow_credentials=bool(settings.allowed_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )
    install_error_handlers(app)

    current_user_id = create_auth_dependency(tokens)
    app.include_router(create_auth_router(users, tokens))
    app.include_router(create_prices_router(table))
    app.include_router(create_orders_router(orders, current_user_id))
    app.include_router(create_stream_router(table, hub))

    @app.get("/health")
    async def health(request: Request) -> dict:
        state = request.app.state
        return {
            "status": "ok" if state.driver.running else "starting",
            "connections": len(state.hub),
            "symbols": len(state.table),
            "generation": state.table.version,
        }

    return app


def main() -> None:
    settings = Settings.from_env()
    app = create_app(settings)
    logger.info("Server starting on %s:%d (DB: %s)", settings.host, settings.port, settings.db_path)
    uvicorn.run(app, host=settings.host, port=settings.port)


__all__ = ["create_app", "main"]
