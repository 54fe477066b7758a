"""WebSocket streaming endpoint for live price updates."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket
from fastapi.websockets import WebSocketState

from .hub import BroadcastHub
from .interface import StreamConnection
from .table import PriceTable

logger = logging.getLogger(__name__)


class WebSocketConnection(StreamConnection):
    """StreamConnection backed by a FastAPI WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket
        self._closed = False
        self.client = f"{websocket.client.host}:{websocket.client.port}" if websocket.client else "unknown"

    @property
    def closed(self) -> bool:
        return self._closed

    async def send_text(self, data: str) -> None:
        if self._closed:
            raise ConnectionError(f"WebSocket to {self.client} is closed")
        await self._websocket.send_text(data)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Nothing to send if either side already finished the close handshake
        if (
            self._websocket.application_state == WebSocketState.CONNECTED
            and self._websocket.client_state == WebSocketState.CONNECTED
        ):
            try:
                await self._websocket.close()
            except (RuntimeError, OSError) as e:
                logger.debug("WebSocket close for %s failed: %s", self.client, e)

    def __repr__(self) -> str:
        return f"WebSocketConnection({self.client})"


async def serve_connection(websocket: WebSocket, table: PriceTable, hub: BroadcastHub) -> None:
    """Run one streaming connection from upgrade to deregistration.

    The client gets the current snapshot immediately, then every published
    tick. Inbound frames are read only to notice the client going away.
    The connection is deregistered and its transport released on every exit
    path once the upgrade has succeeded.
    """
    try:
        await websocket.accept()
    except Exception as e:
        logger.warning("WebSocket upgrade failed: %s", e)
        return

    conn = WebSocketConnection(websocket)
    logger.info("Stream client connected: %s", conn.client)
    hub.register(conn)
    try:
        await hub.send_to(conn, table.snapshot())
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.info("Stream client disconnected: %s", conn.client)
                break
    except Exception as e:
        logger.info("Stream client %s read failed: %s", conn.client, e)
    finally:
        hub.deregister(conn)
        await conn.close()


def create_stream_router(table: PriceTable, hub: BroadcastHub) -> APIRouter:
    """Create the WebSocket streaming router bound to the table and hub.

    This factory pattern lets us inject dependencies without globals.
    """
    router = APIRouter(tags=["streaming"])

    @router.websocket("/ws")
    async def stream_prices(websocket: WebSocket) -> None:
        """WebSocket endpoint for live prices.

        Each message is a JSON array of {"symbol", "price"} objects: one on
        connect, then one per simulator tick.
        """
        await serve_connection(websocket, table, hub)

    return router
