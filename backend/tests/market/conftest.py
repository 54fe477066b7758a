"""Fixtures for market data tests.

Provides in-memory stand-ins for streaming transports so the hub, driver and
connection lifecycle can be exercised without a network.
"""

import asyncio

import pytest
from fastapi.websockets import WebSocketState

from growtrade.market.interface import StreamConnection


class FakeConnection(StreamConnection):
    """Records every frame; raises once its transport is closed."""

    def __init__(self, delay: float = 0.0) -> None:
        self.messages: list[str] = []
        self.closed = False
        self.close_calls = 0
        self.delay = delay

    async def send_text(self, data: str) -> None:
        if self.closed:
            raise ConnectionError("transport closed")
        if self.delay:
            await asyncio.sleep(self.delay)
        self.messages.append(data)

    async def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeWebSocket:
    """Minimal stand-in for a FastAPI WebSocket driven from the test."""

    def __init__(self, fail_accept: bool = False) -> None:
        self.client = None
        self.sent: list[str] = []
        self.accepted = False
        self.close_calls = 0
        self.application_state = WebSocketState.CONNECTING
        self.client_state = WebSocketState.CONNECTING
        self._fail_accept = fail_accept
        self._inbound: asyncio.Queue = asyncio.Queue()

    async def accept(self) -> None:
        if self._fail_accept:
            raise RuntimeError("handshake rejected")
        self.accepted = True
        self.application_state = WebSocketState.CONNECTED
        self.client_state = WebSocketState.CONNECTED

    async def send_text(self, data: str) -> None:
        self.sent.append(data)

    async def receive(self) -> dict:
        message = await self._inbound.get()
        if isinstance(message, Exception):
            raise message
        if message["type"] == "websocket.disconnect":
            self.client_state = WebSocketState.DISCONNECTED
        return message

    async def close(self, code: int = 1000) -> None:
        self.close_calls += 1
        self.application_state = WebSocketState.DISCONNECTED

    # Test controls

    def client_sends(self, text: str) -> None:
        self._inbound.put_nowait({"type": "websocket.receive", "text": text})

    def client_disconnects(self) -> None:
        self._inbound.put_nowait({"type": "websocket.disconnect", "code": 1000})

    def read_fails(self, error: Exception) -> None:
        self._inbound.put_nowait(error)


@pytest.fixture
def make_connection():
    """Factory for FakeConnection instances."""
    return FakeConnection


@pytest.fixture
def make_websocket():
    """Factory for FakeWebSocket instances."""
    return FakeWebSocket
