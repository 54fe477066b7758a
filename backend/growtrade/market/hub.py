"""Fan-out of price snapshots to live streaming connections."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from .interface import StreamConnection
from .models import PriceEntry, encode_snapshot

logger = logging.getLogger(__name__)


class BroadcastHub:
    """Set of live StreamConnections and the logic that writes to them.

    All methods run on the event loop. register() and deregister() never
    await, so they are atomic with respect to any in-progress publish().
    Each connection carries its own asyncio.Lock: writes to one connection
    are serialized in FIFO order, which keeps overlapping publishes in tick
    order per connection.

    A connection stays in the set only while it can be written to. Any write
    error or a write that exceeds ``send_timeout`` removes it and closes its
    transport; the remaining connections are unaffected.
    """

    def __init__(self, send_timeout: float = 1.0) -> None:
        self._send_timeout = send_timeout
        self._connections: dict[StreamConnection, asyncio.Lock] = {}

    def register(self, conn: StreamConnection) -> None:
        """Add a connection. Registering the same handle twice is a no-op."""
        if conn in self._connections:
            return
        self._connections[conn] = asyncio.Lock()
        logger.info("Stream connection registered. Total: %d", len(self._connections))

    def deregister(self, conn: StreamConnection) -> bool:
        """Remove a connection if present. Returns whether it was registered."""
        if self._connections.pop(conn, None) is None:
            return False
        logger.info("Stream connection deregistered. Total: %d", len(self._connections))
        return True

    async def publish(self, snapshot: Sequence[PriceEntry]) -> int:
        """Deliver ``snapshot`` to every registered connection.

        The recipient list is fixed when the call starts. Connections that
        deregister before their write begins are skipped. Returns the number
        of connections that received the snapshot.
        """
        recipients = list(self._connections.items())
        if not recipients:
            return 0

        payload = encode_snapshot(snapshot)
        results = await asyncio.gather(
            *(self._deliver(conn, lock, payload) for conn, lock in recipients)
        )
        delivered = sum(results)
        logger.debug("Published %d prices to %d/%d connections", len(snapshot), delivered, len(recipients))
        return delivered

    async def send_to(self, conn: StreamConnection, snapshot: Sequence[PriceEntry]) -> bool:
        """Deliver ``snapshot`` to one registered connection.

        Returns False if the connection is not registered or the write failed.
        """
        lock = self._connections.get(conn)
        if lock is None:
            return False
        return await self._deliver(conn, lock, encode_snapshot(snapshot))

    async def close(self) -> None:
        """Close and remove every registered connection (process shutdown)."""
        connections = list(self._connections)
        self._connections.clear()
        for conn in connections:
            await self._release(conn)
        if connections:
            logger.info("Broadcast hub closed %d stream connections", len(connections))

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, conn: object) -> bool:
        return conn in self._connections

    # --- Internal ---

    async def _deliver(self, conn: StreamConnection, lock: asyncio.Lock, payload: str) -> bool:
        async with lock:
            # Removed (or removed and re-registered) while queued behind another write
            if self._connections.get(conn) is not lock:
                return False
            try:
                await asyncio.wait_for(conn.send_text(payload), timeout=self._send_timeout)
            except asyncio.TimeoutError:
                logger.warning("Dropping stream connection: write exceeded %.2fs", self._send_timeout)
            except Exception as e:
                logger.warning("Dropping stream connection: %s", e)
            else:
                return True

        if self.deregister(conn):
            await self._release(conn)
        return False

    @staticmethod
    async def _release(conn: StreamConnection) -> None:
        try:
            await conn.close()
        except Exception as e:
            # The transport is gone either way
            logger.debug("Error closing stream connection: %s", e)
