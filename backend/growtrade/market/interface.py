"""Abstract interface for streaming connections."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StreamConnection(ABC):
    """Contract for a duplex channel that receives price snapshots.

    The BroadcastHub only ever writes text frames and closes transports; it
    never reads. Each instance is one transport, hashed by identity, so the
    same object is the handle for register/deregister.

    Lifecycle:
        conn = WebSocketConnection(websocket)
        hub.register(conn)
        await hub.send_to(conn, table.snapshot())
        # ... client connected ...
        hub.deregister(conn)
        await conn.close()
    """

    @abstractmethod
    async def send_text(self, data: str) -> None:
        """Write one text frame.

        Raises if the transport is closed or the write fails. Callers bound
        the wait themselves.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the transport.

        Safe to call multiple times. After close(), send_text() must raise.
        """
