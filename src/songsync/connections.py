"""Connected clients.

Every WebSocket client is wrapped in a :class:`Connection` that owns a
bounded outbox. The dispatcher only ever calls :meth:`Connection.deliver`,
which never blocks; a per-connection writer task (:meth:`Connection.pump`)
drains the outbox onto the socket. A slow or dead client therefore loses its
own messages and nobody else's.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_OUTBOX_SIZE = 64


class Transport(Protocol):
    """The part of a WebSocket a connection needs."""

    async def send_json(self, data: Any) -> None: ...


class Connection:
    """A connected client: a transport plus a generated identifier."""

    def __init__(
        self,
        transport: Transport,
        connection_id: str | None = None,
        outbox_size: int = DEFAULT_OUTBOX_SIZE,
    ):
        self.id = connection_id or uuid.uuid4().hex
        self._transport = transport
        # maxsize=0 would make the queue unbounded
        self._outbox: asyncio.Queue[dict] = asyncio.Queue(maxsize=max(1, outbox_size))
        self.closed = False

    def __repr__(self) -> str:
        return f"Connection({self.id!r})"

    def deliver(self, message: dict) -> bool:
        """Queue *message* for sending. Returns False if it was dropped."""
        if self.closed:
            return False
        try:
            self._outbox.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Outbox full for %s, dropping %s", self.id, message.get("event"))
            return False
        return True

    async def pump(self) -> None:
        """Send queued messages until the connection is closed or fails."""
        while not self.closed:
            message = await self._outbox.get()
            try:
                await self._transport.send_json(message)
            except Exception as exc:
                logger.info("Send to %s failed (%s); closing", self.id, exc)
                self.close()

    def close(self) -> None:
        self.closed = True


class ConnectionRegistry:
    """Currently connected clients, keyed by connection id."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def add(self, connection: Connection) -> None:
        self._connections[connection.id] = connection
        logger.info("A user connected: %s (%d total)", connection.id, len(self))

    def remove(self, connection_id: str) -> Connection | None:
        """Forget a connection; removing an unknown id is a no-op."""
        connection = self._connections.pop(connection_id, None)
        if connection is not None:
            connection.close()
            logger.info("A user disconnected: %s (%d total)", connection_id, len(self))
        return connection

    def get(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def snapshot(self) -> list[Connection]:
        """Connections registered right now, in registration order."""
        return list(self._connections.values())
