import logging
from typing import Any

from .connections import ConnectionRegistry
from .events import make_message

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """Fan one event out to the connections in a registry.

    Both primitives take a snapshot of the registry when called: a client
    that connects afterwards does not receive that dispatch. Delivery is
    fire-and-forget and never raises.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    def broadcast_to_all(self, event: str, payload: Any = None) -> int:
        """Deliver to every registered connection, sender included."""
        return self._dispatch(event, payload, exclude=None)

    def broadcast_excluding_sender(self, event: str, payload: Any, sender_id: str) -> int:
        """Deliver to every registered connection except *sender_id*."""
        return self._dispatch(event, payload, exclude=sender_id)

    def _dispatch(self, event: str, payload: Any, exclude: str | None) -> int:
        message = make_message(event, payload)
        delivered = 0
        for connection in self.registry.snapshot():
            if connection.id == exclude:
                continue
            if connection.deliver(message):
                delivered += 1
        logger.debug("Dispatched %s to %d connection(s)", event, delivered)
        return delivered
