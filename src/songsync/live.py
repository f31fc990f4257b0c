"""The live session actor.

All changes to who is connected and what is live go through one queue and
are applied one at a time by a single task::

    socket handler ──submit()──▶ queue ──run()──▶ handle()
                                                   ├─ ConnectionRegistry
                                                   ├─ SessionState
                                                   └─ BroadcastDispatcher

``handle()`` never awaits, so an event is fully applied (state updated and
messages queued on every recipient's outbox) before the next one starts.
"""

import asyncio
import contextlib
import logging

from .connections import ConnectionRegistry
from .dispatcher import BroadcastDispatcher
from .events import (
    QUIT_SESSION,
    START_LIVE_PAGE,
    Connected,
    Disconnected,
    Fetched,
    GoLive,
    Quit,
    SessionEvent,
)
from .state import SessionState

logger = logging.getLogger(__name__)


class LiveSession:
    """Serialized owner of the connection registry and the session state."""

    def __init__(
        self,
        state: SessionState | None = None,
        registry: ConnectionRegistry | None = None,
    ):
        self.state = state or SessionState()
        self.registry = registry or ConnectionRegistry()
        self.dispatcher = BroadcastDispatcher(self.registry)
        self._queue: asyncio.Queue[SessionEvent] = asyncio.Queue()
        self._task: asyncio.Task | None = None

    # --- Lifecycle ---

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self.run(), name="live-session")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def submit(self, event: SessionEvent) -> None:
        await self._queue.put(event)

    async def drain(self) -> None:
        """Wait until every submitted event has been handled."""
        await self._queue.join()

    async def run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                self.handle(event)
            except Exception:
                logger.exception("Failed to handle %r", event)
            finally:
                self._queue.task_done()

    # --- Event handling ---

    def handle(self, event: SessionEvent) -> None:
        if isinstance(event, Connected):
            self.registry.add(event.connection)
        elif isinstance(event, Disconnected):
            self.registry.remove(event.connection_id)
        elif isinstance(event, GoLive):
            self._go_live(event)
        elif isinstance(event, Quit):
            self._quit(event)
        elif isinstance(event, Fetched):
            self._fetched(event)
        else:
            raise TypeError(f"Unknown session event: {event!r}")

    def _go_live(self, event: GoLive) -> None:
        self.state.set_live(event.payload)
        count = self.dispatcher.broadcast_excluding_sender(
            START_LIVE_PAGE, event.payload, event.sender_id
        )
        logger.info("Received startLivePage from %s, sent to %d client(s)", event.sender_id, count)

    def _fetched(self, event: Fetched) -> None:
        self.state.remember_fetched(event.song)
        if event.mark_live:
            self.state.set_live(event.song)

    def _quit(self, event: Quit) -> None:
        self.state.clear()
        count = self.dispatcher.broadcast_to_all(QUIT_SESSION, None)
        logger.info("Received quitSession from %s, sent to %d client(s)", event.sender_id, count)
