"""Session state: the single process-wide "what is live right now" slot.

Two states::

    Idle  (get_live() is None)  --set_live-->  Live
    Live                         --set_live-->  Live   (overwrite, last write wins)
    Live                         --clear----->  Idle
    Idle                         --clear----->  Idle   (no-op)

The song most recently fetched by name is kept in a separate slot so that a
client browsing the catalog never changes what late joiners see as live.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class SessionState:
    """Owner of the live song and the last fetched song.

    The payloads are stored as given (JSON-compatible values); no validation
    happens here.
    """

    def __init__(self) -> None:
        self._live: Any = None
        self._last_fetched: Any = None

    @property
    def is_live(self) -> bool:
        return self._live is not None

    def get_live(self) -> Any:
        """Return the live song, or None when Idle."""
        return self._live

    def set_live(self, song: Any) -> None:
        self._live = song
        logger.debug("Session is live")

    def clear(self) -> None:
        if self._live is not None:
            logger.debug("Session cleared")
        self._live = None

    def last_fetched(self) -> Any:
        return self._last_fetched

    def remember_fetched(self, song: Any) -> None:
        self._last_fetched = song
