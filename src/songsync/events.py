"""Event names and message shapes exchanged over the live socket.

Wire format, both directions::

    {"event": "startLivePage", "data": {...song...}}
    {"event": "quitSession", "data": null}

Inside the server the socket handler turns messages into one of a closed set
of session events (:data:`SessionEvent`) that the :class:`~songsync.live.LiveSession`
actor processes in arrival order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel

from .connections import Connection

START_LIVE_PAGE = "startLivePage"
QUIT_SESSION = "quitSession"

CLIENT_EVENTS = frozenset({START_LIVE_PAGE, QUIT_SESSION})


class ClientMessage(BaseModel):
    """A message received from a client."""

    event: str
    data: Any = None


def make_message(event: str, payload: Any = None) -> dict:
    return {"event": event, "data": payload}


# ---------------------------------------------------------------------------
# Session events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Connected:
    connection: Connection


@dataclass(frozen=True)
class Disconnected:
    connection_id: str


@dataclass(frozen=True)
class GoLive:
    """A client started a live page; *payload* is forwarded untouched."""

    sender_id: str
    payload: Any


@dataclass(frozen=True)
class Quit:
    sender_id: str


@dataclass(frozen=True)
class Fetched:
    """A song was fetched by name; it becomes live only when *mark_live* is set."""

    song: Any
    mark_live: bool = False


SessionEvent = Union[Connected, Disconnected, GoLive, Quit, Fetched]
