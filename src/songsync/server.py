"""HTTP + WebSocket server.

Endpoints:
    GET  /songs?name=<query>   - substring search over the catalog
    GET  /song?name=<name>     - exact lookup with lyrics/chords
    GET  /current-song         - what is live right now (null when idle)
    GET  /health               - liveness probe
    WS   /ws                   - live session events (startLivePage / quitSession)
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from .catalog import SongCatalog
from .config import Settings
from .connections import Connection
from .events import (
    QUIT_SESSION,
    START_LIVE_PAGE,
    ClientMessage,
    Connected,
    Disconnected,
    Fetched,
    GoLive,
    Quit,
)
from .exceptions import CatalogError, InvalidArgumentError, ParseError, SongNotFoundError
from .live import LiveSession
from .stores.directory import DirectorySongStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    catalog: SongCatalog | None = None,
    session: LiveSession | None = None,
) -> FastAPI:
    """Build the application. Pass *catalog* / *session* to override the defaults."""
    settings = settings or Settings.from_env()
    catalog = catalog or SongCatalog(DirectorySongStore(settings.songs_dir))
    session = session or LiveSession()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await session.start()
        logger.info("Serving songs from %s", catalog.store.location)
        try:
            yield
        finally:
            await session.stop()

    app = FastAPI(title="songsync", lifespan=lifespan)
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # ─────────────────────────────────────────────────────────────────
    # Errors
    # ─────────────────────────────────────────────────────────────────

    @app.exception_handler(InvalidArgumentError)
    async def invalid_argument(request: Request, exc: InvalidArgumentError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(SongNotFoundError)
    async def song_not_found(request: Request, exc: SongNotFoundError):
        return JSONResponse(status_code=404, content={"error": "Song not found"})

    @app.exception_handler(ParseError)
    async def parse_error(request: Request, exc: ParseError):
        logger.error("Error fetching song: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Failed to fetch song"})

    @app.exception_handler(CatalogError)
    async def catalog_error(request: Request, exc: CatalogError):
        logger.error("Error reading songs: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Failed to read songs"})

    # ─────────────────────────────────────────────────────────────────
    # Catalog
    # ─────────────────────────────────────────────────────────────────

    @app.get("/songs")
    async def list_songs(name: str | None = None):
        songs = await run_in_threadpool(catalog.search, name)
        return {
            "searchTerm": name,
            "count": len(songs),
            "songs": [song.to_dict() for song in songs],
        }

    @app.get("/song")
    async def get_song(name: str | None = None):
        logger.info("Received song request for: %s", name)
        song = (await run_in_threadpool(catalog.resolve, name)).to_dict()
        await session.submit(Fetched(song, mark_live=settings.fetch_marks_live))
        await session.drain()
        return {"song": song}

    @app.get("/current-song")
    async def current_song():
        return {"song": session.state.get_live()}

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "songsDir": catalog.store.location,
            "connections": len(session.registry),
            "live": session.state.is_live,
        }

    # ─────────────────────────────────────────────────────────────────
    # Live socket
    # ─────────────────────────────────────────────────────────────────

    @app.websocket("/ws")
    async def live_socket(websocket: WebSocket):
        connection = Connection(websocket, outbox_size=settings.outbox_size)
        # Registered before the handshake completes so the client cannot
        # send anything the session would process ahead of its own Connected.
        await session.submit(Connected(connection))
        writer = None
        try:
            await websocket.accept()
            writer = asyncio.create_task(connection.pump())
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000))
                raw = frame.get("text")
                if raw is None:
                    logger.warning("Ignoring non-text frame from %s", connection.id)
                    continue
                await _route_message(session, connection, raw)
        except WebSocketDisconnect:
            pass
        finally:
            await session.submit(Disconnected(connection.id))
            if writer is not None:
                writer.cancel()

    return app


async def _route_message(session: LiveSession, connection: Connection, raw: str) -> None:
    try:
        message = ClientMessage.model_validate_json(raw)
    except ValidationError:
        logger.warning("Ignoring malformed message from %s: %.200s", connection.id, raw)
        return

    if message.event == START_LIVE_PAGE:
        await session.submit(GoLive(connection.id, message.data))
    elif message.event == QUIT_SESSION:
        await session.submit(Quit(connection.id))
    else:
        logger.warning("Ignoring unknown event %r from %s", message.event, connection.id)
