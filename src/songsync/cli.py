import json
import sys
from pathlib import Path

import click
import uvicorn

from .catalog import SongCatalog
from .client import LiveClient
from .config import Settings
from .exceptions import CatalogError, FetchError, InvalidArgumentError, ParseError, SongNotFoundError
from .log import setup_logging
from .models import ResolvedSong
from .render import render_song
from .server import create_app
from .stores.directory import DirectorySongStore

DEFAULT_SERVER = "http://localhost:5000"


def _catalog(songs_dir: str | None) -> SongCatalog:
    settings = Settings.from_env()
    return SongCatalog(DirectorySongStore(songs_dir or settings.songs_dir))


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


songs_dir_option = click.option(
    "--songs-dir", default=None, metavar="DIR", envvar="SONGSYNC_SONGS_DIR",
    help="Directory of <song>.json files (default: ./songs)",
)


@click.group()
def main() -> None:
    """Share a live song page with every connected client.

    \b
    Commands:
      serve   - run the HTTP/WebSocket server
      search  - list catalog songs whose name contains a query
      show    - print one song's chords and lyrics
      live    - show what a running server has live
    """


@main.command()
@songs_dir_option
@click.option("--host", default=None, envvar="HOST", help="Bind address (default: 0.0.0.0)")
@click.option("--port", default=None, type=int, envvar="PORT", help="Bind port (default: 5000)")
@click.option("--frontend-url", default=None, envvar="FRONTEND_URL",
              help="Allowed CORS origin (default: http://localhost:5173)")
@click.option("--log-level", default=None, envvar="SONGSYNC_LOG_LEVEL",
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
def serve(songs_dir: str | None, host: str | None, port: int | None,
          frontend_url: str | None, log_level: str | None) -> None:
    """Run the songsync server."""
    settings = Settings.from_env()
    if songs_dir:
        settings.songs_dir = Path(songs_dir)
    if host:
        settings.host = host
    if port:
        settings.port = port
    if frontend_url:
        settings.frontend_url = frontend_url
    if log_level:
        settings.log_level = log_level.upper()

    setup_logging(settings.log_level)
    click.echo(f"Server running on port {settings.port}")
    click.echo(f"Server accessible at: http://localhost:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())


@main.command()
@click.argument("query")
@songs_dir_option
def search(query: str, songs_dir: str | None) -> None:
    """List songs whose file name contains QUERY."""
    setup_logging("WARNING")
    try:
        songs = _catalog(songs_dir).search(query)
    except (InvalidArgumentError, CatalogError) as exc:
        _fail(str(exc))

    if not songs:
        click.echo(f"No songs match '{query}'.")
        return
    for song in songs:
        line = song.song_name
        if song.artist:
            line += f" - {song.artist}"
        click.echo(line)


@main.command()
@click.argument("name")
@songs_dir_option
def show(name: str, songs_dir: str | None) -> None:
    """Print the chords and lyrics of the song called NAME."""
    setup_logging("WARNING")
    try:
        song = _catalog(songs_dir).resolve(name)
    except SongNotFoundError:
        _fail(f"Song not found: {name}")
    except (InvalidArgumentError, ParseError, CatalogError) as exc:
        _fail(str(exc))

    click.echo(render_song(song), nl=False)


@main.command()
@click.option("--server", default=DEFAULT_SERVER, show_default=True, envvar="SONGSYNC_SERVER",
              help="Base URL of a running songsync server.")
def live(server: str) -> None:
    """Show the song that is currently live on SERVER."""
    try:
        with LiveClient(server) as client:
            payload = client.current_live()
    except FetchError as exc:
        msg = f"Could not fetch {exc.url}"
        if exc.status_code:
            msg += f" (HTTP {exc.status_code})"
        _fail(msg)

    if payload is None:
        click.echo("Nothing is live.")
    elif isinstance(payload, dict):
        click.echo(render_song(ResolvedSong.from_dict(payload)), nl=False)
    else:
        click.echo(json.dumps(payload))
