"""Runtime configuration.

Values come from the environment (a ``.env`` file in the working directory is
loaded first) and can be overridden by CLI options:

    SONGSYNC_SONGS_DIR         directory of <song>.json files   (songs)
    HOST                       bind address                      (0.0.0.0)
    PORT                       bind port                         (5000)
    FRONTEND_URL               allowed CORS origin               (http://localhost:5173)
    SONGSYNC_LOG_LEVEL         logging level name                (INFO)
    SONGSYNC_FETCH_MARKS_LIVE  fetching a song also makes it live (false)
    SONGSYNC_OUTBOX_SIZE       queued messages per client        (64)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .connections import DEFAULT_OUTBOX_SIZE

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    songs_dir: Path = Path("songs")
    host: str = "0.0.0.0"
    port: int = 5000
    frontend_url: str = "http://localhost:5173"
    log_level: str = "INFO"
    fetch_marks_live: bool = False
    outbox_size: int = DEFAULT_OUTBOX_SIZE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from *environ* (defaults to ``os.environ`` after loading .env)."""
        if environ is None:
            load_dotenv()
            environ = os.environ
        defaults = cls()
        return cls(
            songs_dir=Path(environ.get("SONGSYNC_SONGS_DIR", defaults.songs_dir)),
            host=environ.get("HOST", defaults.host),
            port=int(environ.get("PORT", defaults.port)),
            frontend_url=environ.get("FRONTEND_URL", defaults.frontend_url),
            log_level=environ.get("SONGSYNC_LOG_LEVEL", defaults.log_level).upper(),
            fetch_marks_live=environ.get("SONGSYNC_FETCH_MARKS_LIVE", "").lower() in _TRUTHY,
            outbox_size=max(1, int(environ.get("SONGSYNC_OUTBOX_SIZE", defaults.outbox_size))),
        )
