"""Store backed by a flat directory of ``<identifier>.json`` files.

Layout::

    songs/
        amazing_grace.json
        amazing_grace_live.json
        wonderwall.json

Sub-directories and files without the ``.json`` suffix are ignored.
"""

from pathlib import Path

from ..exceptions import CatalogError, ParseError
from .base import SongStore

SONG_SUFFIX = ".json"


class DirectorySongStore(SongStore):
    """Songs stored as JSON files in a single directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    @property
    def location(self) -> str:
        return str(self.root)

    def identifiers(self) -> list[str]:
        try:
            paths = sorted(self.root.iterdir())
        except OSError as exc:
            raise CatalogError(f"cannot list {self.root}: {exc}") from exc
        return [p.stem for p in paths if p.suffix == SONG_SUFFIX and p.is_file()]

    def read(self, identifier: str) -> str:
        path = self.root / f"{identifier}{SONG_SUFFIX}"
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogError(f"cannot read {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ParseError(identifier, f"not valid UTF-8 ({exc.reason})") from exc
