"""Song catalog: substring search and exact lookup over a :class:`SongStore`.

Two ways of finding a song, with deliberately different matching rules:

  search()  — case-insensitive substring of the identifier; used for listings.
              ``"grace"`` finds both ``amazing_grace`` and ``amazing_grace_live``.
  resolve() — exact match after normalizing case and treating ``_`` as a
              space; used to fetch one song. ``"Amazing Grace"``,
              ``"amazing_grace"`` and ``"AMAZING_GRACE"`` all find
              ``amazing_grace`` but ``"amazing"`` finds nothing.
"""

import logging

from .exceptions import CatalogError, InvalidArgumentError, ParseError, SongNotFoundError
from .extractor import extract
from .models import CatalogEntry, ResolvedSong, SongSummary
from .stores.base import SongStore

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Lowercase *name* and treat underscores as spaces."""
    return name.replace("_", " ").lower()


class SongCatalog:
    """Search and resolve songs held by a store."""

    def __init__(self, store: SongStore):
        self.store = store

    def entries(self) -> list[CatalogEntry]:
        """Return every catalog entry in store order.

        Raises CatalogError if the store cannot be enumerated.
        """
        return [CatalogEntry(identifier) for identifier in self.store.identifiers()]

    def search(self, query: str | None) -> list[SongSummary]:
        """Return summaries for every song whose identifier contains *query*.

        Documents that cannot be read or parsed are logged and left out, so
        one broken file never fails the whole listing.
        """
        if not query or not query.strip():
            raise InvalidArgumentError("name")

        needle = query.lower()
        summaries: list[SongSummary] = []
        for entry in self.entries():
            if needle not in entry.identifier.lower():
                continue
            try:
                document = self.store.load(entry.identifier)
            except (ParseError, CatalogError) as exc:
                logger.warning("Skipping %s: %s", entry.identifier, exc)
                continue
            summaries.append(
                SongSummary(
                    song_name=entry.display_name,
                    artist=document.artist,
                    image=document.image,
                )
            )
        logger.debug("Search %r matched %d song(s)", query, len(summaries))
        return summaries

    def find(self, name: str) -> CatalogEntry | None:
        """Return the first entry whose normalized identifier equals *name*'s."""
        key = normalize_name(name)
        for entry in self.entries():
            if normalize_name(entry.identifier) == key:
                return entry
        return None

    def resolve(self, name: str | None) -> ResolvedSong:
        """Load the song named *name* and extract its lyrics and chords.

        Raises InvalidArgumentError for an empty name, SongNotFoundError when
        nothing matches exactly, and ParseError when the matching document is
        malformed.
        """
        if not name or not name.strip():
            raise InvalidArgumentError("name")

        entry = self.find(name)
        if entry is None:
            raise SongNotFoundError(name)

        document = self.store.load(entry.identifier)
        lyrics, chords = extract(document)
        return ResolvedSong(
            song_name=entry.identifier,
            artist=document.artist,
            image=document.image,
            lyrics=lyrics,
            chords=chords,
        )
