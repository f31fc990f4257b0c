from abc import ABC, abstractmethod

from ..models import SongDocument
from .utils import parse_document


class SongStore(ABC):
    """Abstract base class for song document stores."""

    @abstractmethod
    def identifiers(self) -> list[str]:
        """Return every song identifier in the store, in a stable order.

        Raises CatalogError if the store cannot be enumerated.
        """

    @abstractmethod
    def read(self, identifier: str) -> str:
        """Return the raw JSON text of the document named *identifier*.

        Raises CatalogError on storage-level failures.
        """

    @property
    def location(self) -> str:
        """Human-readable description of where the documents live."""
        return type(self).__name__

    def load(self, identifier: str) -> SongDocument:
        """Convenience method: read + parse.

        Raises ParseError if the document is not a valid song.
        """
        return parse_document(identifier, self.read(identifier))
