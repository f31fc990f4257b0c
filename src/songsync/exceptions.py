class SongSyncError(Exception):
    """Base exception for songsync."""


class InvalidArgumentError(SongSyncError):
    """Raised when a required query parameter is missing or empty."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Song {parameter} parameter is required")


class SongNotFoundError(SongSyncError):
    """Raised when no catalog entry matches an exact lookup."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Song not found: {name}")


class ParseError(SongSyncError):
    """Raised when a song document cannot be decoded into sections."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Parse error for {identifier}: {reason}")


class CatalogError(SongSyncError):
    """Raised when the song store cannot be enumerated or read."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Catalog error: {reason}")


class FetchError(SongSyncError):
    """Raised when a request to a songsync server fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")
