"""Small HTTP client for a running songsync server.

Usage::

    with LiveClient("http://localhost:5000") as client:
        song = client.current_live()   # None when nothing is live
"""

from typing import Any

import httpx

from .exceptions import FetchError, SongNotFoundError
from .models import ResolvedSong, SongSummary


class LiveClient:
    """Query the catalog and live session of a songsync server."""

    def __init__(self, base_url: str, timeout: float = 15, transport: httpx.BaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "LiveClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def current_live(self) -> Any:
        """Return the live payload, or None when the session is idle."""
        return self._get("/current-song").json().get("song")

    def search(self, name: str) -> list[SongSummary]:
        data = self._get("/songs", params={"name": name}).json()
        return [
            SongSummary(song_name=item.get("songName") or "", artist=item.get("artist"), image=item.get("image"))
            for item in data.get("songs", [])
        ]

    def get_song(self, name: str) -> ResolvedSong:
        resp = self._get("/song", params={"name": name}, allow_404=True)
        if resp.status_code == 404:
            raise SongNotFoundError(name)
        return ResolvedSong.from_dict(resp.json()["song"])

    def _get(self, path: str, params: dict | None = None, allow_404: bool = False) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self._http.get(path, params=params)
        except httpx.RequestError as exc:
            raise FetchError(url, 0) from exc
        if resp.status_code == 404 and allow_404:
            return resp
        if resp.status_code != 200:
            raise FetchError(url, resp.status_code)
        return resp
