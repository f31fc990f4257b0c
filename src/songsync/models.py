from dataclasses import dataclass, field


@dataclass
class LineEntry:
    """A single line of a song section.

    Either field may be missing: instrumental passages usually carry chords
    only, spoken or a cappella lines carry lyrics only.
    """

    lyrics: str | None = None
    chords: str | None = None


@dataclass
class SongDocument:
    """A song file as stored in the catalog, before lyrics/chords extraction."""

    identifier: str  # storage name without the .json suffix, e.g. "amazing_grace"
    sections: list[list[LineEntry]] = field(default_factory=list)
    artist: str | None = None
    image: str | None = None


@dataclass
class CatalogEntry:
    """An identifier in the catalog plus its human-readable form."""

    identifier: str

    @property
    def display_name(self) -> str:
        return self.identifier.replace("_", " ")


@dataclass
class SongSummary:
    """One search hit, as returned by the song listing."""

    song_name: str
    artist: str | None = None
    image: str | None = None

    def to_dict(self) -> dict:
        return {"songName": self.song_name, "artist": self.artist, "image": self.image}


@dataclass
class ResolvedSong:
    """Rendering-ready song: lyrics[i] and chords[i] describe the same line."""

    song_name: str
    artist: str | None = None
    image: str | None = None
    lyrics: list[str] = field(default_factory=list)
    chords: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "songName": self.song_name,
            "artist": self.artist,
            "image": self.image,
            "lyrics": list(self.lyrics),
            "chords": list(self.chords),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResolvedSong":
        """Build a song from a wire payload, tolerating missing keys.

        Live payloads come straight from a client, so a title may arrive as
        ``title`` instead of ``songName`` and either sequence may be absent.
        """
        lyrics = _text_list(data.get("lyrics"))
        chords = _text_list(data.get("chords"))
        # Pad the shorter sequence so the two stay index-aligned
        width = max(len(lyrics), len(chords))
        lyrics += [""] * (width - len(lyrics))
        chords += [""] * (width - len(chords))
        return cls(
            song_name=str(data.get("songName") or data.get("title") or ""),
            artist=_optional_text(data.get("artist")),
            image=_optional_text(data.get("image")),
            lyrics=lyrics,
            chords=chords,
        )


def _text_list(value) -> list[str]:
    # Only a JSON array is a line sequence; a bare string is not split per character
    if not isinstance(value, list):
        return []
    return [str(item) if item else "" for item in value]


def _optional_text(value) -> str | None:
    return str(value) if value else None
