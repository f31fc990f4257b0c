"""Lyrics/chords extraction.

A song document stores its lines grouped by section::

    [
        [{"lyrics": "Amazing grace", "chords": "G"}, {"lyrics": "how sweet"}],
        [{"chords": "D G"}],
    ]

Clients render a flat, index-aligned view instead::

    lyrics = ["Amazing grace", "how sweet", ""]
    chords = ["G",             "",          "D G"]
"""

from .models import LineEntry, SongDocument


def flatten_sections(sections: list[list[LineEntry]]) -> list[LineEntry]:
    """Collapse sections into one ordered list of line entries (depth 1)."""
    return [entry for section in sections for entry in section]


def extract_lyrics_and_chords(sections: list[list[LineEntry]]) -> tuple[list[str], list[str]]:
    """Return ``(lyrics, chords)`` with one element per flattened line entry.

    Missing fields become empty strings, so both lists always have the same
    length as the flattened entry list.
    """
    flat = flatten_sections(sections)
    lyrics = [entry.lyrics or "" for entry in flat]
    chords = [entry.chords or "" for entry in flat]
    return lyrics, chords


def extract(document: SongDocument) -> tuple[list[str], list[str]]:
    """Convenience wrapper around :func:`extract_lyrics_and_chords`."""
    return extract_lyrics_and_chords(document.sections)
