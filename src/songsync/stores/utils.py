"""Shared parsing for song documents, whatever store they come from.

Two JSON shapes are accepted:

  bare list   — ``[[{"lyrics": ..., "chords": ...}, ...], ...]``
                sections only, no metadata
  object      — ``{"artist": ..., "image": ..., "sections": [[...], ...]}``
                sections plus metadata

Metadata falls back through alternative keys, taking the first non-empty
value: ``artist`` then ``performer``; ``image`` then ``artwork`` then ``cover``.
"""

import json

from ..exceptions import ParseError
from ..models import LineEntry, SongDocument

ARTIST_KEYS = ("artist", "performer")
IMAGE_KEYS = ("image", "artwork", "cover")


def first_present(data: dict, keys: tuple[str, ...]) -> str | None:
    """Return the first truthy value among *keys*, or None."""
    for key in keys:
        if data.get(key):
            return data[key]
    return None


def parse_document(identifier: str, text: str) -> SongDocument:
    """Decode raw JSON *text* into a :class:`SongDocument`.

    Raises ParseError when the text is not JSON or does not have the
    sections → line entries structure.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(identifier, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    if isinstance(data, list):
        raw_sections, metadata = data, {}
    elif isinstance(data, dict):
        raw_sections, metadata = data.get("sections", []), data
    else:
        raise ParseError(identifier, f"expected a list or object, got {type(data).__name__}")

    if not isinstance(raw_sections, list):
        raise ParseError(identifier, "'sections' must be a list")

    return SongDocument(
        identifier=identifier,
        sections=[_parse_section(identifier, i, raw) for i, raw in enumerate(raw_sections)],
        artist=first_present(metadata, ARTIST_KEYS),
        image=first_present(metadata, IMAGE_KEYS),
    )


def _parse_section(identifier: str, index: int, raw) -> list[LineEntry]:
    if not isinstance(raw, list):
        raise ParseError(identifier, f"section {index} is not a list")
    entries = []
    for raw_entry in raw:
        if not isinstance(raw_entry, dict):
            raise ParseError(identifier, f"section {index} contains a non-object line")
        entries.append(
            LineEntry(
                lyrics=_text(identifier, index, raw_entry.get("lyrics")),
                chords=_text(identifier, index, raw_entry.get("chords")),
            )
        )
    return entries


def _text(identifier: str, index: int, value) -> str | None:
    if value is None or isinstance(value, str):
        return value
    # bool is an int subclass but "False" is never a lyric
    if isinstance(value, bool):
        return None
    # Some hand-edited files store bare numbers, e.g. "chords": 7
    if isinstance(value, (int, float)):
        return str(value)
    raise ParseError(identifier, f"section {index} has a {type(value).__name__} where text was expected")
