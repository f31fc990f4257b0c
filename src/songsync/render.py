"""Plain-text rendering of a resolved song.

Chords are printed on their own line above the lyric they belong to::

    amazing grace
    by John Newton

    G          C      G
    Amazing grace, how sweet the sound
            D
    That saved a wretch like me

Usage::

    from songsync.render import render_song
    click.echo(render_song(song), nl=False)
"""

from .models import ResolvedSong


def render_song(song: ResolvedSong) -> str:
    """Return the text for *song*, ending with a single newline."""
    parts: list[str] = [song.song_name.replace("_", " ")]
    if song.artist:
        parts.append(f"by {song.artist}")
    parts.append("")

    for lyric, chord in zip(song.lyrics, song.chords):
        parts.extend(_render_line(lyric, chord))

    return "\n".join(parts).rstrip("\n") + "\n"


def _render_line(lyric: str, chord: str) -> list[str]:
    lines = [text.rstrip() for text in (chord, lyric) if text.strip()]
    # A line with neither chords nor lyrics is a spacer between sections
    return lines or [""]
