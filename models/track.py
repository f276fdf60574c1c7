from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"
TRACK_NAME_SEPARATOR = " - "


@dataclass(frozen=True)
class CoverArt:
    """First embedded picture of a track, ready for display."""
    format: str
    base64_data: str


@dataclass
class TrackMetadata:
    """Normalized tag data for a track.

    Every field carries a usable default so display code only ever has to
    check ``cover_art``.
    """
    title: str
    artist: str = UNKNOWN_ARTIST
    album: str = UNKNOWN_ALBUM
    year: str = ""
    genre: str = ""
    duration_seconds: float = 0.0
    bitrate: int = 0
    sample_rate: int = 0
    channels: int = 0
    cover_art: CoverArt | None = None

    @classmethod
    def defaults(cls, path: str | Path) -> TrackMetadata:
        """Build the full-default record for a file path.

        Args:
            path: Audio file path; its stem becomes the title.

        Returns:
            TrackMetadata with every field at its default.
        """
        return cls(title=Path(path).stem)


@dataclass
class TrackEntry:
    """A playable file in the currently browsed folder."""
    path: str
    display_name: str
    size_bytes: int
    modified_at: datetime
    metadata: TrackMetadata | None = field(default=None, compare=False)

    @property
    def stem(self) -> str:
        return Path(self.display_name).stem

    @property
    def title(self) -> str:
        return self.metadata.title if self.metadata else self.stem

    @property
    def artist(self) -> str:
        return self.metadata.artist if self.metadata else UNKNOWN_ARTIST

    @property
    def duration_seconds(self) -> float:
        return self.metadata.duration_seconds if self.metadata else 0.0


def parse_track_name(file_name: str) -> tuple[str, str, bool]:
    """Guess artist and title from an "Artist - Title.ext" file name.

    Args:
        file_name: Base name of the file, with or without extension.

    Returns:
        Tuple of (artist, title, lyrics_lookup). lyrics_lookup is False when
        no artist could be recovered from the name.
    """
    stem = Path(file_name).stem
    parts = stem.split(TRACK_NAME_SEPARATOR)

    if len(parts) > 1:
        return parts[0], parts[1], True

    return UNKNOWN_ARTIST, stem or UNKNOWN_TITLE, False


@dataclass(frozen=True)
class NowPlaying:
    """Outbound description of the track that just started playing."""
    entry: TrackEntry
    title: str
    artist: str
    album: str = UNKNOWN_ALBUM
    duration_seconds: float = 0.0
    cover_art: CoverArt | None = None
    lyrics_lookup: bool = True
    degraded: bool = False

    @property
    def message(self) -> str:
        return f"{self.title} by {self.artist}"


def describe_track(entry: TrackEntry) -> NowPlaying:
    """Build the now-playing record for an entry.

    Uses the resolved metadata when present and falls back to parsing the
    file name otherwise. The fallback record starts from "Unknown Title" and
    "Unknown Artist" and is marked degraded.
    """
    metadata = entry.metadata
    if metadata is not None:
        artist = metadata.artist or UNKNOWN_ARTIST
        return NowPlaying(
            entry=entry,
            title=metadata.title or entry.stem,
            artist=artist,
            album=metadata.album,
            duration_seconds=metadata.duration_seconds,
            cover_art=metadata.cover_art,
            lyrics_lookup=artist != UNKNOWN_ARTIST,
        )

    artist, title, lyrics_lookup = parse_track_name(entry.display_name)
    return NowPlaying(
        entry=entry,
        title=title or UNKNOWN_TITLE,
        artist=artist or UNKNOWN_ARTIST,
        lyrics_lookup=lyrics_lookup,
        degraded=True,
    )


def format_time(seconds: float) -> str:
    """Format seconds as m:ss, flooring partial seconds."""
    if seconds is None or seconds < 0 or math.isnan(seconds):
        seconds = 0
    minutes = int(seconds // 60)
    remaining = int(seconds % 60)
    return f"{minutes}:{remaining:02d}"


def format_size(size_bytes: int) -> str:
    """Format a byte count with a base-1024 unit, e.g. "1.5 KB"."""
    if size_bytes <= 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB", "TB"]
    exponent = 0
    value = float(size_bytes)
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1

    value = round(value, 2)
    if value == int(value):
        return f"{int(value)} {units[exponent]}"
    return f"{value:g} {units[exponent]}"
