from __future__ import annotations

import asyncio
import base64
import logging
import re
from pathlib import Path
from typing import Any

from mutagen import File as MutagenFile
from mutagen.flac import Picture
from mutagen.id3 import ID3

from models.track import CoverArt, TrackMetadata, UNKNOWN_ALBUM, UNKNOWN_ARTIST

logger = logging.getLogger(__name__)

ID3_FRAMES = {
    'title': ('TIT2',),
    'artist': ('TPE1', 'TPE2'),
    'album': ('TALB',),
    'date': ('TDRC', 'TYER', 'TDOR'),
    'genre': ('TCON',),
}

VORBIS_KEYS = {
    'title': ('title',),
    'artist': ('artist', 'albumartist'),
    'album': ('album',),
    'date': ('date', 'year'),
    'genre': ('genre',),
}

YEAR_PATTERN = re.compile(r'\d{4}')


def resolve_metadata(path: str | Path) -> TrackMetadata:
    """Read tags and stream info from an audio file.

    Never raises: any read or parse failure produces the default record, so
    a broken file cannot block browsing or playback.

    Args:
        path: Path to audio file.

    Returns:
        TrackMetadata with every missing field at its default.
    """
    file_path = Path(path)

    try:
        audio = MutagenFile(file_path)

        if audio is None:
            raise ValueError(f"Unsupported or unreadable audio file: {file_path}")

        tags = audio.tags
        info = audio.info

        title = _first_tag(tags, 'title') or file_path.stem
        artist = _first_tag(tags, 'artist') or UNKNOWN_ARTIST
        album = _first_tag(tags, 'album') or UNKNOWN_ALBUM
        year = _parse_year(_first_tag(tags, 'date'))
        genre = _first_tag(tags, 'genre')

        return TrackMetadata(
            title=title,
            artist=artist,
            album=album,
            year=year,
            genre=genre,
            duration_seconds=float(getattr(info, 'length', 0) or 0),
            bitrate=int(getattr(info, 'bitrate', 0) or 0),
            sample_rate=int(getattr(info, 'sample_rate', 0) or 0),
            channels=int(getattr(info, 'channels', 0) or 0),
            cover_art=_extract_cover_art(audio),
        )

    except Exception as e:
        logger.warning(f"Could not extract metadata from {file_path}: {e}")
        return TrackMetadata.defaults(file_path)


async def resolve_metadata_async(path: str | Path) -> TrackMetadata:
    """Resolve metadata off the event loop."""
    return await asyncio.to_thread(resolve_metadata, path)


def _first_tag(tags: Any, field: str) -> str:
    """Return the first non-empty value of a logical tag field.

    Handles ID3 frames (MP3, WAV) and Vorbis comments (Ogg). List-valued
    tags contribute only their first entry.
    """
    if not tags:
        return ""

    if isinstance(tags, ID3):
        for frame_id in ID3_FRAMES[field]:
            frame = tags.get(frame_id)
            if frame is None:
                continue
            values = getattr(frame, 'genres', None) if field == 'genre' else None
            if not values:
                values = getattr(frame, 'text', None) or []
            for value in values:
                text = str(value).strip()
                if text:
                    return text
        return ""

    for key in VORBIS_KEYS[field]:
        values = tags.get(key)
        if not values:
            continue
        if isinstance(values, str):
            values = [values]
        for value in values:
            text = str(value).strip()
            if text:
                return text
    return ""


def _parse_year(date_text: str) -> str:
    match = YEAR_PATTERN.search(date_text or "")
    return match.group(0) if match else ""


def _extract_cover_art(audio: Any) -> CoverArt | None:
    """Return the first embedded picture as base64, or None."""
    tags = audio.tags

    if isinstance(tags, ID3):
        pictures = tags.getall('APIC')
        if pictures:
            return _encode_picture(pictures[0].mime, pictures[0].data)
        return None

    pictures = getattr(audio, 'pictures', None)
    if pictures:
        return _encode_picture(pictures[0].mime, pictures[0].data)

    if tags:
        for encoded in tags.get('metadata_block_picture') or []:
            picture = Picture(base64.b64decode(encoded))
            return _encode_picture(picture.mime, picture.data)

    return None


def _encode_picture(mime: str, data: bytes) -> CoverArt:
    return CoverArt(
        format=mime or 'image/jpeg',
        base64_data=base64.b64encode(data).decode('ascii'),
    )
