from __future__ import annotations

import asyncio
import logging
import os
from urllib.parse import quote

import requests

from models.track import UNKNOWN_ARTIST

logger = logging.getLogger(__name__)

LYRICS_NOT_FOUND = "Lyrics not found"
DEFAULT_LYRICS_URL = "https://api.lyrics.ovh/v1"
DEFAULT_TIMEOUT = 10.0


class LyricsService:
    """Looks up plain-text lyrics by artist and title."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            base_url: Lyrics API root. Defaults to FOLDERPLAY_LYRICS_URL or lyrics.ovh.
            timeout: Request timeout in seconds. Defaults to FOLDERPLAY_LYRICS_TIMEOUT or 10.
            session: Optional requests session to reuse connections.
        """
        self.base_url = (base_url or os.environ.get('FOLDERPLAY_LYRICS_URL') or DEFAULT_LYRICS_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else _env_float('FOLDERPLAY_LYRICS_TIMEOUT', DEFAULT_TIMEOUT)
        self._http = session or requests

    def lyrics_url(self, artist: str, title: str) -> str:
        return f"{self.base_url}/{quote(artist, safe='')}/{quote(title, safe='')}"

    def fetch_lyrics(self, artist: str, title: str) -> str:
        """Fetch lyrics with one HTTP request.

        Args:
            artist: Track artist.
            title: Track title.

        Returns:
            Lyrics text, or LYRICS_NOT_FOUND on any failure.
        """
        url = self.lyrics_url(artist, title)

        try:
            response = self._http.get(url, timeout=self.timeout)
            response.raise_for_status()
            lyrics = response.json().get('lyrics')
        except requests.RequestException as e:
            logger.error(f"Error fetching lyrics for {artist} - {title}: {e}")
            return LYRICS_NOT_FOUND
        except (ValueError, AttributeError) as e:
            logger.error(f"Malformed lyrics response for {artist} - {title}: {e}")
            return LYRICS_NOT_FOUND

        if not isinstance(lyrics, str) or not lyrics.strip():
            logger.info(f"No lyrics in response for {artist} - {title}")
            return LYRICS_NOT_FOUND

        return lyrics.strip()

    async def get_lyrics(self, artist: str, title: str) -> str | None:
        """Fetch lyrics off the event loop.

        Returns:
            Lyrics text or LYRICS_NOT_FOUND; None when the artist is unknown
            and no lookup was made.
        """
        if not artist or artist == UNKNOWN_ARTIST:
            logger.debug(f"Skipping lyrics lookup for unknown artist: {title}")
            return None

        return await asyncio.to_thread(self.fetch_lyrics, artist, title)


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        logger.warning(f"Ignoring invalid {name}: {os.environ.get(name)!r}")
        return default
