from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.widgets import Static

from models.track import NowPlaying
from services.lyrics_service import LyricsService

logger = logging.getLogger(__name__)

SELECT_TRACK_MESSAGE = "Select a track to view lyrics"
LOADING_MESSAGE = "Loading lyrics..."
UNAVAILABLE_MESSAGE = "Lyrics not available for this track"


class LyricsView(Container):
    """Lyrics pane for the track that is currently playing."""

    def __init__(self, lyrics_service: LyricsService, **kwargs) -> None:
        super().__init__(**kwargs)
        self._lyrics_service = lyrics_service
        self._current_path: str | None = None

    def compose(self) -> ComposeResult:
        yield Static("📝 Lyrics", id="lyrics-panel-title")
        with VerticalScroll(id="lyrics-scroll"):
            yield Static(SELECT_TRACK_MESSAGE, id="lyrics-content")

    def show_message(self, message: str) -> None:
        try:
            self.query_one("#lyrics-content", Static).update(message)
            self.query_one("#lyrics-scroll", VerticalScroll).scroll_home(animate=False)
        except Exception as e:
            logger.error(f"Failed to update lyrics pane: {e}")

    def clear(self) -> None:
        self._current_path = None
        self.show_message(SELECT_TRACK_MESSAGE)

    def load_for(self, now_playing: NowPlaying) -> None:
        """Start a lyrics lookup for a newly playing track.

        Tracks without a known artist are never looked up.
        """
        self._current_path = now_playing.entry.path

        if not now_playing.lyrics_lookup:
            self.show_message(UNAVAILABLE_MESSAGE)
            return

        self.show_message(LOADING_MESSAGE)
        self.run_worker(
            self._fetch(now_playing),
            exclusive=True,
            group="lyrics",
        )

    async def _fetch(self, now_playing: NowPlaying) -> None:
        try:
            lyrics = await self._lyrics_service.get_lyrics(now_playing.artist, now_playing.title)
        except Exception as e:
            logger.error(f"Error fetching lyrics: {e}", exc_info=True)
            lyrics = None

        if self._current_path != now_playing.entry.path:
            return

        self.show_message(lyrics if lyrics is not None else UNAVAILABLE_MESSAGE)
