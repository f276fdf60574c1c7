from textual.app import ComposeResult
from textual.containers import Container, Vertical
from textual.widgets import Static
from rich.text import Text

from models.session import PlayerSession
from models.track import format_time
from styles import COLOR_BASS, COLOR_PRIMARY, COLOR_HIGHLIGHT, COLOR_MUTED, COLOR_INACTIVE

PROGRESS_UPDATE_INTERVAL = 0.5
PROGRESS_BAR_WIDTH = 40


class NowPlayingView(Container):
    """Widget displaying currently playing track information."""

    def __init__(self, session: PlayerSession, **kwargs):
        """Initialize NowPlayingView with the player session it displays."""
        super().__init__(**kwargs)
        self.session = session
        self._update_timer = None
        self._title_widget: Static | None = None
        self._artist_widget: Static | None = None
        self._album_widget: Static | None = None
        self._details_widget: Static | None = None
        self._art_widget: Static | None = None
        self._time_widget: Static | None = None
        self._state_widget: Static | None = None

    def compose(self) -> ComposeResult:
        """Compose the now playing view with track info."""
        with Vertical():
            yield Static("♪", id="np-art", classes="music-icon")
            yield Static("Select a track", id="np-title", classes="track-title")
            yield Static("-", id="np-artist", classes="track-metadata")
            yield Static("", id="np-album", classes="track-metadata")
            yield Static("", id="np-details", classes="track-metadata")
            yield Static(self._render_progress(0.0, 0.0), id="np-time", classes="time-display")
            yield Static("State: Idle", id="np-state", classes="state-display")

    def on_mount(self) -> None:
        """Start update timer for real-time progress updates."""
        self._art_widget = self.query_one("#np-art", Static)
        self._title_widget = self.query_one("#np-title", Static)
        self._artist_widget = self.query_one("#np-artist", Static)
        self._album_widget = self.query_one("#np-album", Static)
        self._details_widget = self.query_one("#np-details", Static)
        self._time_widget = self.query_one("#np-time", Static)
        self._state_widget = self.query_one("#np-state", Static)

        self._update_timer = self.set_interval(PROGRESS_UPDATE_INTERVAL, self.update_display)
        self.update_display()

    def update_display(self) -> None:
        """Refresh every widget from the session."""
        if self._title_widget is None:
            return

        now_playing = self.session.now_playing
        status = self.session.status

        if now_playing:
            metadata = now_playing.entry.metadata
            self._title_widget.update(now_playing.title)
            self._artist_widget.update(now_playing.artist)
            self._album_widget.update(f"Album: {now_playing.album}")

            details = []
            if metadata and metadata.year:
                details.append(metadata.year)
            if metadata and metadata.genre:
                details.append(metadata.genre)
            if metadata and metadata.bitrate:
                details.append(f"{metadata.bitrate // 1000} kbps")
            self._details_widget.update(" · ".join(details))

            if now_playing.cover_art:
                self._art_widget.update(f"🖼 {now_playing.cover_art.format}")
            else:
                self._art_widget.update("♪")
        else:
            self._art_widget.update("♪")
            self._title_widget.update("Select a track")
            self._artist_widget.update("-")
            self._album_widget.update("")
            self._details_widget.update("")

        self._time_widget.update(self._render_progress(status.position_seconds, status.duration_seconds))
        self._state_widget.update(f"State: {status.state.value.capitalize()}  │  Volume: {status.volume}%")

    def _render_progress(self, position: float, duration: float) -> Text:
        result = Text()
        filled = int((position / duration) * PROGRESS_BAR_WIDTH) if duration > 0 else 0
        filled = max(0, min(PROGRESS_BAR_WIDTH, filled))

        result.append(f"{format_time(position)} ", style=COLOR_MUTED)
        for i in range(PROGRESS_BAR_WIDTH):
            if i < filled:
                style = COLOR_BASS if i < PROGRESS_BAR_WIDTH * 0.7 else COLOR_PRIMARY
                result.append("█", style=style)
            elif i == filled:
                result.append("│", style=COLOR_HIGHLIGHT)
            else:
                result.append("─", style=COLOR_INACTIVE)
        result.append(f" {format_time(duration)}", style=COLOR_MUTED)
        return result
