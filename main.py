from textual.app import App, ComposeResult
from textual.widgets import Footer
from textual.containers import Horizontal, Vertical
from textual.binding import Binding
import logging
import os

from models.playback import PlaybackStatus
from models.session import PlayerSession
from models.track import NowPlaying
from widgets import Header, HelpScreen, FolderPromptScreen
from views import LibraryView, NowPlayingView, LyricsView, VisualizerView
from services.audio_player import AudioPlayer
from services.lyrics_service import LyricsService
from services.music_library import MusicLibrary
from services.playback_controller import (
    MEDIA_NEXT,
    MEDIA_PLAY_PAUSE,
    MEDIA_PREVIOUS,
    PlaybackController,
)
from services.settings_store import SettingsStore, default_data_dir

TRACK_END_CHECK_INTERVAL = 0.5
SEEK_STEP_SECONDS = 5.0
NOTIFICATION_TIMEOUT = 5

log_dir = default_data_dir()
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / 'folderplay.log'

logging.basicConfig(
    level=os.environ.get('FOLDERPLAY_LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_file)
    ]
)

logger = logging.getLogger(__name__)


class FolderplayApp(App):
    """A terminal music player for browsing folders of local audio files."""

    CSS_PATH = "styles/app.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("space", "play_pause", "Play/Pause"),
        Binding("n", "next_track", "Next", priority=True),
        Binding("p", "previous_track", "Prev", priority=True),
        Binding("left", "seek_back", "-5s", show=False),
        Binding("right", "seek_forward", "+5s", show=False),
        Binding("+", "volume_up", "Vol+", priority=True),
        Binding("=", "volume_up", "Vol+", show=False, priority=True),
        Binding("-", "volume_down", "Vol-", priority=True),
        Binding("o", "open_folder", "Open", priority=True),
        Binding("backspace", "parent_folder", "Up", show=False),
        Binding("t", "toggle_theme", "Theme", priority=True),
        Binding("v", "toggle_visualizations", "Visuals", priority=True),
        Binding("l", "toggle_lyrics", "Lyrics", priority=True),
        Binding("h", "show_help", "Help", priority=True),
        Binding("?", "show_help", "Help", show=False, priority=True),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        logger.info("Starting FOLDERPLAY application")

        self.settings = SettingsStore()
        self.session = PlayerSession(theme=self.settings.theme)

        try:
            self.audio_player = AudioPlayer()
        except RuntimeError as e:
            logger.critical(f"Failed to initialize audio player: {e}")
            raise

        self.controller = PlaybackController(self.session, self.audio_player, self.settings)
        self.music_library = MusicLibrary()
        self.lyrics_service = LyricsService()

        self.controller.add_now_playing_listener(self._on_now_playing)
        self.controller.add_state_listener(self._on_status_change)
        logger.info("Services initialized successfully")

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main-view"):
            with Horizontal(id="top-container"):
                yield LibraryView(self.music_library, self.controller, self.settings, id="library")
                with Vertical(id="side-panel"):
                    yield NowPlayingView(self.session, id="now_playing")
                    yield LyricsView(self.lyrics_service, id="lyrics")
            yield VisualizerView(self.session, self.audio_player, id="visualizer")
        yield Footer()

    def on_mount(self) -> None:
        """Restore saved settings and start the track-end poll."""
        self.controller.set_volume(self.settings.volume)
        self._apply_theme(self.session.theme)

        visualizer = self.query_one("#visualizer", VisualizerView)
        visualizer.display = not self.settings.visualizations_hidden

        library_view = self.query_one("#library", LibraryView)
        library_view.focus()

        last_folder = self.settings.last_folder
        if last_folder:
            self.run_worker(self._open_folder(last_folder, remember=False), exclusive=True, group="folder")

        self.set_interval(TRACK_END_CHECK_INTERVAL, self._check_track_end)

    async def _open_folder(self, folder: str, remember: bool = True) -> None:
        await self.query_one("#library", LibraryView).load_folder(folder, remember=remember)

    def on_library_view_folder_changed(self, event: LibraryView.FolderChanged) -> None:
        self.query_one(Header).folder = str(event.folder)
        self.query_one("#lyrics", LyricsView).clear()
        self.query_one("#now_playing", NowPlayingView).update_display()

    def _on_now_playing(self, now_playing: NowPlaying) -> None:
        """Refresh panes and raise the now-playing toast."""
        self.query_one("#now_playing", NowPlayingView).update_display()
        self.query_one("#library", LibraryView).update_play_indicator()
        self.query_one("#lyrics", LyricsView).load_for(now_playing)
        self.notify(now_playing.message, title="Now Playing", timeout=NOTIFICATION_TIMEOUT)

    def _on_status_change(self, status: PlaybackStatus) -> None:
        try:
            self.query_one(Header).volume_level = status.volume
            self.query_one("#now_playing", NowPlayingView).update_display()
            if self.session.queue.current() is None:
                self.query_one("#library", LibraryView).update_play_indicator()
        except Exception as e:
            logger.debug(f"Status update before layout was ready: {e}")

    async def _check_track_end(self) -> None:
        """Advance when a track ends and keep the displayed position fresh."""
        try:
            self.controller.refresh_status()
            await self.controller.check_track_end()
        except Exception as e:
            logger.error(f"Error during track auto-advance: {e}")
            self.notify(
                "❌ Error advancing to next track",
                severity="error",
                timeout=3
            )

    def _media_key(self, key: str) -> None:
        self.run_worker(self.controller.handle_media_key(key), group="playback")

    def action_play_pause(self) -> None:
        """Toggle play/pause state."""
        self._media_key(MEDIA_PLAY_PAUSE)

    def action_next_track(self) -> None:
        """Skip to next track."""
        self._media_key(MEDIA_NEXT)

    def action_previous_track(self) -> None:
        """Restart the track or skip to the previous one."""
        self._media_key(MEDIA_PREVIOUS)

    def action_seek_back(self) -> None:
        self.controller.seek_relative(-SEEK_STEP_SECONDS)

    def action_seek_forward(self) -> None:
        self.controller.seek_relative(SEEK_STEP_SECONDS)

    def action_volume_up(self) -> None:
        """Increase volume."""
        volume = self.controller.change_volume(+5)
        self.notify(f"🔊 Volume ▲ {volume}%", timeout=1.5)

    def action_volume_down(self) -> None:
        """Decrease volume."""
        volume = self.controller.change_volume(-5)
        mute_icon = "🔇" if volume == 0 else "🔉"
        self.notify(f"{mute_icon} Volume ▼ {volume}%", timeout=1.5)

    def action_open_folder(self) -> None:
        """Prompt for a folder path and browse to it."""
        initial = self.session.current_folder or str(MusicLibrary.DEFAULT_MUSIC_DIR)
        self.push_screen(FolderPromptScreen(initial), callback=self._handle_folder_input)

    def _handle_folder_input(self, folder: str | None) -> None:
        if not folder:
            logger.debug("Folder prompt cancelled by user")
            return
        self.run_worker(self._open_folder(folder), exclusive=True, group="folder")

    def action_parent_folder(self) -> None:
        current = self.session.current_folder
        parent = self.music_library.parent_folder(current) if current else None
        if parent is not None:
            self.run_worker(self._open_folder(str(parent)), exclusive=True, group="folder")

    def _apply_theme(self, theme: str) -> None:
        self.session.theme = theme
        self.screen.set_class(theme == "light", "light-theme")
        self.query_one(Header).theme_name = theme
        self.query_one("#visualizer", VisualizerView).set_theme(theme)

    def action_toggle_theme(self) -> None:
        new_theme = "light" if self.session.theme == "dark" else "dark"
        self._apply_theme(new_theme)
        self.settings.theme = new_theme

    def action_toggle_visualizations(self) -> None:
        visualizer = self.query_one("#visualizer", VisualizerView)
        visualizer.display = not visualizer.display
        self.settings.visualizations_hidden = not visualizer.display

    def action_toggle_lyrics(self) -> None:
        lyrics_view = self.query_one("#lyrics", LyricsView)
        lyrics_view.display = not lyrics_view.display

    def action_show_help(self) -> None:
        try:
            self.push_screen(HelpScreen())
        except Exception as e:
            logger.error(f"Error showing help screen: {e}")
            self.notify("❌ Cannot show help", severity="error")

    def action_quit(self) -> None:
        """Handle quit action for clean shutdown."""
        self.audio_player.unload()
        self.exit()


def main():
    """Entry point for the FOLDERPLAY application.

    Handles initialization errors and provides user-friendly error messages.
    """
    try:
        logger.info("=" * 60)
        logger.info("FOLDERPLAY starting up")
        logger.info("=" * 60)

        app = FolderplayApp()
        app.run()

        logger.info("FOLDERPLAY shut down cleanly")

    except RuntimeError as e:
        logger.critical(f"Fatal error during startup: {e}")
        print("\n❌ FOLDERPLAY cannot start\n")
        print(f"{e}\n")
        print(f"Check {log_file} for more details.\n")
        raise SystemExit(1)
    except KeyboardInterrupt:
        logger.info("FOLDERPLAY interrupted by user")
        print("\n\nGoodbye! 👋\n")
        raise SystemExit(0)
    except Exception as e:
        logger.critical(f"Unexpected fatal error: {type(e).__name__}: {e}", exc_info=True)
        print("\n❌ FOLDERPLAY encountered an unexpected error\n")
        print(f"{type(e).__name__}: {e}\n")
        print(f"Check {log_file} for more details.\n")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
