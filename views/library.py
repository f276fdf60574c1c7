from __future__ import annotations

import logging
from pathlib import Path

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.message import Message
from textual.widgets import Label, ListItem, ListView, Static

from models.track import TrackEntry, format_size, format_time
from services.music_library import MusicLibrary
from services.playback_controller import PlaybackController
from services.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class FolderItem(ListItem):
    """List entry for a subfolder or the parent folder."""

    def __init__(self, folder: Path, label: str) -> None:
        super().__init__(Label(label))
        self.folder = folder


class TrackItem(ListItem):
    """List entry for a playable audio file."""

    def __init__(self, entry: TrackEntry, playing: bool = False) -> None:
        super().__init__(Label(TrackItem.describe(entry, playing)))
        self.entry = entry

    @staticmethod
    def describe(entry: TrackEntry, playing: bool) -> str:
        prefix = "♪ " if playing else "  "
        return (
            f"{prefix}{entry.title} - {entry.artist} [{format_time(entry.duration_seconds)}]"
            f"  {format_size(entry.size_bytes)}  {entry.modified_at:%Y-%m-%d}"
        )


class LibraryView(Container):
    """Folder browser listing subfolders and playable files with vim navigation."""

    class FolderChanged(Message):
        """Posted after a folder was listed and the queue rebuilt."""

        def __init__(self, folder: Path) -> None:
            super().__init__()
            self.folder = folder

    DEFAULT_CSS = """
    LibraryView {
        background: #1a1a1a;
        border: solid #ff8c00;
        padding: 1;
    }

    LibraryView > Label {
        color: #ff8c00;
        text-style: bold;
        padding: 0 0 1 0;
    }
    """

    BINDINGS = [
        Binding("j", "move_down", "Move down", show=False),
        Binding("k", "move_up", "Move up", show=False),
    ]

    def __init__(
        self,
        music_library: MusicLibrary,
        controller: PlaybackController,
        settings: SettingsStore,
        *args,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.music_library = music_library
        self.controller = controller
        self.settings = settings

    def compose(self) -> ComposeResult:
        """Compose the library view with breadcrumb and entry list."""
        yield Label("🎵 Music Library")
        yield Static("No folder selected, press o to open one", id="breadcrumb")
        yield ListView(id="track-list")

    async def load_folder(self, folder: str | Path, remember: bool = True) -> bool:
        """Browse to a folder: list it, rebuild the queue and refresh the list.

        Args:
            folder: Folder to open.
            remember: Save the folder as the last one opened.

        Returns:
            True if the folder was listed.
        """
        folder_path = Path(folder).expanduser()

        try:
            entries = await self.music_library.list_audio_entries(folder_path)
            subfolders = self.music_library.list_subfolders(folder_path)
        except (FileNotFoundError, NotADirectoryError) as e:
            logger.error(f"Cannot open folder: {e}")
            self.app.notify(f"❌ Folder not found\n\n{folder_path}", severity="error", timeout=5)
            return False
        except PermissionError as e:
            logger.error(f"Permission denied opening folder: {e}")
            self.app.notify(f"❌ Cannot access folder\n\n{folder_path}", severity="error", timeout=5)
            return False
        except Exception as e:
            logger.error(f"Error loading folder {folder_path}: {type(e).__name__}: {e}")
            self.app.notify("❌ Error loading folder", severity="error", timeout=5)
            return False

        self.controller.load_queue(entries, folder=str(folder_path))
        if remember:
            self.settings.last_folder = str(folder_path)

        self._update_breadcrumb(folder_path)
        await self._populate_list(folder_path, subfolders, entries)
        self.post_message(self.FolderChanged(folder_path))
        return True

    def _update_breadcrumb(self, folder_path: Path) -> None:
        crumbs = self.music_library.breadcrumb(folder_path)
        text = " / ".join(label for label, _ in crumbs)
        self.query_one("#breadcrumb", Static).update(text)

    async def _populate_list(self, folder_path: Path, subfolders: list[Path], entries: list[TrackEntry]) -> None:
        list_view = self.query_one("#track-list", ListView)
        await list_view.clear()

        items: list[ListItem] = []
        parent = self.music_library.parent_folder(folder_path)
        if parent is not None:
            items.append(FolderItem(parent, "📁 .."))
        items.extend(FolderItem(sub, f"📁 {sub.name}") for sub in subfolders)
        items.extend(TrackItem(entry) for entry in entries)

        if not subfolders and not entries:
            logger.info(f"No audio files or folders in {folder_path}")

        await list_view.extend(items)
        if items:
            list_view.index = 0

    def update_play_indicator(self) -> None:
        """Mark the entry that is currently loaded."""
        current = self.controller.session.queue.current()
        current_path = current.path if current else None

        for item in self.query_one("#track-list", ListView).children:
            if isinstance(item, TrackItem):
                playing = item.entry.path == current_path
                item.query_one(Label).update(TrackItem.describe(item.entry, playing))

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if isinstance(item, FolderItem):
            await self.load_folder(item.folder)
        elif isinstance(item, TrackItem):
            index = self.controller.session.queue.index_of(item.entry.path)
            if index != -1:
                self.run_worker(self.controller.play_track(index), group="playback")

    def action_move_down(self) -> None:
        """Move selection down in the list (j key)."""
        list_view = self.query_one("#track-list", ListView)
        list_view.action_cursor_down()

    def action_move_up(self) -> None:
        """Move selection up in the list (k key)."""
        list_view = self.query_one("#track-list", ListView)
        list_view.action_cursor_up()
