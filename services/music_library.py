from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from models.track import TrackEntry, TrackMetadata
from services.metadata_resolver import resolve_metadata

logger = logging.getLogger(__name__)


class MusicLibrary:
    """Folder access for the browser: audio listings and subfolders."""

    SUPPORTED_EXTENSIONS = {'.mp3', '.ogg', '.wav'}
    DEFAULT_MUSIC_DIR = Path.home() / "Music"

    def __init__(self, resolver: Callable[[str], TrackMetadata] = resolve_metadata):
        """Initialize MusicLibrary.

        Args:
            resolver: Metadata resolver applied to every listed file.
        """
        self._resolver = resolver

    @classmethod
    def is_supported(cls, path: Path) -> bool:
        return path.suffix.lower() in cls.SUPPORTED_EXTENSIONS

    async def list_audio_entries(self, folder: str | Path) -> list[TrackEntry]:
        """List playable files of a folder with metadata resolved.

        Metadata for all files is resolved concurrently; the result keeps
        directory-listing order regardless of completion order.

        Args:
            folder: Folder to list.

        Returns:
            TrackEntry list, directories and unreadable files excluded.

        Raises:
            FileNotFoundError: If the folder does not exist.
            NotADirectoryError: If the path is not a folder.
            PermissionError: If the folder cannot be read.
        """
        folder_path = Path(folder).expanduser()
        audio_files = [
            path for path in self._listing(folder_path)
            if not path.is_dir() and self.is_supported(path)
        ]

        built = await asyncio.gather(
            *(self._build_entry(path) for path in audio_files)
        )
        entries = [entry for entry in built if entry is not None]

        logger.info(f"Listed {len(entries)} audio files in {folder_path}")
        return entries

    def list_subfolders(self, folder: str | Path) -> list[Path]:
        """Return visible subfolders in listing order."""
        folder_path = Path(folder).expanduser()
        return [
            path for path in self._listing(folder_path)
            if path.is_dir() and not path.name.startswith('.')
        ]

    @staticmethod
    def parent_folder(folder: str | Path) -> Path | None:
        folder_path = Path(folder).expanduser()
        parent = folder_path.parent
        if parent == folder_path:
            return None
        return parent

    @staticmethod
    def breadcrumb(folder: str | Path) -> list[tuple[str, Path]]:
        """Split a folder into (label, path) pairs from the root down."""
        folder_path = Path(folder).expanduser()
        crumbs = []
        for ancestor in reversed([folder_path, *folder_path.parents]):
            crumbs.append((ancestor.name or 'Root', ancestor))
        return crumbs

    @staticmethod
    def _listing(folder_path: Path) -> list[Path]:
        if not folder_path.exists():
            raise FileNotFoundError(f"Folder not found: {folder_path}")
        if not folder_path.is_dir():
            raise NotADirectoryError(f"Not a folder: {folder_path}")
        return sorted(folder_path.iterdir(), key=lambda p: p.name.lower())

    async def _build_entry(self, path: Path) -> TrackEntry | None:
        try:
            stats = await asyncio.to_thread(path.stat)
        except OSError as e:
            logger.warning(f"Skipping unreadable file {path}: {e}")
            return None
        metadata = await asyncio.to_thread(self._resolver, str(path))
        return TrackEntry(
            path=str(path),
            display_name=path.name,
            size_bytes=stats.st_size,
            modified_at=datetime.fromtimestamp(stats.st_mtime),
            metadata=metadata,
        )
