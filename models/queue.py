from __future__ import annotations

from typing import Iterator

from models.track import TrackEntry

NO_SELECTION = -1


class TrackQueue:
    """Ordered audio entries of the browsed folder plus a selection pointer.

    The queue is only ever replaced wholesale; ``current_index`` is either
    ``NO_SELECTION`` or a valid index into the current entries.
    """

    def __init__(self, entries: list[TrackEntry] | None = None) -> None:
        self._entries: list[TrackEntry] = list(entries or [])
        self._current_index: int = NO_SELECTION

    @property
    def current_index(self) -> int:
        return self._current_index

    @current_index.setter
    def current_index(self, index: int) -> None:
        if index != NO_SELECTION and not 0 <= index < len(self._entries):
            raise IndexError(f"Queue index out of range: {index}")
        self._current_index = index

    def rebuild(self, entries: list[TrackEntry]) -> bool:
        """Replace all entries and clear the selection.

        Args:
            entries: New entries in directory-listing order.

        Returns:
            True if a track was selected before the rebuild.
        """
        had_selection = self._current_index != NO_SELECTION
        self._entries = list(entries)
        self._current_index = NO_SELECTION
        return had_selection

    def index_of(self, path: str) -> int:
        for index, entry in enumerate(self._entries):
            if entry.path == path:
                return index
        return NO_SELECTION

    def current(self) -> TrackEntry | None:
        if self._current_index == NO_SELECTION:
            return None
        return self._entries[self._current_index]

    def next_index(self) -> int:
        """Index after the current one, wrapping to 0."""
        if not self._entries:
            return NO_SELECTION
        new_index = self._current_index + 1
        if new_index >= len(self._entries):
            new_index = 0
        return new_index

    def previous_index(self) -> int:
        """Index before the current one, wrapping to the last entry."""
        if not self._entries:
            return NO_SELECTION
        new_index = self._current_index - 1
        if new_index < 0:
            new_index = len(self._entries) - 1
        return new_index

    @property
    def entries(self) -> list[TrackEntry]:
        return list(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> TrackEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[TrackEntry]:
        return iter(self._entries)
