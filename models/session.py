from __future__ import annotations

from dataclasses import dataclass, field

from models.playback import PlaybackState, PlaybackStatus
from models.queue import TrackQueue
from models.track import NowPlaying


@dataclass
class PlayerSession:
    """Everything one player instance knows about what is playing.

    Owned by a single PlaybackController and handed to views by reference.

    Attributes:
        queue: Audio entries of the browsed folder
        status: Playback state, position, duration and volume
        current_folder: Folder the queue was built from
        theme: Active theme name, "dark" or "light"
        now_playing: Last now-playing record emitted, if any
    """
    queue: TrackQueue = field(default_factory=TrackQueue)
    status: PlaybackStatus = field(default_factory=PlaybackStatus)
    current_folder: str = ""
    theme: str = "dark"
    now_playing: NowPlaying | None = None

    @property
    def state(self) -> PlaybackState:
        return self.status.state

    @property
    def is_playing(self) -> bool:
        return self.status.state == PlaybackState.PLAYING
