from dataclasses import dataclass
from enum import Enum


class PlaybackState(Enum):
    """Playback controller states."""
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class PlaybackStatus:
    """Mutable playback snapshot owned by the playback controller."""
    state: PlaybackState = PlaybackState.IDLE
    position_seconds: float = 0.0
    duration_seconds: float = 0.0
    volume: int = 100

    @property
    def is_active(self) -> bool:
        return self.state in (PlaybackState.PLAYING, PlaybackState.PAUSED)
