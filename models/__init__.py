from .track import TrackEntry, TrackMetadata, CoverArt, NowPlaying
from .playback import PlaybackState, PlaybackStatus
from .frequency import AnalysisFrame, SpectrumBar
from .queue import TrackQueue
from .session import PlayerSession

__all__ = [
    "TrackEntry",
    "TrackMetadata",
    "CoverArt",
    "NowPlaying",
    "PlaybackState",
    "PlaybackStatus",
    "AnalysisFrame",
    "SpectrumBar",
    "TrackQueue",
    "PlayerSession",
]
