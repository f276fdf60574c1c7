from .music_library import MusicLibrary
from .audio_player import AudioPlayer
from .lyrics_service import LyricsService
from .playback_controller import PlaybackController
from .settings_store import SettingsStore
from .spectrum_analyzer import SpectrumAnalyzer

__all__ = [
    'MusicLibrary',
    'AudioPlayer',
    'LyricsService',
    'PlaybackController',
    'SettingsStore',
    'SpectrumAnalyzer',
]
