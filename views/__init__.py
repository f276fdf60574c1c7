from .library import LibraryView
from .now_playing import NowPlayingView
from .lyrics import LyricsView
from .visualizer import VisualizerView

__all__ = ["LibraryView", "NowPlayingView", "LyricsView", "VisualizerView"]
