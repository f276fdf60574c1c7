from __future__ import annotations

import colorsys
import logging
import math
import time

import numpy as np
import psutil
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Static

from models.frequency import AnalysisFrame, PerformanceMetrics
from models.session import PlayerSession
from services.audio_player import AudioPlayer
from services.spectrum_analyzer import SpectrumAnalyzer
from services.visualization import smooth_waveform, spectrum_bars, waveform_points
from styles import VISUALIZER_PALETTES

logger = logging.getLogger(__name__)

RENDER_FPS = 60
PERFORMANCE_CHECK_INTERVAL = 1.0
FRAME_HISTORY = 30
SUBCELLS = 8
PARTIAL_BLOCKS = " ▁▂▃▄▅▆▇█"
FULL_BLOCK = "█"
STROKE_CHAR = "▒"


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    """Convert CSS-style HSL (degrees, percent, percent) to #rrggbb."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360, lightness / 100, saturation / 100)
    return f"#{int(round(r * 255)):02x}{int(round(g * 255)):02x}{int(round(b * 255)):02x}"


def blend_hex(start: str, end: str, amount: float) -> str:
    amount = max(0.0, min(1.0, amount))
    a = [int(start[i:i + 2], 16) for i in (1, 3, 5)]
    b = [int(end[i:i + 2], 16) for i in (1, 3, 5)]
    mixed = [int(round(x + (y - x) * amount)) for x, y in zip(a, b)]
    return "#{:02x}{:02x}{:02x}".format(*mixed)


class CellCanvas:
    """Grid of styled characters, row 0 at the top."""

    def __init__(self, columns: int, rows: int, background: str):
        self.columns = columns
        self.rows = rows
        self.background = background
        self._cells: list[list[tuple[str, str]]] = [
            [(" ", "") for _ in range(columns)] for _ in range(rows)
        ]

    def put(self, column: int, row: int, char: str, style: str) -> None:
        if 0 <= column < self.columns and 0 <= row < self.rows:
            self._cells[row][column] = (char, style)

    def to_text(self) -> Text:
        result = Text()
        for row_index, row in enumerate(self._cells):
            for char, style in row:
                result.append(char, style=f"{style} on {self.background}" if style else f"on {self.background}")
            if row_index < self.rows - 1:
                result.append("\n")
        return result


class CanvasRenderer:
    """Draws one view of an AnalysisFrame onto a character canvas."""

    def __init__(self, theme: str = "dark"):
        self.theme = theme

    @property
    def palette(self) -> dict:
        return VISUALIZER_PALETTES.get(self.theme, VISUALIZER_PALETTES["dark"])

    def render(self, frame: AnalysisFrame, columns: int, rows: int) -> Text:
        raise NotImplementedError


class SpectrumRenderer(CanvasRenderer):
    """Rainbow frequency bars with eighth-block tops."""

    def render(self, frame: AnalysisFrame, columns: int, rows: int) -> Text:
        palette = self.palette
        canvas = CellCanvas(columns, rows, palette["background"])
        canvas_height = rows * SUBCELLS

        # bars are laid out in sub-cell units on both axes
        for bar in spectrum_bars(frame.frequency_bins, columns * SUBCELLS, canvas_height):
            first_column = int(math.floor(bar.x / SUBCELLS))
            last_column = int(math.ceil((bar.x + bar.width) / SUBCELLS))
            if first_column >= columns:
                break
            top_row = rows - int(math.ceil(bar.height / SUBCELLS))

            for row in range(rows - 1, top_row - 1, -1):
                filled = bar.height - (rows - 1 - row) * SUBCELLS
                char = FULL_BLOCK if filled >= SUBCELLS else PARTIAL_BLOCKS[max(1, int(filled))]
                style = self._bar_style(bar.hue, row, top_row, rows)
                if bar.glow and row == top_row:
                    glow_saturation, glow_lightness = palette["glow"]
                    style = f"bold {hsl_to_hex(bar.hue, glow_saturation, glow_lightness)}"
                for column in range(first_column, min(last_column, columns)):
                    canvas.put(column, row, char, style)

        return canvas.to_text()

    def _bar_style(self, hue: float, row: int, top_row: int, rows: int) -> str:
        top_saturation, top_lightness = self.palette["spectrum_top"]
        bottom_saturation, bottom_lightness = self.palette["spectrum_bottom"]
        span = max(1, rows - 1 - top_row)
        amount = (row - top_row) / span
        saturation = top_saturation + (bottom_saturation - top_saturation) * amount
        lightness = top_lightness + (bottom_lightness - top_lightness) * amount
        return hsl_to_hex(hue, saturation, lightness)


class WaveformRenderer(CanvasRenderer):
    """Smoothed waveform filled from the centre line, with a faint outline."""

    def render(self, frame: AnalysisFrame, columns: int, rows: int) -> Text:
        palette = self.palette
        canvas = CellCanvas(columns, rows, palette["background"])
        if columns <= 0 or rows <= 0:
            return canvas.to_text()

        smoothed = smooth_waveform(frame.time_domain_samples)
        points = waveform_points(smoothed, columns, rows)
        center = rows / 2

        extremes: dict[int, float] = {}
        for x, y in points[1:-1]:
            column = min(columns - 1, int(x))
            current = extremes.get(column)
            if current is None or abs(y - center) > abs(current - center):
                extremes[column] = y

        stroke_style = f"dim {palette['stroke']}"
        for column, y in extremes.items():
            low, high = sorted((y, center))
            first_row = max(0, int(math.floor(low)))
            last_row = min(rows - 1, int(math.ceil(high)) - 1)
            for row in range(first_row, last_row + 1):
                canvas.put(column, row, FULL_BLOCK, self._gradient(row, rows))
            edge_row = first_row if y < center else last_row
            if first_row <= last_row:
                canvas.put(column, edge_row, STROKE_CHAR, stroke_style)

        return canvas.to_text()

    def _gradient(self, row: int, rows: int) -> str:
        top, middle, bottom = self.palette["waveform"]
        position = row / max(1, rows - 1)
        if position <= 0.5:
            return blend_hex(top, middle, position * 2)
        return blend_hex(middle, bottom, (position - 0.5) * 2)


class VisualizerView(Container):
    """Spectrum and waveform panes driven by a fixed-rate render loop.

    The loop ticks for the lifetime of the widget and only draws while the
    session is playing, so resuming shows motion on the very next tick.
    """

    def __init__(self, session: PlayerSession, audio_player: AudioPlayer, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.session = session
        self.audio_player = audio_player
        self.spectrum_analyzer = SpectrumAnalyzer()
        self.spectrum_renderer = SpectrumRenderer(session.theme)
        self.waveform_renderer = WaveformRenderer(session.theme)
        self.animation_timer = None

        self.performance_metrics = PerformanceMetrics()
        self._last_frame_time = time.time()
        self._process = psutil.Process()
        self._last_track_path: str | None = None

    def compose(self) -> ComposeResult:
        yield Static("", id="spectrum-canvas")
        yield Static("", id="waveform-canvas")

    def on_mount(self) -> None:
        self.animation_timer = self.set_interval(1.0 / RENDER_FPS, self._tick)
        self.set_interval(PERFORMANCE_CHECK_INTERVAL, self._monitor_performance)

    def set_theme(self, theme: str) -> None:
        self.spectrum_renderer.theme = theme
        self.waveform_renderer.theme = theme

    def _tick(self) -> None:
        """Draw one frame if playing; otherwise leave the canvases alone."""
        try:
            if not self.session.is_playing or not self.display:
                return

            current_path = self.audio_player.get_current_path()
            if current_path != self._last_track_path:
                self.spectrum_analyzer.reset()
                self._last_track_path = current_path

            audio_buffer = self.audio_player.get_latest_audio_buffer()
            frame = self.spectrum_analyzer.analyze(audio_buffer)
            self._draw(frame)

        except Exception as e:
            logger.error(f"Error updating visualization: {e}")

        finally:
            self._measure_frame_time()

    def _draw(self, frame: AnalysisFrame) -> None:
        spectrum = self.query_one("#spectrum-canvas", Static)
        waveform = self.query_one("#waveform-canvas", Static)

        spectrum_size = spectrum.content_size
        waveform_size = waveform.content_size

        if spectrum_size.width > 0 and spectrum_size.height > 0:
            spectrum.update(self.spectrum_renderer.render(frame, spectrum_size.width, spectrum_size.height))
        if waveform_size.width > 0 and waveform_size.height > 0:
            waveform.update(self.waveform_renderer.render(frame, waveform_size.width, waveform_size.height))

    def _measure_frame_time(self) -> None:
        current_time = time.time()
        frame_times = self.performance_metrics.frame_times
        frame_times.append(current_time - self._last_frame_time)
        self._last_frame_time = current_time
        if len(frame_times) > FRAME_HISTORY:
            frame_times.pop(0)

    def _monitor_performance(self) -> None:
        """Sample CPU usage and frame rate for the log."""
        try:
            frame_times = self.performance_metrics.frame_times
            average = float(np.mean(frame_times)) if frame_times else 0.0

            self.performance_metrics.cpu_percent = self._process.cpu_percent(interval=None)
            self.performance_metrics.frame_rate = 1.0 / average if average > 0 else 0.0
            self.performance_metrics.last_update = time.time()

            logger.debug(
                f"Visualizer - CPU: {self.performance_metrics.cpu_percent:.1f}%, "
                f"FPS: {self.performance_metrics.frame_rate:.1f}, Target: {RENDER_FPS}"
            )
        except Exception as e:
            logger.error(f"Error monitoring performance: {e}")
