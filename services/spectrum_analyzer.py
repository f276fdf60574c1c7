import logging
from typing import Optional

import numpy as np

from models.frequency import AnalysisFrame, FREQUENCY_BIN_COUNT, TIME_DOMAIN_SAMPLE_COUNT

logger = logging.getLogger(__name__)

FFT_SIZE = FREQUENCY_BIN_COUNT * 2
SMOOTHING_TIME_CONSTANT = 0.8
MIN_DECIBELS = -100.0
MAX_DECIBELS = -30.0


class SpectrumAnalyzer:
    """Turns raw PCM windows into byte-valued analysis frames.

    Mirrors a browser AnalyserNode: a small Blackman-windowed FFT with
    temporal smoothing for the spectrum, and a larger time-domain window
    for the waveform.

    Attributes:
        fft_size: Samples per FFT window
        smoothing: Weight of the previous spectrum (0-1)
    """

    def __init__(self, fft_size: int = FFT_SIZE, smoothing: float = SMOOTHING_TIME_CONSTANT,
                 min_decibels: float = MIN_DECIBELS, max_decibels: float = MAX_DECIBELS):
        self.fft_size = fft_size
        self.smoothing = smoothing
        self.min_decibels = min_decibels
        self.max_decibels = max_decibels

        self._window = np.blackman(fft_size)
        self._previous_magnitude: Optional[np.ndarray] = None

    def reset(self) -> None:
        """Forget spectrum history, e.g. after a track change."""
        self._previous_magnitude = None

    @staticmethod
    def to_mono(audio_buffer: np.ndarray) -> np.ndarray:
        """Convert an int16 PCM buffer to mono floats in [-1, 1]."""
        samples = np.asarray(audio_buffer, dtype=np.float32) / 32768.0
        if samples.ndim > 1:
            samples = samples.mean(axis=1)
        return samples

    def time_domain_bytes(self, mono: np.ndarray, count: int = TIME_DOMAIN_SAMPLE_COUNT) -> np.ndarray:
        """Map the latest samples to bytes with 128 as the zero line."""
        window = _latest(mono, count)
        scaled = np.floor(128.0 * (window + 1.0))
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def frequency_bytes(self, mono: np.ndarray) -> np.ndarray:
        """Compute smoothed spectrum magnitudes scaled to 0-255."""
        window = _latest(mono, self.fft_size) * self._window
        magnitude = np.abs(np.fft.rfft(window))[:self.fft_size // 2] / self.fft_size

        if self._previous_magnitude is not None and len(self._previous_magnitude) == len(magnitude):
            magnitude = self.smoothing * self._previous_magnitude + (1 - self.smoothing) * magnitude
        magnitude = np.nan_to_num(magnitude, nan=0.0, posinf=0.0, neginf=0.0)
        self._previous_magnitude = magnitude

        with np.errstate(divide='ignore'):
            decibels = 20 * np.log10(magnitude)

        scale = 255.0 / (self.max_decibels - self.min_decibels)
        scaled = np.floor(scale * (decibels - self.min_decibels))
        scaled = np.nan_to_num(scaled, nan=0.0, posinf=255.0, neginf=0.0)
        return np.clip(scaled, 0, 255).astype(np.uint8)

    def analyze(self, audio_buffer: Optional[np.ndarray]) -> AnalysisFrame:
        """Build an AnalysisFrame from the sink's latest PCM window.

        Args:
            audio_buffer: int16 samples shaped (frames,) or (frames, channels),
                or None when nothing is playing.

        Returns:
            AnalysisFrame with 128 frequency bins and 1024 time-domain samples.
        """
        if audio_buffer is None or len(audio_buffer) == 0:
            return AnalysisFrame.silent()

        mono = self.to_mono(audio_buffer)
        return AnalysisFrame(
            frequency_bins=self.frequency_bytes(mono),
            time_domain_samples=self.time_domain_bytes(mono),
        )


def _latest(samples: np.ndarray, count: int) -> np.ndarray:
    """Last `count` samples, zero-padded at the front when short."""
    if len(samples) >= count:
        return samples[-count:]
    return np.concatenate([np.zeros(count - len(samples), dtype=samples.dtype), samples])
