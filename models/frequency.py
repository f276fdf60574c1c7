from dataclasses import dataclass, field

import numpy as np

FREQUENCY_BIN_COUNT = 128
TIME_DOMAIN_SAMPLE_COUNT = 1024
ZERO_CROSSING = 128


@dataclass
class PerformanceMetrics:
    """Render loop performance figures.

    Attributes:
        cpu_percent: Process CPU usage percentage
        frame_rate: Current frames per second
        frame_times: Recent frame intervals in seconds
        last_update: Timestamp of last metrics update
    """
    cpu_percent: float = 0.0
    frame_rate: float = 0.0
    frame_times: list[float] = field(default_factory=list)
    last_update: float = 0.0


@dataclass
class AnalysisFrame:
    """Per-tick snapshot of the audio sink.

    Pulled fresh for every animation tick and never stored.

    Attributes:
        frequency_bins: 128 byte-valued magnitudes, low to high frequency
        time_domain_samples: 1024 byte-valued samples, 128 is silence
    """
    frequency_bins: np.ndarray
    time_domain_samples: np.ndarray

    @classmethod
    def silent(cls) -> 'AnalysisFrame':
        """Frame produced when no audio is available."""
        return cls(
            frequency_bins=np.zeros(FREQUENCY_BIN_COUNT, dtype=np.uint8),
            time_domain_samples=np.full(TIME_DOMAIN_SAMPLE_COUNT, ZERO_CROSSING, dtype=np.uint8),
        )


@dataclass(frozen=True)
class SpectrumBar:
    """Geometry of one spectrum bar in canvas units.

    Attributes:
        index: Frequency bin index
        x: Left edge
        width: Bar width
        height: Bar height measured up from the canvas bottom
        hue: Colour hue in degrees
        glow: Whether the bar gets the extra glow pass
    """
    index: int
    x: float
    width: float
    height: float
    hue: float
    glow: bool = False
