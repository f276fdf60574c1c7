"""Pure geometry for the spectrum and waveform views.

Nothing here knows about terminals or colours; renderers in
views.visualizer turn these numbers into text.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from models.frequency import SpectrumBar, ZERO_CROSSING

WAVEFORM_SMOOTHING = 0.8
BAR_WIDTH_FACTOR = 2.5
BAR_GAP = 1.0
MIN_BAR_HEIGHT = 1.0
GLOW_HEIGHT_FRACTION = 0.4
GLOW_FREQUENCY_FRACTION = 0.6


def smooth_waveform(samples: Sequence[int], alpha: float = WAVEFORM_SMOOTHING) -> np.ndarray:
    """Causal exponential moving average over time-domain bytes.

    smoothed[0] is samples[0]; every later value blends the current sample
    (weight alpha) with the running average of the earlier ones. Output
    values are rounded half up.

    Args:
        samples: Byte-valued samples.
        alpha: Weight of the current sample, 0 to 1.

    Returns:
        uint8 array the same length as samples.
    """
    raw = np.asarray(samples, dtype=np.float64)
    smoothed = np.empty(len(raw), dtype=np.uint8)
    if len(raw) == 0:
        return smoothed

    average = raw[0]
    smoothed[0] = int(np.floor(average + 0.5))
    for i in range(1, len(raw)):
        average = alpha * raw[i] + (1 - alpha) * average
        smoothed[i] = int(np.floor(average + 0.5))
    return smoothed


def bar_hue(index: int, count: int) -> float:
    return (index / count * 360) % 360


def spectrum_bars(bins: Sequence[int], width: float, height: float) -> list[SpectrumBar]:
    """Lay out one bar per frequency bin.

    Bars advance by their width plus a one-unit gap and may run past the
    canvas edge; clipping is the renderer's job. Bars shorter than one unit
    are left out.

    Args:
        bins: Byte-valued magnitudes.
        width: Canvas width.
        height: Canvas height.

    Returns:
        Visible bars, left to right.
    """
    count = len(bins)
    if count == 0 or width <= 0 or height <= 0:
        return []

    bar_width = (width / count) * BAR_WIDTH_FACTOR
    bars = []
    x = 0.0

    for i, value in enumerate(bins):
        bar_height = (int(value) / 255) * height

        if bar_height >= MIN_BAR_HEIGHT:
            bars.append(SpectrumBar(
                index=i,
                x=x,
                width=bar_width,
                height=bar_height,
                hue=bar_hue(i, count),
                glow=bar_height > height * GLOW_HEIGHT_FRACTION and i > count * GLOW_FREQUENCY_FRACTION,
            ))

        x += bar_width + BAR_GAP

    return bars


def waveform_points(smoothed: Sequence[int], width: float, height: float) -> list[tuple[float, float]]:
    """Closed waveform outline anchored at the vertical centre.

    Returns:
        (x, y) points with y measured down from the top: the left anchor,
        one point per sample, then the right anchor.
    """
    center = height / 2
    points = [(0.0, center)]
    if len(smoothed) == 0:
        points.append((float(width), center))
        return points

    slice_width = width / len(smoothed)
    for i, value in enumerate(smoothed):
        points.append((i * slice_width, int(value) / ZERO_CROSSING * center))

    points.append((float(width), center))
    return points
