import numpy as np
import pytest

from services.visualization import (
    BAR_GAP,
    bar_hue,
    smooth_waveform,
    spectrum_bars,
    waveform_points,
)


def test_smoothing_first_value_passes_through():
    assert smooth_waveform([200, 0, 0])[0] == 200


def test_smoothing_rounds_half_up():
    assert smooth_waveform([10, 20, 30, 40, 50], alpha=0.5).tolist() == [10, 15, 23, 31, 41]


def test_smoothing_keeps_constant_signal():
    assert smooth_waveform([128] * 32).tolist() == [128] * 32


def test_smoothing_stays_within_input_range():
    rng = np.random.default_rng(7)
    samples = rng.integers(40, 200, size=1024)
    smoothed = smooth_waveform(samples)

    assert smoothed.dtype == np.uint8
    assert len(smoothed) == 1024
    assert smoothed.min() >= 40
    assert smoothed.max() <= 200


SAMPLE_SETS = [
    [10, 200, 3, 255, 128],
    [0, 255, 0, 255],
    [77],
]


@pytest.mark.parametrize("samples", SAMPLE_SETS)
def test_smoothing_with_full_weight_returns_input(samples):
    assert smooth_waveform(samples, alpha=1.0).tolist() == samples


@pytest.mark.parametrize("samples", SAMPLE_SETS)
def test_smoothing_with_zero_weight_holds_first_value(samples):
    assert smooth_waveform(samples, alpha=0.0).tolist() == [samples[0]] * len(samples)


def test_smoothing_empty_input():
    assert len(smooth_waveform([])) == 0


def test_bar_hue_spans_the_wheel():
    assert bar_hue(0, 128) == 0
    assert bar_hue(64, 128) == 180


def test_bars_layout():
    bars = spectrum_bars([0, 255, 128], width=30, height=100)

    assert [bar.index for bar in bars] == [1, 2]
    assert bars[0].width == pytest.approx(25.0)
    assert bars[0].x == pytest.approx(25.0 + BAR_GAP)
    assert bars[1].x == pytest.approx(2 * (25.0 + BAR_GAP))
    assert bars[0].height == pytest.approx(100.0)
    assert bars[1].height == pytest.approx(128 / 255 * 100)


def test_glow_only_for_tall_high_frequency_bars():
    bins = [255] * 10
    bins[9] = 20
    bars = {bar.index: bar for bar in spectrum_bars(bins, width=100, height=100)}

    assert not bars[6].glow
    assert bars[7].glow
    assert not bars[9].glow


def test_bars_shorter_than_one_unit_are_skipped():
    assert spectrum_bars([1, 2], width=10, height=10) == []


@pytest.mark.parametrize("bins, width, height", [
    ([], 10, 10),
    ([255], 0, 10),
    ([255], 10, 0),
])
def test_bars_degenerate_inputs(bins, width, height):
    assert spectrum_bars(bins, width, height) == []


def test_waveform_points_silence_is_flat():
    points = waveform_points([128, 128], width=10, height=20)
    assert points == [(0.0, 10.0), (0.0, 10.0), (5.0, 10.0), (10.0, 10.0)]


def test_waveform_points_scale_around_centre():
    points = waveform_points([0, 255], width=4, height=8)

    assert points[1] == (0.0, 0.0)
    assert points[2][1] == pytest.approx(255 / 128 * 4)
    assert len(points) == 4


def test_waveform_points_empty_input():
    assert waveform_points([], width=6, height=4) == [(0.0, 2.0), (6.0, 2.0)]
