from __future__ import annotations

import numpy as np
import pytest

from specviz.spec_model import SpecDataset
from specviz.spec_plot import (
    COLOR_CHOICES,
    LINE_STYLES,
    channel_series,
    color_choice_index,
    default_channel_color,
    describe,
    trace_values,
    visible_spectrum_stops,
    wavelength_to_rgb,
)


def _dataset() -> SpecDataset:
    return SpecDataset(
        name="cam",
        indices=["R", "G"],
        data={400: [0.0, 1.0], 410: [1.0], 420: [2.0, 3.0]},
    )


def test_channel_series_zero_fills_short_rows():
    x, y = channel_series(_dataset(), 1)

    np.testing.assert_array_equal(x, [400.0, 410.0, 420.0])
    np.testing.assert_array_equal(y, [1.0, 0.0, 3.0])


def test_default_channel_colors():
    assert default_channel_color("r", 5) == "#ff0000"
    assert default_channel_color("G", 0) == "#00ff00"
    assert default_channel_color(" b ", 0) == "#0000ff"
    # hue 0, saturation 0.7, lightness 0.5
    assert default_channel_color("Set 1", 0) == "#d92626"
    assert default_channel_color("Set 2", 1) != default_channel_color("Set 1", 0)


def test_color_choices():
    assert len(COLOR_CHOICES) == 8
    assert color_choice_index("#FF0000") == 0
    assert color_choice_index("#123456") == -1
    assert LINE_STYLES[0] == "Solid"
    assert len(LINE_STYLES) == 5


def test_trace_values_interpolate():
    values = trace_values(_dataset(), 415)
    assert [label for label, _ in values] == ["R", "G"]
    assert values[0][1] == pytest.approx(1.5)
    assert values[1][1] == pytest.approx(1.5)


def test_trace_values_empty_dataset():
    assert trace_values(SpecDataset(indices=["A"]), 500) == []


def test_visible_spectrum():
    stops = visible_spectrum_stops(count=5)
    assert [pos for pos, _ in stops] == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert wavelength_to_rgb(300) == (0, 0, 0)
    assert wavelength_to_rgb(650) == (255, 0, 0)
    assert wavelength_to_rgb(500)[1] == 255


def test_describe():
    assert describe(_dataset()) == "cam: 2 channel(s), 400-420 nm, 3 bands"
    assert describe(SpecDataset(name="x")) == "x (no data)"
