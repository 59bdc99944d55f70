"""Plot-side view of a dataset.

Everything the viewer needs to draw a dataset, kept free of Qt so it can be
tested directly. Readers never zero-fill short rows; these helpers do.
"""

from __future__ import annotations

import colorsys
from typing import List, Tuple

import numpy as np

from specviz.spec_model import SpecDataset


COLOR_CHOICES: List[Tuple[str, str]] = [
    ("Red", "#ff0000"),
    ("Green", "#00ff00"),
    ("Blue", "#0000ff"),
    ("Cyan", "#00ffff"),
    ("Magenta", "#ff00ff"),
    ("Yellow", "#ffff00"),
    ("Black", "#000000"),
    ("Gray", "#a0a0a4"),
]

LINE_STYLES: List[str] = ["Solid", "Dash", "Dot", "Dash dot", "Dash dot dot"]

_RGB_LABELS = {"R": "#ff0000", "G": "#00ff00", "B": "#0000ff"}


def channel_series(ds: SpecDataset, channel: int) -> Tuple[np.ndarray, np.ndarray]:
    wls = ds.wavelengths
    x = np.asarray(wls, dtype=float)
    y = np.asarray([ds.value(wl, channel) for wl in wls], dtype=float)
    return x, y


def default_channel_color(label: str, position: int) -> str:
    named = _RGB_LABELS.get(str(label or "").strip().upper())
    if named:
        return named
    hue = (position * 0.15) % 1.0
    # colorsys takes HLS, not HSL.
    r, g, b = colorsys.hls_to_rgb(hue, 0.5, 0.7)
    return "#{:02x}{:02x}{:02x}".format(int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def color_choice_index(color: str) -> int:
    c = str(color or "").lower()
    for i, (_name, hexcode) in enumerate(COLOR_CHOICES):
        if hexcode == c:
            return i
    return -1


def trace_values(ds: SpecDataset, wavelength: float) -> List[Tuple[str, float]]:
    """(label, linearly interpolated value) for each channel at `wavelength`."""
    out: List[Tuple[str, float]] = []
    if ds.is_empty:
        return out
    for i, label in enumerate(ds.indices):
        x, y = channel_series(ds, i)
        out.append((str(label), float(np.interp(float(wavelength), x, y))))
    return out


def wavelength_to_rgb(nm: float) -> Tuple[int, int, int]:
    # Piecewise approximation of spectral colors, dimmed at both ends.
    w = float(nm)
    if 380 <= w < 440:
        r, g, b = -(w - 440) / (440 - 380), 0.0, 1.0
    elif 440 <= w < 490:
        r, g, b = 0.0, (w - 440) / (490 - 440), 1.0
    elif 490 <= w < 510:
        r, g, b = 0.0, 1.0, -(w - 510) / (510 - 490)
    elif 510 <= w < 580:
        r, g, b = (w - 510) / (580 - 510), 1.0, 0.0
    elif 580 <= w < 645:
        r, g, b = 1.0, -(w - 645) / (645 - 580), 0.0
    elif 645 <= w <= 780:
        r, g, b = 1.0, 0.0, 0.0
    else:
        return (0, 0, 0)

    if w < 420:
        factor = 0.3 + 0.7 * (w - 380) / (420 - 380)
    elif w > 700:
        factor = 0.3 + 0.7 * (780 - w) / (780 - 700)
    else:
        factor = 1.0
    return (int(round(255 * r * factor)), int(round(255 * g * factor)), int(round(255 * b * factor)))


def visible_spectrum_stops(start: float = 380.0, end: float = 780.0, count: int = 41) -> List[Tuple[float, Tuple[int, int, int]]]:
    """Gradient stops (position 0..1, rgb) across the visible range."""
    n = max(2, int(count))
    out: List[Tuple[float, Tuple[int, int, int]]] = []
    for pos in np.linspace(0.0, 1.0, n):
        nm = float(start) + float(pos) * (float(end) - float(start))
        out.append((float(pos), wavelength_to_rgb(nm)))
    return out


def describe(ds: SpecDataset) -> str:
    wls = ds.wavelengths
    if not wls:
        return f"{ds.name} (no data)"
    return f"{ds.name}: {ds.channel_count} channel(s), {wls[0]}-{wls[-1]} nm, {len(wls)} bands"
