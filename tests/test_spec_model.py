from __future__ import annotations

import math

from specviz.spec_model import SpecDataset, not_loaded


def test_set_row_replaces_and_sort_rows_orders():
    ds = SpecDataset(indices=["A"])
    ds.set_row(420, [3])
    ds.set_row(400, [1])
    ds.set_row(420, [4])
    ds.sort_rows()

    assert list(ds.data.items()) == [(400, [1.0]), (420, [4.0])]
    assert ds.wavelengths == [400, 420]


def test_value_defaults_missing_channels_to_zero():
    ds = SpecDataset(indices=["A", "B"], data={400: [1.5]})

    assert ds.value(400, 0) == 1.5
    assert ds.value(400, 1) == 0.0
    assert ds.value(500, 0) == 0.0


def test_to_frame():
    ds = SpecDataset(indices=["R", "G", "R"], data={410: [0.3], 400: [0.1, 0.2, 0.5]})
    df = ds.to_frame()

    assert list(df.index) == [400, 410]
    assert df.index.name == "wavelength"
    assert list(df.columns) == ["R", "G", "R (3)"]
    assert df.loc[400, "R (3)"] == 0.5
    assert math.isnan(df.loc[410, "G"])


def test_not_loaded():
    ds = not_loaded()
    assert ds.loaded is False
    assert ds.is_empty
    assert ds.channel_count == 0


def test_channel_count_follows_indices():
    ds = SpecDataset(indices=["R", "G", "B"], data={400: [1.0]})
    assert ds.channel_count == 3
