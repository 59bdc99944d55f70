from __future__ import annotations

import json

import pytest

from specviz import spec_io
from specviz.ampas_io import AmpasFile
from specviz.argyll_io import ArgyllFile
from specviz.spec_model import SpecDataset


def test_available_extensions():
    assert spec_io.available_extensions() == {"json", "agryll", "cgats", "sp", "ti3"}


def test_handler_selection_is_case_insensitive():
    assert isinstance(spec_io.handler_for("a/b/CAMERA.TI3"), ArgyllFile)
    assert isinstance(spec_io.handler_for("camera.Json"), AmpasFile)
    assert spec_io.handler_for("camera.csv") is None
    assert spec_io.handler_for("no_extension") is None


def test_first_registered_handler_wins():
    class Competing(ArgyllFile):
        name = "Competing"
        extensions = ("ti3", "cgats", "agryll")

    handlers = [ArgyllFile(), Competing()]
    assert type(spec_io.handler_for("x.ti3", handlers)) is ArgyllFile
    assert spec_io.available_extensions(handlers) == {"agryll", "cgats", "sp", "ti3"}


def test_dialog_filter():
    assert spec_io.dialog_filter() == "Spectral data files (*.agryll *.cgats *.json *.sp *.ti3)"


def test_read_dispatches_by_extension(scenario_a, scenario_b):
    a = spec_io.read(scenario_a)
    b = spec_io.read(str(scenario_b))

    assert a.loaded and a.name == "TestInstrument"
    assert b.loaded and b.indices == ["X"]


def test_read_unknown_extension(write_text):
    p = write_text("data.csv", "400,1\n")
    assert spec_io.read(p).loaded is False


@pytest.mark.parametrize("ext", sorted(spec_io.available_extensions()))
def test_read_missing_file(tmp_path, ext):
    ds = spec_io.read(tmp_path / f"missing.{ext}")
    assert ds.loaded is False


def test_read_malformed_json(write_text):
    assert spec_io.read(write_text("broken.json", '{"spectral_data": ')).loaded is False


def test_write_dispatches_by_extension(tmp_path):
    ds = SpecDataset(indices=["R"], data={400: [0.5], 410: [0.75]})

    assert spec_io.write(ds, tmp_path / "out.sp")
    assert spec_io.write(ds, tmp_path / "out.JSON")
    assert "BEGIN_DATA" in (tmp_path / "out.sp").read_text(encoding="utf-8")
    assert json.loads((tmp_path / "out.JSON").read_text(encoding="utf-8"))["spectral_data"]["index"]["main"] == ["R"]


def test_write_failures(tmp_path):
    ds = SpecDataset(indices=["R"], data={400: [0.5]})

    assert spec_io.write(ds, tmp_path / "out.csv") is False
    assert spec_io.write(SpecDataset(), tmp_path / "out.ti3") is False
    assert spec_io.write(ds, tmp_path / "no" / "such" / "dir" / "out.ti3") is False


def test_reader_errors_do_not_escape(tmp_path, monkeypatch):
    def _boom(self, path):
        raise RuntimeError("boom")

    monkeypatch.setattr(ArgyllFile, "read", _boom)
    p = tmp_path / "x.ti3"
    p.write_text("", encoding="utf-8")

    assert spec_io.read(p).loaded is False


def test_convert_json_to_tabular(tmp_path, scenario_b):
    ds = spec_io.read(scenario_b)
    out = tmp_path / "converted.ti3"

    assert spec_io.write(ds, out)
    back = spec_io.read(out)
    assert back.data == {500: [1.23]}
    assert len(back.indices) == 1


@pytest.mark.parametrize("path_fixture", ["scenario_a", "scenario_b"])
def test_loaded_rows_ascend(request, path_fixture):
    ds = spec_io.read(request.getfixturevalue(path_fixture))
    keys = list(ds.data.keys())
    assert keys == sorted(set(keys))
