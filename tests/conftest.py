from __future__ import annotations

import json
from pathlib import Path

import pytest


SCENARIO_A = """ORIGINATOR "TestInstrument"
MEAS_TYPE REFLECTIVE
SPECTRAL_BANDS 3
SPECTRAL_START_NM 400
SPECTRAL_END_NM 420
NUMBER_OF_SETS 2
BEGIN_DATA_FORMAT
END_DATA_FORMAT
BEGIN_DATA
0.1 0.2 0.3 0.4 0.5 0.6
END_DATA
"""

SCENARIO_B = {"spectral_data": {"units": "relative", "index": {"main": ["X"]}, "data": {"main": {"500": [1.23]}}}}


@pytest.fixture
def write_text(tmp_path: Path):
    def _write(name: str, text: str) -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _write


@pytest.fixture
def scenario_a(write_text) -> Path:
    return write_text("scenario_a.ti3", SCENARIO_A)


@pytest.fixture
def scenario_b(write_text) -> Path:
    return write_text("scenario_b.json", json.dumps(SCENARIO_B))
