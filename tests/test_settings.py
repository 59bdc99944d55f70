from __future__ import annotations

import json

import pytest

from specviz import settings


@pytest.fixture(autouse=True)
def appdata(tmp_path, monkeypatch):
    monkeypatch.setenv("APPDATA", str(tmp_path))
    return tmp_path


def test_defaults_when_missing():
    assert settings.load_settings() == {"open_dir": None, "save_dir": None, "theme": "dark"}


def test_save_and_load(appdata):
    settings.save_settings({"open_dir": "/data", "save_dir": "", "theme": "Light", "junk": 1})

    p = appdata / "Specviz" / "settings.json"
    assert json.loads(p.read_text(encoding="utf-8")) == {"open_dir": "/data", "save_dir": None, "theme": "light"}
    assert settings.load_settings()["open_dir"] == "/data"


def test_corrupt_file_falls_back(appdata):
    p = appdata / "Specviz" / "settings.json"
    p.parent.mkdir(parents=True)
    p.write_text("[not an object]", encoding="utf-8")

    assert settings.load_settings() == settings.default_settings()


def test_update_setting():
    out = settings.update_setting("save_dir", "/exports")
    assert out["save_dir"] == "/exports"
    assert settings.load_settings()["save_dir"] == "/exports"


@pytest.mark.parametrize("theme", ["flatly", "", None, "solarized"])
def test_unknown_theme_falls_back_to_dark(appdata, theme):
    p = appdata / "Specviz" / "settings.json"
    p.parent.mkdir(parents=True)
    p.write_text(json.dumps({"theme": theme}), encoding="utf-8")

    assert settings.load_settings()["theme"] == "dark"
