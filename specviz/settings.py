from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional


_logger = logging.getLogger(__name__)

# Keep this stable; used for %APPDATA%\<APP_SETTINGS_DIRNAME>\settings.json
APP_SETTINGS_DIRNAME = "Specviz"
SETTINGS_FILENAME = "settings.json"


def _appdata_dir() -> Path:
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)

    home = Path.home()
    candidate = home / "AppData" / "Roaming"
    return candidate if candidate.exists() else home


def app_dir() -> Path:
    return _appdata_dir() / APP_SETTINGS_DIRNAME


def settings_path() -> Path:
    return app_dir() / SETTINGS_FILENAME


def default_settings() -> Dict[str, Any]:
    return {
        "open_dir": None,
        "save_dir": None,
        "theme": "dark",
    }


def _normalize_theme(value: Any) -> str:
    theme = str(value or "dark").strip().lower()
    if theme == "light":
        return "light"
    return "dark"


def _dir_or_none(value: Any) -> Optional[str]:
    return None if value in (None, "") else str(value)


def load_settings() -> Dict[str, Any]:
    """Load persistent user settings.

    Returns a dict with at least:
        - open_dir: str | None
        - save_dir: str | None
        - theme: "dark" | "light"
    """
    p = settings_path()
    try:
        if not p.exists() or not p.is_file():
            return default_settings()
        data = json.loads(p.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings.json must be an object")
    except (OSError, ValueError) as exc:
        _logger.warning("Ignoring unreadable settings %s: %s", p, exc)
        return default_settings()

    out = default_settings()
    for k in ("open_dir", "save_dir"):
        out[k] = _dir_or_none(data.get(k))
    out["theme"] = _normalize_theme(data.get("theme"))
    return out


def save_settings(settings: Dict[str, Any]) -> None:
    """Persist settings to %APPDATA%\\<APP_SETTINGS_DIRNAME>\\settings.json."""
    p = settings_path()
    p.parent.mkdir(parents=True, exist_ok=True)

    safe: Dict[str, Any] = {}
    for k in ("open_dir", "save_dir"):
        safe[k] = _dir_or_none((settings or {}).get(k))
    safe["theme"] = _normalize_theme((settings or {}).get("theme"))

    p.write_text(json.dumps(safe, ensure_ascii=False, indent=2), encoding="utf-8")


def update_setting(key: str, value: Any) -> Dict[str, Any]:
    current = load_settings()
    current[str(key)] = value
    try:
        save_settings(current)
    except OSError as exc:
        _logger.warning("Could not save settings: %s", exc)
    return current
