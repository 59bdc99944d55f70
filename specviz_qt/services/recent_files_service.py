from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from specviz.settings import app_dir


_logger = logging.getLogger(__name__)

RECENT_FILENAME = "recent.json"


class RecentFilesService:
    def __init__(self, *, max_items: int = 10) -> None:
        self._max_items = int(max_items)
        self._paths: List[str] = []
        self._recent_path = self._resolve_recent_path()
        self._load()

    def list_recent(self) -> List[str]:
        return list(self._paths)

    def add_recent(self, path: str) -> None:
        p = str(path)
        self._paths = [x for x in self._paths if x != p]
        self._paths.insert(0, p)
        self._paths = self._paths[: self._max_items]
        self._save()

    def remove_recent(self, path: str) -> None:
        p = str(path)
        if p not in self._paths:
            return
        self._paths = [x for x in self._paths if x != p]
        self._save()

    def clear(self) -> None:
        self._paths = []
        self._save()

    def _resolve_recent_path(self) -> Path:
        base = app_dir()
        base.mkdir(parents=True, exist_ok=True)
        return base / RECENT_FILENAME

    def _load(self) -> None:
        try:
            if not self._recent_path.exists():
                return
            with self._recent_path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
            items = payload.get("recent_files", [])
            if isinstance(items, list):
                self._paths = [str(p) for p in items if p]
        except (OSError, ValueError, AttributeError) as exc:
            _logger.warning("Ignoring unreadable recent files list: %s", exc)
            self._paths = []

    def _save(self) -> None:
        try:
            payload = {"recent_files": list(self._paths)}
            with self._recent_path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
        except OSError as exc:
            _logger.warning("Could not save recent files list: %s", exc)
