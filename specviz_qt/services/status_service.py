from __future__ import annotations

from pathlib import Path
from typing import Callable

from PySide6.QtCore import QTimer


def reading_message(count: int) -> str:
    return f"Reading {int(count)} file(s)"


def loaded_message(path: str, bands: int, channels: int) -> str:
    return f"Loaded {Path(path).name} ({bands} bands, {channels} channel(s))"


def exported_message(path: str) -> str:
    return f"Exported {Path(path).name}"


class StatusService:
    """Status-bar text and the busy indicator for background reads.

    Updates are queued on the GUI thread, so worker signals may call in.
    Overlapping reads keep the indicator on until the last one finishes.
    """

    def __init__(
        self,
        *,
        set_text: Callable[[str], None],
        set_busy: Callable[[bool], None],
    ) -> None:
        self._set_text = set_text
        self._set_busy = set_busy
        self._reads_pending = 0

    def set_status(self, text: str) -> None:
        QTimer.singleShot(0, lambda: self._set_text(str(text)))

    def set_busy(self, busy: bool) -> None:
        QTimer.singleShot(0, lambda: self._apply_busy(bool(busy)))

    def _apply_busy(self, busy: bool) -> None:
        self._reads_pending = self._reads_pending + 1 if busy else max(0, self._reads_pending - 1)
        self._set_busy(self._reads_pending > 0)

    def reading(self, count: int) -> None:
        self.set_status(reading_message(count))
        self.set_busy(True)

    def read_done(self) -> None:
        self.set_busy(False)

    def loaded(self, path: str, bands: int, channels: int) -> None:
        self.set_status(loaded_message(path, bands, channels))

    def exported(self, path: str) -> None:
        self.set_status(exported_message(path))
