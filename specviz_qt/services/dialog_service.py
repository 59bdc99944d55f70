from __future__ import annotations

from typing import Iterable

from PySide6.QtWidgets import QMessageBox, QWidget


def open_failed_message(path: str) -> str:
    return f"Could not load dataset from file:\n{path}"


def export_failed_message(path: str) -> str:
    return f"Failed to export dataset to:\n{path}"


def read_error_message(tb: str) -> str:
    """Last line of a worker traceback, which names the exception."""
    lines = [line for line in str(tb or "").strip().splitlines() if line.strip()]
    return lines[-1] if lines else "Unknown error while reading files"


def about_message(title: str, extensions: Iterable[str]) -> str:
    exts = ", ".join(sorted(extensions))
    return f"{title}: spectral dataset viewer\n\nSupported files: {exts}"


class DialogService:
    def __init__(self, parent: QWidget) -> None:
        self._parent = parent

    def open_failed(self, path: str) -> None:
        QMessageBox.warning(self._parent, "Open", open_failed_message(path))

    def read_error(self, tb: str) -> None:
        QMessageBox.warning(self._parent, "Open", read_error_message(tb))

    def export_failed(self, path: str) -> None:
        QMessageBox.warning(self._parent, "Export", export_failed_message(path))

    def confirm_clear(self, count: int) -> bool:
        res = QMessageBox.question(
            self._parent,
            "Clear",
            f"Remove all {int(count)} dataset(s) and clear the plot?",
        )
        return res == QMessageBox.StandardButton.Yes

    def about(self, title: str, extensions: Iterable[str]) -> None:
        QMessageBox.information(self._parent, "About", about_message(title, extensions))
