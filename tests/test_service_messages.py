from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtWidgets")

from specviz_qt.services.dialog_service import (  # noqa: E402
    about_message,
    export_failed_message,
    open_failed_message,
    read_error_message,
)
from specviz_qt.services.status_service import (  # noqa: E402
    exported_message,
    loaded_message,
    reading_message,
)


def test_status_messages():
    assert reading_message(3) == "Reading 3 file(s)"
    assert loaded_message("/data/cam.ti3", 41, 3) == "Loaded cam.ti3 (41 bands, 3 channel(s))"
    assert exported_message("/out/cam.json") == "Exported cam.json"


def test_failure_messages_name_the_file():
    assert open_failed_message("/data/bad.json").endswith("\n/data/bad.json")
    assert export_failed_message("/out/x.ti3").endswith("\n/out/x.ti3")


def test_read_error_message_uses_last_traceback_line():
    tb = "Traceback (most recent call last):\n  File \"x.py\", line 1\nValueError: broken\n\n"
    assert read_error_message(tb) == "ValueError: broken"
    assert read_error_message("") == "Unknown error while reading files"


def test_about_message_lists_sorted_extensions():
    text = about_message("Specviz", ["ti3", "json", "sp"])
    assert text.startswith("Specviz: spectral dataset viewer")
    assert text.endswith("Supported files: json, sp, ti3")
