from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from specviz.settings import app_dir
from specviz_qt.main_window import MainWindow


def _init_logging() -> None:
    log_root = app_dir()
    log_root.mkdir(parents=True, exist_ok=True)
    log_file = log_root / "specviz.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def _install_excepthook() -> None:
    logger = logging.getLogger("specviz_qt")

    def _hook(exc_type, exc, tb) -> None:
        logger.exception("Unhandled exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _hook


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="specviz", description="Spectral dataset viewer")
    parser.add_argument("--open", dest="open_path", default=None, help="spectral data file to open at startup")
    # Qt consumes its own flags (-style, -platform, ...).
    args, _unknown = parser.parse_known_args(argv)
    return args


def main(argv: Optional[List[str]] = None) -> int:
    _init_logging()
    _install_excepthook()
    args = _parse_args(list(sys.argv[1:] if argv is None else argv))
    app = QApplication(sys.argv)
    win = MainWindow()
    win.show()
    if args.open_path:
        win.open_paths([args.open_path])
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
