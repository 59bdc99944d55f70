from __future__ import annotations

from specviz_qt.main import main


if __name__ == "__main__":
    raise SystemExit(main())
