from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Set, Union

from specviz.ampas_io import AmpasFile
from specviz.argyll_io import ArgyllFile
from specviz.spec_model import SpecDataset, SpecHandler, not_loaded


_logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def available_handlers() -> List[SpecHandler]:
    """Registered handlers in priority order; the first claim on an extension wins."""
    return [AmpasFile(), ArgyllFile()]


def _extension(filename: PathLike) -> str:
    return Path(str(filename)).suffix.lower().lstrip(".")


def handler_for(filename: PathLike, handlers: Optional[Sequence[SpecHandler]] = None) -> Optional[SpecHandler]:
    ext = _extension(filename)
    if not ext:
        return None
    for handler in (handlers if handlers is not None else available_handlers()):
        if handler.claims(ext):
            return handler
    return None


def available_extensions(handlers: Optional[Sequence[SpecHandler]] = None) -> Set[str]:
    exts: Set[str] = set()
    for handler in (handlers if handlers is not None else available_handlers()):
        exts.update(str(e).lower() for e in handler.extensions)
    return exts


def dialog_filter(handlers: Optional[Sequence[SpecHandler]] = None) -> str:
    patterns = " ".join(f"*.{ext}" for ext in sorted(available_extensions(handlers)))
    return f"Spectral data files ({patterns})"


def is_supported(filename: PathLike) -> bool:
    return _extension(filename) in available_extensions()


def read(filename: PathLike) -> SpecDataset:
    p = Path(str(filename))
    handler = handler_for(p)
    if handler is None:
        _logger.warning("No reader for %s", p)
        return not_loaded(p)
    try:
        return handler.read(p)
    except Exception:
        _logger.exception("%s reader failed on %s", handler.name, p)
        return not_loaded(p)


def write(dataset: SpecDataset, filename: PathLike) -> bool:
    p = Path(str(filename))
    handler = handler_for(p)
    if handler is None:
        _logger.warning("No writer for %s", p)
        return False
    try:
        ok = bool(handler.write(dataset, p))
    except Exception:
        _logger.exception("%s writer failed on %s", handler.name, p)
        return False
    if ok:
        _logger.info("Wrote %s (%s)", p, handler.name)
    return ok
