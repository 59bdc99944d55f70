from __future__ import annotations

import logging
import os
import threading
import time
import traceback
from typing import Callable, List, Optional, Sequence

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

from specviz import spec_io
from specviz.spec_model import SpecDataset
from specviz_qt.services.status_service import StatusService


_logger = logging.getLogger(__name__)
_THREADPOOL_READY = False


def _init_threadpool() -> None:
    global _THREADPOOL_READY
    if _THREADPOOL_READY:
        return
    pool = QThreadPool.globalInstance()
    max_threads_raw = os.getenv("SPECVIZ_MAX_THREADS", "").strip()
    if max_threads_raw:
        try:
            pool.setMaxThreadCount(max(1, int(max_threads_raw)))
        except ValueError:
            _logger.warning("Ignoring SPECVIZ_MAX_THREADS=%r", max_threads_raw)
    else:
        pool.setMaxThreadCount(max(1, min(2, os.cpu_count() or 1)))
    _THREADPOOL_READY = True


class _ReadSignals(QObject):
    # (path, dataset); dataset.loaded tells success apart from failure
    dataset = Signal(str, object)
    error = Signal(str)
    finished = Signal()


class _ReadTask(QRunnable):
    def __init__(self, paths: Sequence[str]) -> None:
        super().__init__()
        self.paths = [str(p) for p in paths]
        self.signals = _ReadSignals()

    @Slot()
    def run(self) -> None:
        start = time.perf_counter()
        thread_name = threading.current_thread().name
        _logger.info("Read start (%s): %d file(s)", thread_name, len(self.paths))
        try:
            for path in self.paths:
                self.signals.dataset.emit(path, spec_io.read(path))
        except Exception:
            _logger.exception("Read error (%s)", thread_name)
            self.signals.error.emit(traceback.format_exc())
        finally:
            elapsed = time.perf_counter() - start
            _logger.info("Read finished (%s): %d file(s) (%.3fs)", thread_name, len(self.paths), elapsed)
            self.signals.finished.emit()


def read_in_worker(
    paths: Sequence[str],
    on_dataset: Callable[[str, SpecDataset], None],
    on_error: Optional[Callable[[str], None]] = None,
    on_finished: Optional[Callable[[], None]] = None,
    *,
    status: Optional[StatusService] = None,
) -> List[str]:
    """Read `paths` off the GUI thread; callbacks run on the GUI thread."""
    _init_threadpool()
    todo = [str(p) for p in paths if p]
    if not todo:
        return todo
    task = _ReadTask(todo)
    task.signals.dataset.connect(on_dataset)
    if on_error is not None:
        task.signals.error.connect(on_error)
    if on_finished is not None:
        task.signals.finished.connect(on_finished)

    if status is not None:
        status.reading(len(todo))
        task.signals.finished.connect(status.read_done)

    QThreadPool.globalInstance().start(task)
    return todo
