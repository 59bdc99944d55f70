from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import pyqtgraph as pg
from pyqtgraph.exporters import ImageExporter
from PySide6.QtCore import QRectF, Qt, QTimer
from PySide6.QtGui import QColor, QPen
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from specviz.spec_plot import visible_spectrum_stops


_logger = logging.getLogger(__name__)

PEN_STYLES = {
    "Solid": Qt.PenStyle.SolidLine,
    "Dash": Qt.PenStyle.DashLine,
    "Dot": Qt.PenStyle.DotLine,
    "Dash dot": Qt.PenStyle.DashDotLine,
    "Dash dot dot": Qt.PenStyle.DashDotDotLine,
}

# Strip height as a fraction of the visible y range.
_STRIP_FRACTION = 0.01


class PlotPanel(QWidget):
    def __init__(
        self,
        *,
        on_status: Optional[Callable[[str], None]] = None,
        on_move: Optional[Callable[[float, float], None]] = None,
        dark: bool = True,
        move_debounce_ms: int = 16,
    ) -> None:
        super().__init__()
        self._on_status = on_status
        self._on_move = on_move
        self._move_debounce_ms = max(0, int(move_debounce_ms))
        self._pending_move: Optional[Tuple[float, float]] = None
        self._move_timer = QTimer(self)
        self._move_timer.setSingleShot(True)
        self._move_timer.timeout.connect(self._flush_move)

        pg.setConfigOptions(antialias=True)
        self._plot = pg.PlotWidget(background=("k" if dark else "w"))
        self._plot.showGrid(x=True, y=True, alpha=0.2)
        self._plot.setMouseEnabled(x=True, y=True)
        self._legend = self._plot.addLegend()

        self._items: Dict[str, pg.PlotDataItem] = {}
        self._tracers: Dict[str, pg.ScatterPlotItem] = {}
        self._trace_enabled = False
        self._vline = pg.InfiniteLine(angle=90, movable=False)

        self._strip = pg.ImageItem(self._strip_image(), levels=(0, 255))
        self._strip.setZValue(-10)
        self._plot.addItem(self._strip, ignoreBounds=True)
        self._plot.getViewBox().sigRangeChanged.connect(self._update_strip)

        self._install_toolbar()
        self._proxy = pg.SignalProxy(self._plot.scene().sigMouseMoved, rateLimit=60, slot=self._on_mouse_moved)
        self._update_strip()

    def _install_toolbar(self) -> None:
        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(0, 0, 0, 0)

        btn_auto = QPushButton("Autoscale")
        btn_auto.clicked.connect(self.auto_scale)
        toolbar.addWidget(btn_auto)

        self._btn_trace = QToolButton()
        self._btn_trace.setText("Trace")
        self._btn_trace.setCheckable(True)
        self._btn_trace.toggled.connect(self.set_trace_enabled)
        toolbar.addWidget(self._btn_trace)

        btn_copy = QPushButton("Copy Image")
        btn_copy.clicked.connect(self.copy_image)
        toolbar.addWidget(btn_copy)

        btn_export = QPushButton("Export Image")
        btn_export.clicked.connect(self._export_image)
        toolbar.addWidget(btn_export)

        toolbar.addStretch(1)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(toolbar)
        layout.addWidget(self._plot, 1)

    @staticmethod
    def _strip_image() -> np.ndarray:
        stops = visible_spectrum_stops(count=200)
        img = np.zeros((len(stops), 1, 3), dtype=np.uint8)
        for i, (_pos, rgb) in enumerate(stops):
            img[i, 0, :] = rgb
        return img

    def _update_strip(self, *_args) -> None:
        (_x0, _x1), (y0, y1) = self._plot.getViewBox().viewRange()
        height = (float(y1) - float(y0)) * _STRIP_FRACTION
        self._strip.setRect(QRectF(380.0, float(y0), 400.0, height))

    def _on_mouse_moved(self, evt) -> None:
        pos = evt[0]
        if not self._plot.sceneBoundingRect().contains(pos):
            return
        point = self._plot.plotItem.vb.mapSceneToView(pos)
        x = float(point.x())
        y = float(point.y())
        if self._move_debounce_ms:
            self._pending_move = (x, y)
            if not self._move_timer.isActive():
                self._move_timer.start(self._move_debounce_ms)
            return
        self._handle_move(x, y)

    def _flush_move(self) -> None:
        if self._pending_move is None:
            return
        x, y = self._pending_move
        self._pending_move = None
        self._handle_move(x, y)

    def _handle_move(self, x: float, y: float) -> None:
        if self._trace_enabled:
            self._vline.setPos(x)
        if self._on_move:
            self._on_move(x, y)

    @property
    def trace_enabled(self) -> bool:
        return self._trace_enabled

    def set_trace_enabled(self, enabled: bool) -> None:
        self._trace_enabled = bool(enabled)
        if self._trace_enabled:
            self._plot.addItem(self._vline, ignoreBounds=True)
        else:
            self._plot.removeItem(self._vline)
            for marker in self._tracers.values():
                marker.setData([], [])
            if self._on_status:
                self._on_status("Ready")

    def show_tracer(self, key: str, x: float, y: float) -> None:
        marker = self._tracers.get(key)
        if marker is None:
            marker = pg.ScatterPlotItem(size=10, pen=pg.mkPen("k"), brush=pg.mkBrush("y"))
            marker.setZValue(10)
            self._plot.addItem(marker, ignoreBounds=True)
            self._tracers[key] = marker
        marker.setData([float(x)], [float(y)])

    def auto_scale(self) -> None:
        self._plot.enableAutoRange()
        self._plot.autoRange()

    def _export_image(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self,
            "Export Plot Image",
            "",
            "PNG (*.png);;JPG (*.jpg *.jpeg);;TIFF (*.tif *.tiff);;All files (*.*)",
        )
        if not path:
            return
        self.export_image_to_path(path)

    def export_image_to_path(self, path: str) -> bool:
        try:
            exporter = ImageExporter(self._plot.plotItem)
            exporter.export(fileName=str(path))
        except Exception as exc:
            _logger.warning("Plot export to %s failed: %s", path, exc)
            if self._on_status:
                self._on_status(f"Export failed: {exc}")
            return False
        if self._on_status:
            self._on_status("Image exported")
        return True

    def copy_image(self) -> None:
        pixmap = self._plot.grab()
        if pixmap.isNull():
            return
        QApplication.clipboard().setPixmap(pixmap)
        if self._on_status:
            self._on_status("Plot copied to clipboard")

    def clear(self) -> None:
        for key in list(self._items.keys()):
            self.remove_curve(key)
        for marker in self._tracers.values():
            self._plot.removeItem(marker)
        self._tracers.clear()
        self.set_labels("", "")

    def plot_curve(self, key: str, x, y, *, name: str, color: str, style: str = "Solid", width: float = 2.0) -> None:
        pen = self._make_pen(color, style, width)
        item = self._items.get(key)
        if item is None:
            item = self._plot.plot(x, y, name=str(name), pen=pen)
            self._items[key] = item
            return
        item.setData(x, y)
        item.setPen(pen)

    def remove_curve(self, key: str) -> None:
        item = self._items.pop(key, None)
        if item is not None:
            self._plot.removeItem(item)
            self._legend.removeItem(item)
        marker = self._tracers.pop(key, None)
        if marker is not None:
            self._plot.removeItem(marker)

    def set_curve_visible(self, key: str, visible: bool) -> None:
        item = self._items.get(key)
        if item is not None:
            item.setVisible(bool(visible))
        marker = self._tracers.get(key)
        if marker is not None and not visible:
            marker.setData([], [])

    def is_curve_visible(self, key: str) -> bool:
        item = self._items.get(key)
        return bool(item is not None and item.isVisible())

    def set_curve_pen(self, key: str, *, color: Optional[str] = None, style: Optional[str] = None) -> None:
        item = self._items.get(key)
        if item is None:
            return
        current: QPen = item.opts.get("pen") if isinstance(item.opts.get("pen"), QPen) else pg.mkPen(item.opts.get("pen"))
        c = color if color is not None else current.color().name()
        st = style if style is not None else _style_name(current.style())
        item.setPen(self._make_pen(c, st, current.widthF() or 2.0))

    def curve_keys(self) -> List[str]:
        return list(self._items.keys())

    def set_labels(self, xlabel: str, ylabel: str) -> None:
        self._plot.setLabel("bottom", str(xlabel))
        self._plot.setLabel("left", str(ylabel))

    @staticmethod
    def _make_pen(color: str, style: str, width: float) -> QPen:
        pen = pg.mkPen(QColor(str(color)), width=float(width))
        pen.setStyle(PEN_STYLES.get(str(style), Qt.PenStyle.SolidLine))
        return pen


def _style_name(style: Qt.PenStyle) -> str:
    for name, value in PEN_STYLES.items():
        if value == style:
            return name
    return "Solid"
