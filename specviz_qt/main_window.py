from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QAction, QColor, QDesktopServices, QIcon, QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QFileDialog,
    QHeaderView,
    QLabel,
    QMainWindow,
    QMenu,
    QProgressBar,
    QSplitter,
    QStatusBar,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from specviz import spec_io
from specviz.settings import load_settings, update_setting
from specviz.spec_model import SpecDataset
from specviz.spec_plot import (
    COLOR_CHOICES,
    LINE_STYLES,
    channel_series,
    color_choice_index,
    default_channel_color,
    describe,
    trace_values,
)
from specviz_qt.services import DialogService, RecentFilesService, StatusService, read_in_worker
from specviz_qt.widgets.plot_panel import PlotPanel


_logger = logging.getLogger(__name__)

APP_TITLE = "Specviz"
GITHUB_URL = "https://github.com/mikaelsundell/specviz"


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.resize(1280, 800)
        self.setAcceptDrops(True)

        self._settings = load_settings()
        self._datasets: List[SpecDataset] = []
        self._curve_keys: Dict[int, List[str]] = {}
        self._recent_menu: Optional[QMenu] = None

        self._status_label = QLabel("Ready")
        self._dataset_label = QLabel("")
        self._progress = QProgressBar()
        self._progress.setRange(0, 0)
        self._progress.setVisible(False)

        self.status_service = StatusService(
            set_text=self._status_label.setText,
            set_busy=self._progress.setVisible,
        )
        self.dialog_service = DialogService(self)
        self.recent_files = RecentFilesService()

        self._init_ui()
        self._enable(False)

    def _init_ui(self) -> None:
        self._tree = QTreeWidget()
        self._tree.setHeaderLabels(["Name", "Style", "File"])
        self._tree.setColumnWidth(0, 160)
        self._tree.header().setSectionResizeMode(2, QHeaderView.Stretch)
        self._tree.itemChanged.connect(self._on_item_changed)
        self._tree.itemSelectionChanged.connect(self._on_selection_changed)

        self._header_tree = QTreeWidget()
        self._header_tree.setHeaderLabels(["Name", "Value"])
        self._header_tree.setColumnWidth(0, 160)
        self._header_tree.header().setSectionResizeMode(1, QHeaderView.Stretch)

        left_split = QSplitter(Qt.Vertical)
        left_split.addWidget(self._tree)
        left_split.addWidget(self._header_tree)
        left_split.setStretchFactor(0, 3)
        left_split.setStretchFactor(1, 1)

        self._plot = PlotPanel(
            on_status=self.status_service.set_status,
            on_move=self._on_plot_move,
            dark=(self._settings.get("theme") == "dark"),
        )

        right = QWidget()
        right_layout = QVBoxLayout(right)
        right_layout.setContentsMargins(0, 0, 0, 0)
        right_layout.addWidget(self._plot, 1)

        root = QSplitter(Qt.Horizontal)
        root.setChildrenCollapsible(False)
        root.addWidget(left_split)
        root.addWidget(right)
        root.setStretchFactor(0, 1)
        root.setStretchFactor(1, 3)
        self.setCentralWidget(root)

        self._build_menu()
        self._build_status_bar()

    def _build_menu(self) -> None:
        menu = self.menuBar()

        file_menu = menu.addMenu("File")
        open_action = QAction("Open...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.open_dialog)
        file_menu.addAction(open_action)

        self._recent_menu = file_menu.addMenu("Recent Files")
        self._refresh_recent_menu()

        self._export_action = QAction("Export Selected...", self)
        self._export_action.setShortcut("Ctrl+E")
        self._export_action.triggered.connect(self.export_selected)
        file_menu.addAction(self._export_action)

        file_menu.addSeparator()
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        edit_menu = menu.addMenu("Edit")
        self._copy_image_action = QAction("Copy Image", self)
        self._copy_image_action.triggered.connect(self._plot.copy_image)
        edit_menu.addAction(self._copy_image_action)

        self._copy_data_action = QAction("Copy Data", self)
        self._copy_data_action.triggered.connect(self.copy_selected_data)
        edit_menu.addAction(self._copy_data_action)

        edit_menu.addSeparator()
        self._clear_action = QAction("Clear", self)
        self._clear_action.triggered.connect(self.clear)
        edit_menu.addAction(self._clear_action)

        help_menu = menu.addMenu("Help")
        readme_action = QAction("README", self)
        readme_action.triggered.connect(lambda: QDesktopServices.openUrl(QUrl(f"{GITHUB_URL}/blob/master/README.md")))
        help_menu.addAction(readme_action)
        issues_action = QAction("Report an Issue", self)
        issues_action.triggered.connect(lambda: QDesktopServices.openUrl(QUrl(f"{GITHUB_URL}/issues")))
        help_menu.addAction(issues_action)
        about_action = QAction("About", self)
        about_action.triggered.connect(self._about)
        help_menu.addAction(about_action)

    def _build_status_bar(self) -> None:
        bar = QStatusBar()
        bar.addWidget(self._dataset_label, 1)
        bar.addWidget(self._status_label)
        bar.addPermanentWidget(self._progress)
        self.setStatusBar(bar)

    def _enable(self, enabled: bool) -> None:
        for action in (self._export_action, self._copy_image_action, self._copy_data_action, self._clear_action):
            action.setEnabled(bool(enabled))

    # Loading

    def open_dialog(self) -> None:
        open_dir = self._settings.get("open_dir") or str(Path.home())
        paths, _ = QFileDialog.getOpenFileNames(self, "Open spectral data file", open_dir, spec_io.dialog_filter())
        self.open_paths(paths)

    def open_paths(self, paths: List[str]) -> None:
        todo = [p for p in paths if p and spec_io.is_supported(p)]
        skipped = [p for p in paths if p and p not in todo]
        for p in skipped:
            _logger.info("Ignoring unsupported file: %s", p)
        if not todo:
            return
        read_in_worker(
            todo,
            self._on_dataset_read,
            on_error=self.dialog_service.read_error,
            status=self.status_service,
        )

    def _on_dataset_read(self, path: str, ds: SpecDataset) -> None:
        if not ds.loaded:
            self.recent_files.remove_recent(path)
            self._refresh_recent_menu()
            self.dialog_service.open_failed(path)
            return
        self._add_dataset(ds)
        self._settings = update_setting("open_dir", str(Path(path).parent))
        self.recent_files.add_recent(path)
        self._refresh_recent_menu()
        self.status_service.loaded(path, len(ds.data), ds.channel_count)

    def _add_dataset(self, ds: SpecDataset) -> None:
        pos = len(self._datasets)
        self._datasets.append(ds)

        self._tree.blockSignals(True)
        root = QTreeWidgetItem(self._tree)
        root.setText(0, ds.name)
        root.setText(2, ds.path.name if ds.path else "")
        root.setCheckState(0, Qt.Checked)
        root.setData(0, Qt.UserRole, pos)

        style_combo = QComboBox(self._tree)
        style_combo.addItems(LINE_STYLES)
        style_combo.currentTextChanged.connect(lambda style, p=pos: self._set_dataset_style(p, style))
        self._tree.setItemWidget(root, 1, style_combo)

        keys: List[str] = []
        for i, label in enumerate(ds.indices):
            key = f"{pos}:{i}"
            color = default_channel_color(label, i)
            x, y = channel_series(ds, i)
            self._plot.plot_curve(key, x, y, name=str(label), color=color)
            keys.append(key)

            child = QTreeWidgetItem(root)
            child.setText(0, str(label))
            child.setCheckState(0, Qt.Checked)
            child.setData(0, Qt.UserRole, key)
            self._tree.setItemWidget(child, 1, self._color_combo(key, color))

        self._curve_keys[pos] = keys
        self._tree.blockSignals(False)

        self._tree.expandItem(root)
        self._tree.setCurrentItem(root)
        self._enable(True)

    def _color_combo(self, key: str, color: str) -> QComboBox:
        combo = QComboBox(self._tree)
        for name, hexcode in COLOR_CHOICES:
            swatch = QPixmap(16, 16)
            swatch.fill(QColor(hexcode))
            combo.addItem(QIcon(swatch), name, hexcode)
        idx = color_choice_index(color)
        if idx < 0:
            swatch = QPixmap(16, 16)
            swatch.fill(QColor(color))
            combo.addItem(QIcon(swatch), "Auto", color)
            idx = combo.count() - 1
        combo.setCurrentIndex(idx)
        combo.currentIndexChanged.connect(lambda i, c=combo, k=key: self._plot.set_curve_pen(k, color=str(c.itemData(i))))
        return combo

    def _set_dataset_style(self, pos: int, style: str) -> None:
        for key in self._curve_keys.get(pos, []):
            self._plot.set_curve_pen(key, style=style)

    # Selection

    def _current_dataset(self) -> Optional[SpecDataset]:
        item = self._tree.currentItem()
        while item is not None and item.parent() is not None:
            item = item.parent()
        if item is None:
            return None
        pos = item.data(0, Qt.UserRole)
        if not isinstance(pos, int) or pos < 0 or pos >= len(self._datasets):
            return None
        return self._datasets[pos]

    def _on_selection_changed(self) -> None:
        ds = self._current_dataset()
        self._header_tree.clear()
        if ds is None:
            return
        header_item = QTreeWidgetItem(self._header_tree)
        header_item.setText(0, "header")
        for key, value in ds.header.items():
            meta = QTreeWidgetItem(header_item)
            meta.setText(0, str(key))
            meta.setText(1, "" if value is None else str(value))
        self._header_tree.expandItem(header_item)

        self._plot.set_labels("wavelength (nm)", f"{ds.units} (selected)" if ds.units else "")
        self._plot.auto_scale()
        self._dataset_label.setText(describe(ds))

    def _on_item_changed(self, item: QTreeWidgetItem, column: int) -> None:
        if column != 0:
            return
        if item.parent() is None:
            state = item.checkState(0)
            for i in range(item.childCount()):
                item.child(i).setCheckState(0, state)
            return
        key = item.data(0, Qt.UserRole)
        if key:
            self._plot.set_curve_visible(str(key), item.checkState(0) == Qt.Checked)

    def _on_plot_move(self, x: float, _y: float) -> None:
        ds = self._current_dataset()
        message = ds.name if ds is not None else ""
        if self._plot.trace_enabled:
            parts: List[str] = []
            for pos, sds in enumerate(self._datasets):
                values = trace_values(sds, x)
                for key, (label, y) in zip(self._curve_keys.get(pos, []), values):
                    if not self._plot.is_curve_visible(key):
                        continue
                    self._plot.show_tracer(key, x, y)
                    parts.append(f"{label}: {x:.2f}, {y:.3f}")
            if parts:
                message = f"{message}  " + "  ".join(parts)
        self._dataset_label.setText(message.strip())

    # Export

    def export_selected(self) -> None:
        ds = self._current_dataset()
        if ds is None:
            return
        save_dir = self._settings.get("save_dir") or str(Path.home())
        filename, _ = QFileDialog.getSaveFileName(self, "Export spectral dataset", save_dir, spec_io.dialog_filter())
        if not filename:
            return
        self._settings = update_setting("save_dir", str(Path(filename).parent))
        if not spec_io.write(ds, filename):
            self.dialog_service.export_failed(filename)
            return
        self.status_service.exported(filename)

    def copy_selected_data(self) -> None:
        ds = self._current_dataset()
        if ds is None:
            return
        text = ds.to_frame().to_csv(sep="\t")
        QApplication.clipboard().setText(text)
        self.status_service.set_status("Data copied to clipboard")

    def clear(self) -> None:
        if not self._datasets:
            return
        if not self.dialog_service.confirm_clear(len(self._datasets)):
            return
        self._tree.blockSignals(True)
        self._tree.clear()
        self._tree.blockSignals(False)
        self._header_tree.clear()
        self._plot.clear()
        self._datasets = []
        self._curve_keys = {}
        self._dataset_label.setText("")
        self._enable(False)

    # Recent files

    def _refresh_recent_menu(self) -> None:
        if self._recent_menu is None:
            return
        self._recent_menu.clear()
        items = self.recent_files.list_recent()
        if not items:
            empty = QAction("(empty)", self)
            empty.setEnabled(False)
            self._recent_menu.addAction(empty)
            return
        for path in items:
            action = QAction(path, self)
            action.triggered.connect(lambda _checked=False, p=path: self.open_paths([p]))
            self._recent_menu.addAction(action)

    def _about(self) -> None:
        self.dialog_service.about(APP_TITLE, spec_io.available_extensions())

    # Drag and drop

    def dragEnterEvent(self, event) -> None:
        mime = event.mimeData()
        if mime.hasUrls() and any(spec_io.is_supported(u.toLocalFile()) for u in mime.urls()):
            event.acceptProposedAction()
            return
        event.ignore()

    def dropEvent(self, event) -> None:
        paths = [u.toLocalFile() for u in event.mimeData().urls()]
        self.open_paths([p for p in paths if spec_io.is_supported(p)])
