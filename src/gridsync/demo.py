"""Interactive demo table backed by a simulated remote source."""

from __future__ import annotations

import logging
import sys
import time
from typing import List, Optional, Sequence

from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from . import config
from .models.cell_values import SortDirection
from .models.columns import ColumnDef
from .models.proxy import LoadingAwareProxyModel
from .models.row_store import RowStoreModel
from .models.rows import Row
from .models.view_state import ViewState
from .settings.options import SyncSettings
from .sync.feature import HybridServerSideFeature
from .sync.options import HybridServerSideOptions
from .utils.console_logger import configure_console_logging
from .widgets.table_view import SyncTableView

logger = logging.getLogger(__name__)

DEMO_COLUMNS = (
    ColumnDef("name", "Name"),
    ColumnDef("kind", "Kind"),
    ColumnDef("size", "Size"),
)

_KINDS = ("image", "video", "document", "archive")


def generate_rows(count: int) -> List[Row]:
    rows: List[Row] = []
    for index in range(count):
        identifier = f"item{index:04d}"
        rows.append(
            {
                "id": identifier,
                "hierarchy": [identifier],
                "name": f"File {index:04d}",
                "kind": _KINDS[index % len(_KINDS)],
                "size": (index * 7919) % 100_000,
            }
        )
    return rows


class SimulatedRemoteSource(QObject):
    """In-memory stand-in for a paging server.

    :meth:`fetch` runs on a worker thread, sleeps for ``latency`` seconds and
    returns the rows sorted and filtered the way a server would.  The busy
    flag is reported through a Qt signal so it reaches ``options.loading`` on
    the thread that owns this object.
    """

    _busyChanged = Signal(bool)

    def __init__(self, rows: Sequence[Row], latency: float, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._rows = list(rows)
        self._latency = max(0.0, latency)
        self.options = HybridServerSideOptions(fetch=self.fetch, table_id="demo")
        self._busyChanged.connect(self._publish_loading)

    def fetch(self, view_state: ViewState) -> List[Row]:
        self._busyChanged.emit(True)
        try:
            time.sleep(self._latency)
            return self.query(view_state)
        finally:
            self._busyChanged.emit(False)

    def query(self, view_state: ViewState) -> List[Row]:
        rows = self._rows
        for col_id, needle in view_state.filter_model.items():
            rows = [row for row in rows if needle in str(row.get(col_id, "")).casefold()]
        for state in reversed(view_state.sort_model):
            key = "id" if state.col_id == config.AUTO_GROUP_COLUMN_ID else state.col_id
            rows = sorted(
                rows,
                key=lambda row: row.get(key),
                reverse=state.sort is SortDirection.DESC,
            )
        return list(rows)

    @Slot(bool)
    def _publish_loading(self, busy: bool) -> None:
        self.options.loading.emit(busy)


class DemoWindow(QMainWindow):
    def __init__(self, source: SimulatedRemoteSource, settings: Optional[SyncSettings] = None) -> None:
        super().__init__()
        self.setWindowTitle("gridsync demo")
        self.resize(720, 540)

        self.store = RowStoreModel(self)
        self.store.set_column_defs(DEMO_COLUMNS)
        self.proxy = LoadingAwareProxyModel(self)
        self.proxy.setSourceModel(self.store)
        self.feature = HybridServerSideFeature(source.options, settings=settings, parent=self)
        self.feature.on_grid_ready(self.store, self.proxy)

        setup = self.feature.feature_setup()
        self.table = SyncTableView()
        self.table.setItemDelegate(setup.renderer(self.table))
        self.table.setModel(self.proxy)

        self.filter_edit = QLineEdit()
        self.filter_edit.setPlaceholderText("Filter by name")
        self.filter_edit.textChanged.connect(
            lambda text: self.proxy.set_column_filter("name", text)
        )
        refresh = QPushButton("Refresh")
        refresh.clicked.connect(lambda: source.options.additional_trigger.emit("refresh"))

        toolbar = QHBoxLayout()
        toolbar.addWidget(self.filter_edit)
        toolbar.addWidget(refresh)
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addLayout(toolbar)
        layout.addWidget(self.table)
        self.setCentralWidget(central)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.feature.dispose()
        self.store.destroy()
        super().closeEvent(event)


def main(
    argv: list[str] | None = None,
    *,
    rows: int = 500,
    latency: float = 1.0,
    verbose: bool = False,
) -> int:
    """Launch the demo window and return the exit code."""

    arguments = list(sys.argv if argv is None else argv)
    configure_console_logging(verbose)
    app = QApplication.instance() or QApplication(arguments)
    source = SimulatedRemoteSource(generate_rows(rows), latency)
    window = DemoWindow(source)
    window.show()
    logger.info("Demo started with %d rows and %.1fs latency", rows, latency)
    source.options.additional_trigger.emit("initial")
    return app.exec()


if __name__ == "__main__":  # pragma: no cover - manual launch
    raise SystemExit(main())
