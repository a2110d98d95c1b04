"""Table view wired for placeholder rows."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QAbstractItemModel
from PySide6.QtGui import QGuiApplication, QKeySequence
from PySide6.QtWidgets import QAbstractItemView, QTableView, QWidget

from ..models.roles import Roles
from .clipboard import export_indexes

logger = logging.getLogger(__name__)


class SyncTableView(QTableView):
    """QTableView that honours per-row column spans and copies as TSV."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.setSortingEnabled(True)
        self.setWordWrap(False)
        self.verticalHeader().setVisible(False)

    def setModel(self, model: Optional[QAbstractItemModel]) -> None:  # type: ignore[override]
        previous = self.model()
        if previous is not None:
            for signal in (previous.modelReset, previous.layoutChanged, previous.rowsInserted):
                try:
                    signal.disconnect(self.refresh_spans)
                except (TypeError, RuntimeError):  # pragma: no cover - never connected
                    pass
        super().setModel(model)
        if model is not None:
            model.modelReset.connect(self.refresh_spans)
            model.layoutChanged.connect(self.refresh_spans)
            model.rowsInserted.connect(self.refresh_spans)
        self.refresh_spans()

    def refresh_spans(self, *args) -> None:
        """Re-apply the column span reported by column 0 of every row."""

        self.clearSpans()
        model = self.model()
        if model is None or model.columnCount() < 2:
            return
        for row in range(model.rowCount()):
            span = model.index(row, 0).data(Roles.COL_SPAN) or 1
            span = min(int(span), model.columnCount())
            if span > 1:
                self.setSpan(row, 0, 1, span)

    def copy_selection(self) -> str:
        model = self.model()
        if model is None:
            return ""
        text = export_indexes(model, self.selectionModel().selectedIndexes())
        QGuiApplication.clipboard().setText(text)
        logger.debug("Copied %d character(s) to the clipboard", len(text))
        return text

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.matches(QKeySequence.Copy):
            self.copy_selection()
            event.accept()
            return
        super().keyPressEvent(event)


__all__ = ["SyncTableView"]
