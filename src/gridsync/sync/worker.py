from __future__ import annotations

from typing import List

from PySide6.QtCore import QObject, QRunnable, Signal

from ..models.rows import Row, row_id
from ..models.view_state import ViewState
from .options import FetchFn


class FetchSignals(QObject):
    finished = Signal(int, object)
    failed = Signal(int, object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class FetchWorker(QRunnable):
    """Background worker that pulls one complete chunk from the data source.

    The worker tags its result with the generation it was started for; the
    coordinator decides whether that generation is still current.
    """

    def __init__(self, fetch: FetchFn, view_state: ViewState, generation: int) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._fetch = fetch
        self._view_state = view_state
        self.generation = generation
        self.signals = FetchSignals()

    def run(self) -> None:
        try:
            rows: List[Row] = list(self._fetch(self._view_state))
            # Rows without an id fail here rather than inside the row store.
            for row in rows:
                row_id(row)
        except Exception as exc:
            self.signals.failed.emit(self.generation, exc)
            return
        self.signals.finished.emit(self.generation, rows)
