"""Keep the placeholder rows in step with the data source's loading flag."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from ..events.bus import EventBus
from ..events.sync_events import LoadingRowsChangedEvent
from ..models.row_store import RowStoreModel
from ..models.rows import Row, RowTransaction, row_id

logger = logging.getLogger(__name__)


class LoadingStateReconciler:
    """Insert or remove the placeholder batch whenever the loading flag changes.

    Presence is read from the row store on every emission instead of being
    tracked locally, so the reconciler also copes with the fetch coordinator
    wiping the placeholders as part of a full row replacement.
    """

    def __init__(
        self,
        store: RowStoreModel,
        loading_rows: Sequence[Row],
        *,
        is_alive: Optional[Callable[[], bool]] = None,
        table_id: Optional[str] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        if not loading_rows:
            raise ValueError("LoadingStateReconciler needs at least one loading row")
        self._store = store
        self._loading_rows = tuple(loading_rows)
        self._probe_id = row_id(self._loading_rows[0])
        self._is_alive = is_alive
        self._table_id = table_id
        self._events = event_bus
        self._sources: list[Any] = []
        self._disposed = False

    def attach(self, loading_signal: Any) -> None:
        loading_signal.connect(self.on_loading_changed)
        self._sources.append(loading_signal)

    def has_loading_rows(self) -> bool:
        return self._store.get_row_node(self._probe_id) is not None

    def on_loading_changed(self, is_loading: bool) -> None:
        if not self._alive():
            logger.debug("Ignoring loading=%s on a torn down table", is_loading)
            return

        present = self.has_loading_rows()
        if present and not is_loading:
            self._store.apply_transaction(RowTransaction(remove=self._loading_rows))
            self._notify(False)
        elif not present and is_loading:
            self._store.apply_transaction(RowTransaction(add=self._loading_rows))
            self._notify(True)

    def dispose(self) -> None:
        self._disposed = True
        for source in self._sources:
            try:
                source.disconnect(self.on_loading_changed)
            except (TypeError, RuntimeError, ValueError):  # pragma: no cover - already gone
                pass
        self._sources.clear()

    def _alive(self) -> bool:
        if self._disposed or self._store.is_destroyed():
            return False
        return self._is_alive() if self._is_alive is not None else True

    def _notify(self, present: bool) -> None:
        logger.debug(
            "%s %d loading row(s)", "Inserted" if present else "Removed", len(self._loading_rows)
        )
        if self._events is not None:
            self._events.publish(
                LoadingRowsChangedEvent(
                    table_id=self._table_id,
                    present=present,
                    row_ids=tuple(row_id(row) for row in self._loading_rows),
                )
            )


__all__ = ["LoadingStateReconciler"]
