"""Sort/filter proxy that keeps placeholder rows stable during fetches."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from PySide6.QtCore import QAbstractItemModel, QModelIndex, QSortFilterProxyModel, Qt, Signal

from .cell_values import Ordering, RealValue, SortDirection, SortSentinel, compare_cell_values
from .columns import ColumnState
from .row_store import RowStoreModel
from .rows import Row
from .view_state import ViewState

logger = logging.getLogger(__name__)


class LoadingAwareProxyModel(QSortFilterProxyModel):
    """Client-side sort/filter layer in front of :class:`RowStoreModel`.

    Sorting and filtering stay fully interactive: header clicks and filter
    edits update the proxy and are re-emitted as ``sortChanged`` and
    ``filterChanged`` so the sync engine can request server-side data.  The
    client-side order of real rows is left alone unless ``client_side_sort``
    is enabled; placeholder rows are positioned by the column comparators.
    """

    filterChanged = Signal(object)
    sortChanged = Signal(object)

    def __init__(self, parent=None, *, client_side_sort: bool = False) -> None:  # type: ignore[override]
        super().__init__(parent)
        self._filters: Dict[str, str] = {}
        self._client_side_sort = client_side_sort
        self._is_filter_skipped: Optional[Callable[[Row], bool]] = None
        self._store: Optional[RowStoreModel] = None
        self.setDynamicSortFilter(True)
        self.setFilterCaseSensitivity(Qt.CaseInsensitive)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def setSourceModel(self, sourceModel: QAbstractItemModel | None) -> None:  # type: ignore[override]
        if sourceModel is not None and not isinstance(sourceModel, RowStoreModel):
            raise TypeError("LoadingAwareProxyModel requires a RowStoreModel source")
        self._store = sourceModel
        super().setSourceModel(sourceModel)

    def store(self) -> Optional[RowStoreModel]:
        return self._store

    def set_filter_skip_predicate(self, predicate: Optional[Callable[[Row], bool]]) -> None:
        with self._filter_change():
            self._is_filter_skipped = predicate

    def set_column_filter(self, col_id: str, text: Optional[str]) -> None:
        """Set the text filter of *col_id*; an empty value removes it."""

        normalized = (text or "").strip().casefold()
        if self._filters.get(col_id, "") == normalized:
            return
        with self._filter_change():
            if normalized:
                self._filters[col_id] = normalized
            else:
                self._filters.pop(col_id, None)
        self.filterChanged.emit(dict(self._filters))

    def clear_filters(self) -> None:
        if not self._filters:
            return
        with self._filter_change():
            self._filters.clear()
        self.filterChanged.emit({})

    def filters(self) -> Dict[str, str]:
        return dict(self._filters)

    def sort_direction(self) -> SortDirection:
        if self.sortColumn() < 0:
            return SortDirection.NONE
        if self.sortOrder() == Qt.DescendingOrder:
            return SortDirection.DESC
        return SortDirection.ASC

    def column_state(self) -> List[ColumnState]:
        """Return the sort state of every visible column."""

        if self._store is None:
            return []
        active = self.sortColumn()
        direction = self.sort_direction()
        return [
            ColumnState(col_def.col_id, direction if index == active else SortDirection.NONE)
            for index, col_def in enumerate(self._store.visible_columns())
        ]

    def view_state(self, payload: Any = None) -> ViewState:
        return ViewState.build(self.column_state(), self._filters, payload)

    # ------------------------------------------------------------------
    # QSortFilterProxyModel API
    # ------------------------------------------------------------------
    def sort(self, column: int, order: Qt.SortOrder = Qt.AscendingOrder) -> None:  # type: ignore[override]
        super().sort(column, order)
        logger.debug("Sort changed: column=%s order=%s", column, order)
        self.sortChanged.emit(self.column_state())

    def filterAcceptsRow(self, source_row: int, source_parent: QModelIndex) -> bool:  # type: ignore[override]
        if self._store is None:
            return False
        row = self._store.row_at(source_row)
        if row is None:
            return False
        if self._is_filter_skipped is not None and self._is_filter_skipped(row):
            return True
        for col_id, needle in self._filters.items():
            column = self._store.column_index(col_id)
            col_def = self._store.column_def_at(column)
            if col_def is None:
                continue
            if needle not in self._filter_text(col_def.read_raw(row)):
                return False
        return True

    def lessThan(self, left: QModelIndex, right: QModelIndex) -> bool:  # type: ignore[override]
        """Translate the display-order comparator result into Qt's contract.

        Qt reverses ``lessThan`` for descending sorts, so a display-order
        ``LESS_THAN`` maps to ``True`` when ascending and ``False`` when
        descending.
        """

        descending = self.sortOrder() == Qt.DescendingOrder
        if self._store is None:
            return False
        col_def = self._store.column_def_at(left.column())
        left_row = self._store.row_at(left.row())
        right_row = self._store.row_at(right.row())
        if col_def is None or left_row is None or right_row is None:
            return False

        left_value = col_def.read_raw(left_row)
        right_value = col_def.read_raw(right_row)
        ordering = Ordering.NO_OPINION
        if col_def.comparator is not None:
            ordering = col_def.comparator(left_value, right_value, left_row, right_row, descending)
        if ordering is not Ordering.NO_OPINION:
            return (ordering is Ordering.LESS_THAN) != descending

        if self._client_side_sort:
            result = compare_cell_values(self._as_cell(left_value), self._as_cell(right_value))
            if result != 0:
                return result < 0
        # Keep the order the server delivered.  Qt reverses the comparison
        # when descending, so the source order is reversed here to cancel it.
        if descending:
            return left.row() > right.row()
        return left.row() < right.row()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _filter_change(self) -> Iterator[None]:
        """Bracket a change of the row filter state.

        Qt 6.10 replaced ``invalidateFilter`` with the
        ``beginFilterChange``/``endFilterChange`` pair; older bindings only
        offer the invalidation call.
        """

        if not hasattr(self, "beginFilterChange"):
            try:
                yield
            finally:
                self.invalidateRowsFilter()
            return
        self.beginFilterChange()
        try:
            yield
        finally:
            self.endFilterChange()

    @staticmethod
    def _filter_text(value: Any) -> str:
        if isinstance(value, SortSentinel) or value is None:
            return ""
        if isinstance(value, RealValue):
            value = value.value
        return str(value).casefold()

    @staticmethod
    def _as_cell(value: Any):
        if isinstance(value, (RealValue, SortSentinel)):
            return value
        if value is None:
            return SortSentinel(SortDirection.DESC)
        return RealValue(value)


__all__ = ["LoadingAwareProxyModel"]
