"""Table model holding the authoritative row set of one table instance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal

from .. import config
from ..errors import ColumnConfigError
from .cell_values import RealValue, SortSentinel
from .columns import ColumnDef
from .roles import Roles, role_names
from .rows import (
    Row,
    RowTransaction,
    RowTransactionResult,
    hierarchy_of,
    is_loading_row,
    row_id,
)

logger = logging.getLogger(__name__)

RowPredicate = Callable[[Row], bool]


@dataclass(frozen=True)
class RowNode:
    """Position and data of a row currently held by the store."""

    row_index: int
    data: Row

    @property
    def id(self) -> str:
        return row_id(self.data)

    @property
    def is_loading(self) -> bool:
        return is_loading_row(self.data)


def _contiguous_blocks(indexes: Iterable[int]) -> List[tuple[int, int]]:
    """Group *indexes* into ``(first, last)`` blocks, highest block first."""

    blocks: List[tuple[int, int]] = []
    for index in sorted(set(indexes), reverse=True):
        if blocks and blocks[-1][0] == index + 1:
            blocks[-1] = (index, blocks[-1][1])
        else:
            blocks.append((index, index))
    return blocks


class RowStoreModel(QAbstractTableModel):
    """Expose the current row set to Qt views.

    Column 0 is the auto group column when one is configured; the remaining
    columns follow the order of :meth:`set_column_defs`.  Mutations go
    through :meth:`set_row_data` (full replacement) and
    :meth:`apply_transaction` (batched add/update/remove by row id).
    """

    rowDataReplaced = Signal(int)
    transactionApplied = Signal(object)

    def __init__(self, parent=None) -> None:  # type: ignore[override]
        super().__init__(parent)
        self._rows: List[Row] = []
        self._row_lookup: Dict[str, int] = {}
        self._column_defs: List[ColumnDef] = []
        self._auto_group: Optional[ColumnDef] = None
        self._is_row_selectable: Optional[RowPredicate] = None
        self._destroy_called = False

    # ------------------------------------------------------------------
    # Column API
    # ------------------------------------------------------------------
    def set_column_defs(self, column_defs: Sequence[ColumnDef]) -> None:
        seen: set[str] = set()
        for col_def in column_defs:
            if col_def.col_id == config.AUTO_GROUP_COLUMN_ID:
                raise ColumnConfigError(f"Column id {col_def.col_id!r} is reserved for the group column")
            if col_def.col_id in seen:
                raise ColumnConfigError(f"Duplicate column id {col_def.col_id!r}")
            seen.add(col_def.col_id)
        self.beginResetModel()
        self._column_defs = list(column_defs)
        self.endResetModel()

    def set_auto_group_column_def(self, column_def: Optional[ColumnDef]) -> None:
        self.beginResetModel()
        self._auto_group = column_def
        self.endResetModel()

    def get_all_columns(self) -> List[ColumnDef]:
        """Return the regular column definitions, excluding the group column."""
        return list(self._column_defs)

    def auto_group_column_def(self) -> Optional[ColumnDef]:
        return self._auto_group

    def visible_columns(self) -> List[ColumnDef]:
        columns = list(self._column_defs)
        if self._auto_group is not None:
            columns.insert(0, self._auto_group)
        return columns

    def column_def_at(self, column: int) -> Optional[ColumnDef]:
        columns = self.visible_columns()
        if 0 <= column < len(columns):
            return columns[column]
        return None

    def column_index(self, col_id: str) -> int:
        for index, col_def in enumerate(self.visible_columns()):
            if col_def.col_id == col_id:
                return index
        return -1

    # ------------------------------------------------------------------
    # Row API
    # ------------------------------------------------------------------
    def set_row_selectable_predicate(self, predicate: Optional[RowPredicate]) -> None:
        self._is_row_selectable = predicate

    def rows(self) -> List[Row]:
        return list(self._rows)

    def row_ids(self) -> List[str]:
        return [row_id(row) for row in self._rows]

    def row_at(self, row_index: int) -> Optional[Row]:
        if 0 <= row_index < len(self._rows):
            return self._rows[row_index]
        return None

    def get_row_node(self, identifier: str) -> Optional[RowNode]:
        index = self._row_lookup.get(str(identifier))
        if index is None:
            return None
        return RowNode(index, self._rows[index])

    def set_row_data(self, rows: Sequence[Row]) -> None:
        """Replace every row with *rows*; duplicate ids keep their first row."""

        unique = self._dedupe(rows, set())
        self.beginResetModel()
        self._rows = unique
        self._rebuild_lookup()
        self.endResetModel()
        self.rowDataReplaced.emit(len(self._rows))

    def apply_transaction(self, transaction: RowTransaction) -> RowTransactionResult:
        """Apply removals, then updates, then additions (appended at the end)."""

        result = RowTransactionResult()
        if transaction.is_empty():
            return result

        remove_ids = {row_id(row) for row in transaction.remove}
        doomed = [self._row_lookup[key] for key in remove_ids if key in self._row_lookup]
        for first, last in _contiguous_blocks(doomed):
            self.beginRemoveRows(QModelIndex(), first, last)
            removed = self._rows[first:last + 1]
            del self._rows[first:last + 1]
            self.endRemoveRows()
            result.removed.extend(row_id(row) for row in removed)
        if doomed:
            self._rebuild_lookup()

        for row in transaction.update:
            key = row_id(row)
            index = self._row_lookup.get(key)
            if index is None:
                logger.debug("Skipping update for unknown row %s", key)
                continue
            self._rows[index] = dict(row)
            self.dataChanged.emit(
                self.index(index, 0),
                self.index(index, max(0, self.columnCount() - 1)),
            )
            result.updated.append(key)

        additions = self._dedupe(transaction.add, set(self._row_lookup))
        if additions:
            start = len(self._rows)
            self.beginInsertRows(QModelIndex(), start, start + len(additions) - 1)
            self._rows.extend(additions)
            self._rebuild_lookup()
            self.endInsertRows()
            result.added.extend(row_id(row) for row in additions)

        self.transactionApplied.emit(result)
        return result

    def destroy(self) -> None:
        """Mark the store as torn down; later mutations are the caller's bug."""
        self._destroy_called = True

    def is_destroyed(self) -> bool:
        return self._destroy_called

    # ------------------------------------------------------------------
    # QAbstractTableModel API
    # ------------------------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = None) -> int:  # type: ignore[override]
        if parent is not None and parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent: QModelIndex | None = None) -> int:  # type: ignore[override]
        if parent is not None and parent.isValid():
            return 0
        return len(self._column_defs) + (1 if self._auto_group is not None else 0)

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return role_names(super().roleNames())

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):  # type: ignore[override]
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            col_def = self.column_def_at(section)
            if col_def is not None:
                return col_def.title
        return super().headerData(section, orientation, role)

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:  # type: ignore[override]
        if not index.isValid():
            return Qt.NoItemFlags
        flags = Qt.ItemIsEnabled
        row = self._rows[index.row()]
        if self._is_row_selectable is None or self._is_row_selectable(row):
            flags |= Qt.ItemIsSelectable
        return flags

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not 0 <= index.row() < len(self._rows):
            return None
        row = self._rows[index.row()]
        if role == Roles.ROW_ID:
            return row_id(row)
        if role == Roles.IS_LOADING:
            return is_loading_row(row)
        if role == Roles.HIERARCHY:
            return hierarchy_of(row)
        if role == Roles.ROW_DATA:
            return row

        col_def = self.column_def_at(index.column())
        if col_def is None:
            return None
        if role == Qt.DisplayRole:
            return self._display_text(col_def.read_raw(row), row)
        if role == Roles.CELL_VALUE:
            return col_def.read_raw(row)
        if role == Roles.CLIPBOARD:
            return self.export_value(row, col_def)
        if role == Roles.CELL_CLASSES:
            return sorted(col_def.classes_for(row))
        if role == Roles.COL_SPAN:
            return col_def.span_for(row)
        return None

    def export_value(self, row: Row, col_def: ColumnDef) -> Any:
        value = col_def.read_raw(row)
        if col_def.clipboard_value_getter is not None:
            return col_def.clipboard_value_getter(row, value)
        if isinstance(value, RealValue):
            return value.value
        return "" if value is None else value

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _display_text(value: Any, row: Row) -> str:
        # Sentinels only order rows; a real row without a value shows nothing.
        if isinstance(value, SortSentinel) and not is_loading_row(row):
            return ""
        if isinstance(value, (RealValue, SortSentinel)):
            return value.display_text()
        if value is None:
            return ""
        return str(value)

    @staticmethod
    def _dedupe(rows: Iterable[Row], taken: set[str]) -> List[Row]:
        unique: List[Row] = []
        for row in rows:
            key = row_id(row)
            if key in taken:
                logger.warning("Dropping row with duplicate id %s", key)
                continue
            taken.add(key)
            unique.append(dict(row))
        return unique

    def _rebuild_lookup(self) -> None:
        self._row_lookup = {row_id(row): index for index, row in enumerate(self._rows)}


__all__ = ["RowNode", "RowPredicate", "RowStoreModel"]
