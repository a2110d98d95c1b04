"""Tab-separated export of selected cells."""

from __future__ import annotations

from typing import Dict, Iterable, List

from PySide6.QtCore import QAbstractItemModel, QModelIndex

from ..models.roles import Roles


def export_indexes(model: QAbstractItemModel, indexes: Iterable[QModelIndex]) -> str:
    """Return the clipboard text for *indexes*, one line per view row.

    Cells are read through ``Roles.CLIPBOARD`` so placeholder rows export as
    empty strings.  Gaps inside the selected rectangle stay empty too.
    """

    grid: Dict[int, Dict[int, str]] = {}
    columns: set[int] = set()
    for index in indexes:
        if not index.isValid():
            continue
        value = model.data(index, Roles.CLIPBOARD)
        grid.setdefault(index.row(), {})[index.column()] = "" if value is None else str(value)
        columns.add(index.column())

    if not grid:
        return ""
    ordered_columns = sorted(columns)
    lines: List[str] = []
    for row in sorted(grid):
        cells = grid[row]
        lines.append("\t".join(cells.get(column, "") for column in ordered_columns))
    return "\n".join(lines)


__all__ = ["export_indexes"]
