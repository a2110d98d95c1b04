"""Role definitions shared by the row store and its views."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from PySide6.QtCore import Qt


class Roles(IntEnum):
    """Custom roles exposed by :class:`RowStoreModel`."""

    ROW_ID = Qt.UserRole + 1
    IS_LOADING = Qt.UserRole + 2
    HIERARCHY = Qt.UserRole + 3
    CELL_VALUE = Qt.UserRole + 4
    CLIPBOARD = Qt.UserRole + 5
    CELL_CLASSES = Qt.UserRole + 6
    COL_SPAN = Qt.UserRole + 7
    ROW_DATA = Qt.UserRole + 8


def role_names(base: Dict[int, bytes] | None = None) -> Dict[int, bytes]:
    """Return a mapping of Qt role numbers to byte names."""

    mapping: Dict[int, bytes] = {} if base is None else dict(base)
    mapping.update(
        {
            Roles.ROW_ID: b"rowId",
            Roles.IS_LOADING: b"isLoading",
            Roles.HIERARCHY: b"hierarchy",
            Roles.CELL_VALUE: b"cellValue",
            Roles.CLIPBOARD: b"clipboard",
            Roles.CELL_CLASSES: b"cellClasses",
            Roles.COL_SPAN: b"colSpan",
            Roles.ROW_DATA: b"rowData",
        }
    )
    return mapping
