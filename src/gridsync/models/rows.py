"""Row representation shared by the row store and the sync engine.

Rows are plain dictionaries keyed by column id.  Two keys are reserved:
``id`` (unique within the row store) and ``hierarchy`` (the path used by the
tree/group column).  Placeholder rows additionally carry ``loading: True``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .. import config

Row = Dict[str, Any]

ROW_ID_KEY = "id"
HIERARCHY_KEY = "hierarchy"
LOADING_KEY = "loading"


def loading_row_id(index: int) -> str:
    return f"{config.LOADING_ROW_PREFIX}{index}"


def build_loading_rows(count: int = config.LOADING_ROW_COUNT) -> Tuple[Row, ...]:
    """Return *count* placeholder rows with ids ``loading0 .. loading<count-1>``."""

    if count < 1:
        raise ValueError(f"Loading row count must be positive, got {count}")
    rows = []
    for index in range(count):
        identifier = loading_row_id(index)
        rows.append(
            {
                LOADING_KEY: True,
                ROW_ID_KEY: identifier,
                HIERARCHY_KEY: [identifier],
            }
        )
    return tuple(rows)


def is_loading_row(row: Optional[Mapping[str, Any]]) -> bool:
    if not row:
        return False
    return bool(row.get(LOADING_KEY, False))


def row_id(row: Mapping[str, Any]) -> str:
    identifier = row.get(ROW_ID_KEY)
    if identifier is None:
        raise KeyError(f"Row has no '{ROW_ID_KEY}' key: {row!r}")
    return str(identifier)


def hierarchy_of(row: Mapping[str, Any]) -> list[str]:
    path = row.get(HIERARCHY_KEY)
    if path:
        return [str(part) for part in path]
    return [row_id(row)]


@dataclass(frozen=True)
class RowTransaction:
    """Batch of row mutations applied to the row store in one step."""

    add: Sequence[Row] = field(default_factory=tuple)
    update: Sequence[Row] = field(default_factory=tuple)
    remove: Sequence[Row] = field(default_factory=tuple)

    def is_empty(self) -> bool:
        return not (self.add or self.update or self.remove)


@dataclass
class RowTransactionResult:
    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


__all__ = [
    "HIERARCHY_KEY",
    "LOADING_KEY",
    "ROW_ID_KEY",
    "Row",
    "RowTransaction",
    "RowTransactionResult",
    "build_loading_rows",
    "hierarchy_of",
    "is_loading_row",
    "loading_row_id",
    "row_id",
]
