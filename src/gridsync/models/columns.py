"""Column definitions and column state read by the sort/value overrides."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from .. import config
from .cell_values import Ordering, SortDirection
from .rows import Row, hierarchy_of

ValueGetter = Callable[[Row], Any]
ClipboardGetter = Callable[[Row, Any], Any]
Comparator = Callable[[Any, Any, Row, Row, bool], Ordering]
ColSpan = Callable[[Row], int]
CellClassRule = Callable[[Row], bool]


@dataclass(frozen=True)
class ColumnDef:
    """Declarative description of one table column.

    ``field`` names the row key read when no ``value_getter`` is supplied.
    Overrides are installed with :func:`dataclasses.replace`, so a definition
    handed to the row store is never mutated in place.
    """

    col_id: str
    header: str = ""
    field: Optional[str] = None
    value_getter: Optional[ValueGetter] = None
    clipboard_value_getter: Optional[ClipboardGetter] = None
    comparator: Optional[Comparator] = None
    col_span: Optional[ColSpan] = None
    cell_class_rules: Mapping[str, CellClassRule] = dataclasses.field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.header or self.col_id

    def read_raw(self, row: Row) -> Any:
        """Return the column's own value for *row*, without any override."""
        if self.value_getter is not None:
            return self.value_getter(row)
        return row.get(self.field or self.col_id)

    def span_for(self, row: Row) -> int:
        if self.col_span is None:
            return 1
        return max(1, int(self.col_span(row)))

    def classes_for(self, row: Row) -> frozenset[str]:
        return frozenset(name for name, rule in self.cell_class_rules.items() if rule(row))


@dataclass(frozen=True)
class ColumnState:
    col_id: str
    sort: SortDirection = SortDirection.NONE


ColumnStateProvider = Callable[[], Sequence[ColumnState]]


def default_auto_group_column(header: str = "Group") -> ColumnDef:
    """Tree column showing the last segment of each row's hierarchy path."""

    return ColumnDef(
        col_id=config.AUTO_GROUP_COLUMN_ID,
        header=header,
        value_getter=lambda row: hierarchy_of(row)[-1],
    )


def direction_for(col_id: str, states: Sequence[ColumnState]) -> SortDirection:
    for state in states:
        if state.col_id == col_id:
            return state.sort
    return SortDirection.NONE


__all__ = [
    "CellClassRule",
    "ClipboardGetter",
    "ColSpan",
    "ColumnDef",
    "ColumnState",
    "ColumnStateProvider",
    "Comparator",
    "ValueGetter",
    "default_auto_group_column",
    "direction_for",
]
