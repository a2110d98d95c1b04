"""Loading-aware overrides for column value getters and comparators.

The server owns the real ordering of the data, but the item view still
sorts client-side whenever the user clicks a header.  Rather than switching
sorting off (which would hide the sort indicator and stop the header clicks
that request a server-side sort) every column gets:

* a value getter that returns a :class:`SortSentinel` for placeholder rows
  and for rows without a value, so they land at one end of the ordering;
* a clipboard getter that exports placeholder and aggregate cells as empty
  strings instead of the sentinel;
* a comparator that only has an opinion when a placeholder row is involved
  and otherwise lets the view keep the server's order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from .. import config
from .cell_values import (
    CellValue,
    Ordering,
    RealValue,
    SortDirection,
    SortSentinel,
    compare_cell_values,
    is_aggregation,
)
from .columns import (
    ClipboardGetter,
    ColumnDef,
    ColumnStateProvider,
    ValueGetter,
    direction_for,
)
from .rows import Row, is_loading_row

logger = logging.getLogger(__name__)


def _sentinel_for(direction: SortDirection, max_codepoint: int) -> SortSentinel:
    # Ascending pushes to the end via the maximum; descending and unsorted
    # columns use the minimum, which also ends up last once reversed.
    return SortSentinel(
        SortDirection.ASC if direction is SortDirection.ASC else SortDirection.DESC,
        max_codepoint,
    )


def make_value_getter(
    col_def: ColumnDef,
    column_state: ColumnStateProvider,
    *,
    max_codepoint: int = config.SENTINEL_MAX_CODEPOINT,
) -> ValueGetter:
    """Wrap the value accessor of *col_def* so it always yields a :data:`CellValue`."""

    def getter(row: Row) -> CellValue:
        direction = direction_for(col_def.col_id, column_state())
        if is_loading_row(row):
            return _sentinel_for(direction, max_codepoint)
        value = col_def.read_raw(row)
        if value is None:
            return _sentinel_for(direction, max_codepoint)
        if isinstance(value, (RealValue, SortSentinel)):
            return value
        return RealValue(value)

    return getter


def make_clipboard_getter(col_def: ColumnDef) -> ClipboardGetter:
    """Return an export accessor that never leaks sort sentinels."""

    def getter(row: Row, value: Any = None) -> Any:
        if isinstance(value, SortSentinel):
            return ""
        if isinstance(value, RealValue):
            value = value.value
        if is_loading_row(row) or is_aggregation(value):
            return ""
        if col_def.clipboard_value_getter is not None:
            exported = col_def.clipboard_value_getter(row, value)
        else:
            exported = col_def.read_raw(row)
        if isinstance(exported, RealValue):
            exported = exported.value
        if exported is None or isinstance(exported, SortSentinel) or is_aggregation(exported):
            return ""
        return exported

    return getter


def _resolve(value: Any, row: Row, direction: SortDirection) -> CellValue:
    if is_loading_row(row) or value is None:
        return SortSentinel(direction)
    if isinstance(value, (RealValue, SortSentinel)):
        return value
    return RealValue(value)


def loading_aware_comparator(
    value_a: Any,
    value_b: Any,
    row_a: Row,
    row_b: Row,
    descending: bool,
) -> Ordering:
    """Order placeholder rows after real rows in either sort direction.

    The result is expressed in display order: ``LESS_THAN`` means *row_a* is
    shown above *row_b*.  When neither or both rows are placeholders the
    comparator has no opinion and the caller keeps its fallback order.
    """

    a_loading = is_loading_row(row_a)
    b_loading = is_loading_row(row_b)
    if a_loading == b_loading:
        return Ordering.NO_OPINION

    direction = SortDirection.DESC if descending else SortDirection.ASC
    natural = compare_cell_values(
        _resolve(value_a, row_a, direction),
        _resolve(value_b, row_b, direction),
    )
    if natural == 0:
        # A real row without a value resolves to the same sentinel; the
        # placeholder takes the sentinel's end of the range.
        natural = 1 if a_loading else -1
        if descending:
            natural = -natural

    ordering = Ordering.GREATER_THAN if natural > 0 else Ordering.LESS_THAN
    if descending:
        ordering = ordering.inverted()
    return ordering


@dataclass(frozen=True)
class OverriddenColumns:
    columns: list[ColumnDef]
    auto_group: Optional[ColumnDef]


def override_column(
    col_def: ColumnDef,
    column_state: ColumnStateProvider,
    *,
    max_codepoint: int = config.SENTINEL_MAX_CODEPOINT,
) -> ColumnDef:
    return replace(
        col_def,
        value_getter=make_value_getter(col_def, column_state, max_codepoint=max_codepoint),
        clipboard_value_getter=make_clipboard_getter(col_def),
        comparator=loading_aware_comparator,
    )


def install_overrides(
    columns: Sequence[ColumnDef],
    column_state: ColumnStateProvider,
    *,
    auto_group: Optional[ColumnDef] = None,
    max_codepoint: int = config.SENTINEL_MAX_CODEPOINT,
) -> OverriddenColumns:
    """Return copies of *columns* and *auto_group* with the loading overrides.

    The auto group column additionally spans the whole row for placeholder
    rows (``len(columns) + 1`` cells) and tags them with the loading class.
    """

    overridden = [
        override_column(col_def, column_state, max_codepoint=max_codepoint)
        for col_def in columns
    ]

    group_def: Optional[ColumnDef] = None
    if auto_group is not None:
        full_span = len(columns) + 1

        def col_span(row: Row) -> int:
            return full_span if is_loading_row(row) else 1

        group_def = replace(
            override_column(auto_group, column_state, max_codepoint=max_codepoint),
            col_span=col_span,
            cell_class_rules={
                **auto_group.cell_class_rules,
                config.LOADING_CELL_CLASS: is_loading_row,
            },
        )

    logger.debug(
        "Installed loading overrides on %d columns (auto group: %s)",
        len(overridden),
        group_def is not None,
    )
    return OverriddenColumns(columns=overridden, auto_group=group_def)


__all__ = [
    "OverriddenColumns",
    "install_overrides",
    "loading_aware_comparator",
    "make_clipboard_getter",
    "make_value_getter",
    "override_column",
]
