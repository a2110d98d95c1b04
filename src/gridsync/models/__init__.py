"""Row, column and Qt model types of the synchronised table.

- `rows`: row dictionaries, placeholder generation and transactions
- `cell_values`: tagged cell values, sort directions and comparator results
- `columns`: column definitions and column sort state
- `overrides`: loading-aware value getters, clipboard getters and comparator
- `row_store`: the Qt table model holding the row set
- `proxy`: the sort/filter proxy that reports view changes
"""

from .cell_values import (
    AggregateValue,
    CellValue,
    Ordering,
    RealValue,
    SortDirection,
    SortSentinel,
    compare_cell_values,
    is_aggregation,
)
from .columns import ColumnDef, ColumnState, default_auto_group_column, direction_for
from .overrides import (
    OverriddenColumns,
    install_overrides,
    loading_aware_comparator,
    make_clipboard_getter,
    make_value_getter,
)
from .proxy import LoadingAwareProxyModel
from .roles import Roles
from .row_store import RowNode, RowStoreModel
from .rows import (
    Row,
    RowTransaction,
    RowTransactionResult,
    build_loading_rows,
    is_loading_row,
    loading_row_id,
)
from .view_state import ViewState

__all__ = [
    "AggregateValue",
    "CellValue",
    "ColumnDef",
    "ColumnState",
    "LoadingAwareProxyModel",
    "Ordering",
    "OverriddenColumns",
    "RealValue",
    "Roles",
    "Row",
    "RowNode",
    "RowStoreModel",
    "RowTransaction",
    "RowTransactionResult",
    "SortDirection",
    "SortSentinel",
    "ViewState",
    "build_loading_rows",
    "compare_cell_values",
    "default_auto_group_column",
    "direction_for",
    "install_overrides",
    "is_aggregation",
    "is_loading_row",
    "loading_aware_comparator",
    "loading_row_id",
    "make_clipboard_getter",
    "make_value_getter",
]
