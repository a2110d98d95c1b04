import pytest

pytest.importorskip("PySide6.QtCore")

from PySide6.QtCore import Qt

from gridsync import config
from gridsync.models.cell_values import (
    AggregateValue,
    Ordering,
    RealValue,
    SortDirection,
    SortSentinel,
)
from gridsync.models.columns import ColumnDef, ColumnState, default_auto_group_column
from gridsync.models.overrides import (
    install_overrides,
    loading_aware_comparator,
    make_clipboard_getter,
    make_value_getter,
)
from gridsync.models.roles import Roles
from gridsync.models.rows import RowTransaction, build_loading_rows

from conftest import COLUMNS, make_rows


def _state(direction):
    return lambda: [ColumnState("name", direction)]


LOADING = {"id": "loading0", "loading": True, "hierarchy": ["loading0"]}
REAL = {"id": "r1", "name": "alpha", "size": 3}


def test_value_getter_returns_sentinel_for_loading_rows():
    getter = make_value_getter(ColumnDef("name"), _state(SortDirection.ASC))

    assert getter(LOADING) == SortSentinel(SortDirection.ASC)
    assert getter(LOADING).text == chr(config.SENTINEL_MAX_CODEPOINT)


@pytest.mark.parametrize("direction", [SortDirection.DESC, SortDirection.NONE])
def test_value_getter_uses_min_sentinel_unless_ascending(direction):
    getter = make_value_getter(ColumnDef("name"), _state(direction))

    assert getter(LOADING).text == chr(0)


def test_value_getter_wraps_real_values_and_missing_values():
    getter = make_value_getter(ColumnDef("name"), _state(SortDirection.ASC))

    assert getter(REAL) == RealValue("alpha")
    assert isinstance(getter({"id": "r2"}), SortSentinel)


def test_value_getter_respects_own_value_getter():
    col_def = ColumnDef("label", value_getter=lambda row: row["name"].upper())
    getter = make_value_getter(col_def, _state(SortDirection.NONE))

    assert getter(REAL) == RealValue("ALPHA")


def test_value_getter_passes_cell_values_through():
    col_def = ColumnDef("name", value_getter=lambda row: RealValue("wrapped"))
    getter = make_value_getter(col_def, _state(SortDirection.ASC))

    assert getter(REAL) == RealValue("wrapped")


def test_clipboard_getter_hides_sentinels_and_aggregates():
    getter = make_clipboard_getter(ColumnDef("name"))

    assert getter(LOADING, SortSentinel(SortDirection.ASC)) == ""
    assert getter(REAL, AggregateValue(10)) == ""
    assert getter(REAL, RealValue("alpha")) == "alpha"


def test_clipboard_getter_prefers_column_export():
    col_def = ColumnDef("size", clipboard_value_getter=lambda row, value: f"{value} KB")
    getter = make_clipboard_getter(col_def)

    assert getter(REAL, RealValue(3)) == "3 KB"
    assert getter(LOADING, RealValue(3)) == ""


def test_comparator_has_no_opinion_without_exactly_one_loading_row():
    other = dict(LOADING, id="loading1")
    assert loading_aware_comparator(None, None, REAL, REAL, False) is Ordering.NO_OPINION
    assert loading_aware_comparator(None, None, LOADING, other, True) is Ordering.NO_OPINION


@pytest.mark.parametrize("descending", [False, True])
def test_comparator_places_loading_rows_after_real_rows(descending):
    direction = SortDirection.DESC if descending else SortDirection.ASC
    sentinel = SortSentinel(direction)
    real = RealValue("alpha")

    assert loading_aware_comparator(sentinel, real, LOADING, REAL, descending) is Ordering.GREATER_THAN
    assert loading_aware_comparator(real, sentinel, REAL, LOADING, descending) is Ordering.LESS_THAN


@pytest.mark.parametrize("descending", [False, True])
def test_comparator_breaks_sentinel_ties_towards_loading_row(descending):
    direction = SortDirection.DESC if descending else SortDirection.ASC
    missing = {"id": "r2"}
    sentinel = SortSentinel(direction)

    assert loading_aware_comparator(sentinel, sentinel, LOADING, missing, descending) is Ordering.GREATER_THAN
    assert loading_aware_comparator(sentinel, sentinel, missing, LOADING, descending) is Ordering.LESS_THAN


def test_install_overrides_spans_auto_group_for_loading_rows():
    result = install_overrides(
        COLUMNS,
        _state(SortDirection.NONE),
        auto_group=default_auto_group_column(),
    )

    assert [col.col_id for col in result.columns] == ["name", "size"]
    assert all(col.comparator is loading_aware_comparator for col in result.columns)
    group = result.auto_group
    assert group.col_id == config.AUTO_GROUP_COLUMN_ID
    assert group.span_for(LOADING) == len(COLUMNS) + 1
    assert group.span_for(REAL) == 1
    assert group.classes_for(LOADING) == frozenset({config.LOADING_CELL_CLASS})
    assert group.classes_for(REAL) == frozenset()


def test_install_overrides_does_not_mutate_input():
    original = ColumnDef("name")
    install_overrides([original], _state(SortDirection.ASC))

    assert original.value_getter is None
    assert original.comparator is None


# ---------------------------------------------------------------------------
# Placeholder position through the proxy
# ---------------------------------------------------------------------------


def _install(store, proxy):
    result = install_overrides(
        store.get_all_columns(),
        proxy.column_state,
        auto_group=default_auto_group_column(),
    )
    store.set_auto_group_column_def(result.auto_group)
    store.set_column_defs(result.columns)


def _display_ids(proxy):
    return [proxy.index(row, 0).data(Roles.ROW_ID) for row in range(proxy.rowCount())]


@pytest.mark.parametrize("order", [Qt.AscendingOrder, Qt.DescendingOrder])
@pytest.mark.parametrize("column", [0, 1, 2])
def test_loading_rows_stay_contiguous_at_bottom(store, proxy, order, column):
    _install(store, proxy)
    rows = make_rows("c", "a", "b") + [{"id": "d", "name": None, "size": None}]
    store.set_row_data(rows + list(build_loading_rows(5)))

    proxy.sort(column, order)

    ids = _display_ids(proxy)
    assert ids[:4] == ["c", "a", "b", "d"]
    assert ids[4:] == [f"loading{i}" for i in range(5)]


def test_loading_rows_appended_after_sort_stay_at_bottom(store, proxy):
    _install(store, proxy)
    store.set_row_data(make_rows("a", "b"))
    proxy.sort(1, Qt.DescendingOrder)

    store.apply_transaction(RowTransaction(add=build_loading_rows(3)))

    assert _display_ids(proxy) == ["a", "b", "loading0", "loading1", "loading2"]


def test_loading_rows_export_empty_strings(store, proxy):
    _install(store, proxy)
    store.set_row_data(make_rows("a") + list(build_loading_rows(1)))

    exported = [proxy.index(1, column).data(Roles.CLIPBOARD) for column in range(proxy.columnCount())]

    assert exported == ["", "", ""]
    assert proxy.index(0, 1).data(Roles.CLIPBOARD) == "a"


@pytest.mark.parametrize("order", [Qt.AscendingOrder, Qt.DescendingOrder])
def test_missing_values_display_empty(store, proxy, order):
    _install(store, proxy)
    store.set_row_data([{"id": "d", "name": None, "size": 4}] + list(build_loading_rows(1)))
    proxy.sort(1, order)

    assert proxy.index(0, 1).data(Qt.DisplayRole) == ""
    assert proxy.index(0, 2).data(Qt.DisplayRole) == "4"
    assert proxy.index(1, 1).data(Roles.IS_LOADING) is True
