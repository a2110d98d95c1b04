import pytest

pytest.importorskip("PySide6.QtTest")

from PySide6.QtCore import Qt

from gridsync import config
from gridsync.models.rows import build_loading_rows
from gridsync.settings.options import SyncSettings
from gridsync.sync.feature import (
    FilterSkipContext,
    HybridServerSideFeature,
    filter_skip_key,
    is_row_selectable,
)
from gridsync.sync.options import HybridServerSideOptions
from gridsync.widgets.delegate import LoadingRowDelegate

from conftest import COLUMNS, make_rows

LOADING = {"id": "loading0", "loading": True, "hierarchy": ["loading0"]}


class RecordingSource:
    def __init__(self):
        self.requests = []
        self.options = HybridServerSideOptions(fetch=self.fetch, table_id="orders")

    def fetch(self, view_state):
        self.requests.append(view_state)
        return make_rows("r1", "r2")


@pytest.fixture
def source():
    return RecordingSource()


@pytest.fixture
def feature(qapp, source, manual_pool):
    settings = SyncSettings(debounce_ms=10, fetch_timeout_ms=None)
    feat = HybridServerSideFeature(source.options, settings=settings, thread_pool=manual_pool)
    yield feat
    feat.dispose()


def test_filter_skip_key_format():
    assert filter_skip_key("orders") == "loadingRowDroppedFromFilteringIds_orders"
    assert FilterSkipContext("orders").key == filter_skip_key("orders")


def test_filter_skip_context():
    context = FilterSkipContext("orders", {"loading1"})

    assert context.is_row_filter_skipped(LOADING)
    assert not context.is_row_filter_skipped(dict(LOADING, id="loading1"))
    assert not context.is_row_filter_skipped({"id": "r1"})

    context.release("loading1")
    context.exempt("loading0")
    assert context.exempt_ids == {"loading0"}


def test_row_selectable():
    assert is_row_selectable({"id": "r1"})
    assert not is_row_selectable(LOADING)


def test_on_grid_ready_installs_overrides(feature, store, proxy):
    feature.on_grid_ready(store, proxy)

    group = store.auto_group_column_def()
    assert group.col_id == config.AUTO_GROUP_COLUMN_ID
    assert store.columnCount() == len(COLUMNS) + 1
    assert group.span_for(LOADING) == len(COLUMNS) + 1
    assert all(col.comparator is not None for col in store.get_all_columns())
    assert feature.coordinator is not None
    assert feature.reconciler is not None


def test_on_grid_ready_twice_raises(feature, store, proxy):
    feature.on_grid_ready(store, proxy)
    with pytest.raises(RuntimeError):
        feature.on_grid_ready(store, proxy)


def test_feature_setup_descriptor(feature, store, proxy):
    feature.on_grid_ready(store, proxy)

    setup = feature.feature_setup("orders")

    assert setup.table_id == "orders"
    assert setup.renderer is LoadingRowDelegate
    assert setup.is_row_selectable(LOADING) is False
    assert setup.is_row_filter_skipped(LOADING) is True
    assert setup.col_span(LOADING) == len(COLUMNS) + 1
    assert setup.col_span({"id": "r1"}) == 1
    assert setup.filter_context is feature.filter_context


def test_loading_rows_built_from_settings(qapp, source):
    feature = HybridServerSideFeature(source.options, settings=SyncSettings(loading_row_count=4))

    assert feature.loading_rows == build_loading_rows(4)
    feature.dispose()


def test_filter_change_fetches_with_view_state(qtbot, feature, source, store, proxy, manual_pool):
    feature.on_grid_ready(store, proxy)
    emitted = []
    source.options.data_emit.connect(emitted.append)

    proxy.set_column_filter("name", "r")
    qtbot.waitUntil(lambda: len(manual_pool.runnables) == 1, timeout=1000)
    manual_pool.run()

    assert source.requests[0].filter_model == {"name": "r"}
    assert store.row_ids() == ["r1", "r2"]
    assert emitted == [make_rows("r1", "r2")]


def test_filter_burst_issues_one_fetch_with_last_filter(qtbot, qapp, source, store, proxy, manual_pool):
    settings = SyncSettings(debounce_ms=100, fetch_timeout_ms=None)
    feature = HybridServerSideFeature(source.options, settings=settings, thread_pool=manual_pool)
    feature.on_grid_ready(store, proxy)

    for value in range(5):
        proxy.set_column_filter("name", f"v{value}")
        qtbot.wait(20)

    qtbot.waitUntil(lambda: len(manual_pool.runnables) == 1, timeout=1000)
    qtbot.wait(150)
    manual_pool.run_all()

    assert len(source.requests) == 1
    assert source.requests[0].filter_model == {"name": "v4"}
    feature.dispose()


def test_additional_trigger_payload_reaches_fetch(qtbot, feature, source, store, proxy, manual_pool):
    feature.on_grid_ready(store, proxy)

    source.options.additional_trigger.emit({"page": 3})
    qtbot.waitUntil(lambda: len(manual_pool.runnables) == 1, timeout=1000)
    manual_pool.run()

    assert source.requests[0].payload == {"page": 3}


def test_refresh_requests_fetch(feature, store, proxy, manual_pool):
    feature.on_grid_ready(store, proxy)

    feature.refresh("manual")
    feature.aggregator.flush()

    assert len(manual_pool.runnables) == 1


def test_loading_rows_visible_under_filter_during_fetch(qtbot, feature, source, store, proxy, manual_pool):
    feature.on_grid_ready(store, proxy)
    proxy.set_column_filter("name", "zzz")
    feature.aggregator.flush()

    source.options.loading.emit(True)

    assert store.rowCount() == 25
    assert proxy.rowCount() == 25
    assert not store.flags(store.index(0, 0)) & Qt.ItemIsSelectable

    manual_pool.run()
    source.options.loading.emit(False)
    assert store.row_ids() == ["r1", "r2"]


def test_exempt_loading_rows_are_filtered(qapp, source, store, proxy, manual_pool):
    settings = SyncSettings(filter_skip={"orders": ("loading0",)}, fetch_timeout_ms=None)
    feature = HybridServerSideFeature(source.options, settings=settings, thread_pool=manual_pool)
    feature.on_grid_ready(store, proxy)
    proxy.set_column_filter("name", "zzz")

    source.options.loading.emit(True)

    assert proxy.rowCount() == 24
    feature.dispose()


def test_dispose_stops_everything(qtbot, feature, source, store, proxy, manual_pool):
    feature.on_grid_ready(store, proxy)
    source.options.additional_trigger.emit("first")
    qtbot.waitUntil(lambda: len(manual_pool.runnables) == 1, timeout=1000)

    feature.dispose()
    manual_pool.run()
    source.options.loading.emit(True)
    source.options.additional_trigger.emit("second")
    qtbot.wait(50)

    assert store.rowCount() == 0
    assert manual_pool.runnables == []
    assert feature.is_disposed()
