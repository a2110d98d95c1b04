import pytest

pytest.importorskip("PySide6.QtTest")

from PySide6.QtTest import QSignalSpy

from gridsync.events.bus import EventBus
from gridsync.events.sync_events import LoadingRowsChangedEvent
from gridsync.models.rows import build_loading_rows
from gridsync.sync.reconciler import LoadingStateReconciler
from gridsync.utils.signal import Signal

from conftest import make_rows


@pytest.fixture
def loading_rows():
    return build_loading_rows(25)


def test_loading_true_inserts_whole_batch(store, loading_rows):
    store.set_row_data(make_rows("a", "b", "c"))
    reconciler = LoadingStateReconciler(store, loading_rows)

    reconciler.on_loading_changed(True)

    assert store.rowCount() == 28
    assert store.row_ids()[3:] == [f"loading{i}" for i in range(25)]
    assert reconciler.has_loading_rows()


def test_loading_false_removes_whole_batch(store, loading_rows):
    store.set_row_data(make_rows("a", "b", "c"))
    reconciler = LoadingStateReconciler(store, loading_rows)
    reconciler.on_loading_changed(True)

    reconciler.on_loading_changed(False)

    assert store.row_ids() == ["a", "b", "c"]
    assert not reconciler.has_loading_rows()


def test_repeated_flags_are_idempotent(store, loading_rows):
    reconciler = LoadingStateReconciler(store, loading_rows)
    spy = QSignalSpy(store.transactionApplied)

    reconciler.on_loading_changed(True)
    reconciler.on_loading_changed(True)
    assert store.rowCount() == 25

    reconciler.on_loading_changed(False)
    reconciler.on_loading_changed(False)
    assert store.rowCount() == 0
    assert spy.count() == 2


def test_presence_read_from_store(store, loading_rows):
    reconciler = LoadingStateReconciler(store, loading_rows)
    reconciler.on_loading_changed(True)
    store.set_row_data([])  # a fetch cycle wiped everything

    reconciler.on_loading_changed(True)

    assert store.rowCount() == 25


def test_attached_signal_drives_reconciler(store, loading_rows):
    loading = Signal()
    reconciler = LoadingStateReconciler(store, loading_rows)
    reconciler.attach(loading)

    loading.emit(True)
    assert store.rowCount() == 25

    reconciler.dispose()
    loading.emit(False)
    assert store.rowCount() == 25
    assert loading.handler_count == 0


def test_ignored_when_table_is_gone(store, loading_rows):
    alive = {"value": False}
    reconciler = LoadingStateReconciler(store, loading_rows, is_alive=lambda: alive["value"])

    reconciler.on_loading_changed(True)
    assert store.rowCount() == 0

    alive["value"] = True
    store.destroy()
    reconciler.on_loading_changed(True)
    assert store.rowCount() == 0


def test_requires_loading_rows(store):
    with pytest.raises(ValueError):
        LoadingStateReconciler(store, ())


def test_publishes_presence_changes(store):
    bus = EventBus()
    seen = []
    bus.subscribe(LoadingRowsChangedEvent, seen.append)
    reconciler = LoadingStateReconciler(store, build_loading_rows(2), table_id="t", event_bus=bus)

    reconciler.on_loading_changed(True)
    reconciler.on_loading_changed(True)
    reconciler.on_loading_changed(False)

    assert [event.present for event in seen] == [True, False]
    assert seen[0].row_ids == ("loading0", "loading1")
    assert seen[0].table_id == "t"
