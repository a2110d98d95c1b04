"""Per-table façade wiring the sync engine into a row store and proxy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from PySide6.QtCore import QObject, Slot

from .. import config
from ..errors.handler import ErrorHandler
from ..events.bus import EventBus
from ..models.columns import default_auto_group_column
from ..models.overrides import install_overrides
from ..models.proxy import LoadingAwareProxyModel
from ..models.row_store import RowStoreModel
from ..models.rows import Row, build_loading_rows, is_loading_row, row_id
from ..settings.options import SyncSettings
from ..widgets.delegate import LoadingRowDelegate
from .coordinator import FetchCoordinator, RunnablePool
from .options import HybridServerSideOptions
from .reconciler import LoadingStateReconciler
from .triggers import TriggerAggregator, TriggerEvent

logger = logging.getLogger(__name__)


def filter_skip_key(table_id: Optional[str]) -> str:
    return f"{config.FILTER_SKIP_TOKEN}_{table_id}"


def is_row_selectable(row: Row) -> bool:
    return not is_loading_row(row)


@dataclass
class FilterSkipContext:
    """Loading row ids of one table that stay subject to client filtering.

    Every other loading row bypasses the filter so the placeholder batch
    stays visible while a filtered fetch is in flight.
    """

    table_id: Optional[str]
    exempt_ids: set[str] = field(default_factory=set)

    @property
    def key(self) -> str:
        return filter_skip_key(self.table_id)

    def exempt(self, *ids: str) -> None:
        self.exempt_ids.update(ids)

    def release(self, *ids: str) -> None:
        self.exempt_ids.difference_update(ids)

    def is_row_filter_skipped(self, row: Row) -> bool:
        return is_loading_row(row) and row_id(row) not in self.exempt_ids


@dataclass(frozen=True)
class FeatureSetup:
    """Hooks a table view installs for one table instance."""

    table_id: Optional[str]
    renderer: type
    is_row_selectable: Callable[[Row], bool]
    is_row_filter_skipped: Callable[[Row], bool]
    col_span: Callable[[Row], int]
    filter_context: FilterSkipContext


class HybridServerSideFeature(QObject):
    """Own the sync engine of one table instance.

    The feature is created with the data source's options and attached to a
    row store and its proxy through :meth:`on_grid_ready`.  From then on
    sort and filter changes of the proxy, together with the source's
    ``additional_trigger``, are debounced into fetches, and the source's
    ``loading`` flag drives the placeholder rows.
    """

    def __init__(
        self,
        options: HybridServerSideOptions,
        *,
        settings: Optional[SyncSettings] = None,
        thread_pool: Optional[RunnablePool] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
        filter_context: Optional[FilterSkipContext] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._options = options
        self._settings = settings or SyncSettings()
        self._thread_pool = thread_pool
        self._events = event_bus
        self._error_handler = error_handler
        self._loading_rows: Tuple[Row, ...] = build_loading_rows(self._settings.loading_row_count)
        if filter_context is None:
            filter_context = FilterSkipContext(
                options.table_id, set(self._settings.exempt_ids_for(options.table_id))
            )
        self._filter_context = filter_context

        self._aggregator = TriggerAggregator(self._settings.debounce_ms, self)
        self._aggregator.triggered.connect(self._on_triggered)
        self._coordinator: Optional[FetchCoordinator] = None
        self._reconciler: Optional[LoadingStateReconciler] = None
        self._store: Optional[RowStoreModel] = None
        self._proxy: Optional[LoadingAwareProxyModel] = None
        self._disposed = False

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    @property
    def aggregator(self) -> TriggerAggregator:
        return self._aggregator

    @property
    def coordinator(self) -> Optional[FetchCoordinator]:
        return self._coordinator

    @property
    def reconciler(self) -> Optional[LoadingStateReconciler]:
        return self._reconciler

    @property
    def loading_rows(self) -> Tuple[Row, ...]:
        return self._loading_rows

    @property
    def filter_context(self) -> FilterSkipContext:
        return self._filter_context

    def is_disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def on_grid_ready(self, store: RowStoreModel, proxy: LoadingAwareProxyModel) -> None:
        """Attach the engine to *store* and the *proxy* sorting it."""

        if self._disposed:
            raise RuntimeError("HybridServerSideFeature has been disposed")
        if self._store is not None:
            raise RuntimeError("HybridServerSideFeature is already attached to a table")
        if proxy.store() is not store:
            raise ValueError("proxy must be sorting the given row store")

        self._store = store
        self._proxy = proxy
        self._update_columns()
        store.set_row_selectable_predicate(is_row_selectable)
        proxy.set_filter_skip_predicate(self._filter_context.is_row_filter_skipped)
        self._observe_fetch_triggers()
        self._observe_loading()
        logger.debug("Sync feature attached to table %s", self._options.table_id)

    def feature_setup(self, table_id: Optional[str] = None) -> FeatureSetup:
        """Return the hooks a view should install for *table_id*."""

        if table_id is None:
            table_id = self._options.table_id
        context = self._filter_context
        if table_id != context.table_id:
            context = FilterSkipContext(table_id, set(self._settings.exempt_ids_for(table_id)))
        return FeatureSetup(
            table_id=table_id,
            renderer=LoadingRowDelegate,
            is_row_selectable=is_row_selectable,
            is_row_filter_skipped=context.is_row_filter_skipped,
            col_span=self._col_span,
            filter_context=context,
        )

    def refresh(self, payload=None) -> None:
        """Request a refetch as if ``additional_trigger`` had emitted *payload*."""

        self._aggregator.notify("refresh", payload)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._aggregator.dispose()
        if self._coordinator is not None:
            self._coordinator.dispose()
        if self._reconciler is not None:
            self._reconciler.dispose()
        logger.debug("Sync feature of table %s disposed", self._options.table_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _update_columns(self) -> None:
        store = self._store
        proxy = self._proxy
        auto_group = store.auto_group_column_def() or default_auto_group_column()
        result = install_overrides(
            store.get_all_columns(),
            proxy.column_state,
            auto_group=auto_group,
            max_codepoint=self._settings.sentinel_max_codepoint,
        )
        store.set_auto_group_column_def(result.auto_group)
        store.set_column_defs(result.columns)

    def _observe_fetch_triggers(self) -> None:
        self._coordinator = FetchCoordinator(
            self._store,
            self._options,
            thread_pool=self._thread_pool,
            fetch_timeout_ms=self._settings.fetch_timeout_ms,
            max_threads=self._settings.max_threads,
            error_handler=self._error_handler,
            event_bus=self._events,
            parent=self,
        )
        self._aggregator.attach(self._options.additional_trigger, "additional")
        self._aggregator.attach(self._proxy.filterChanged, "filter")
        self._aggregator.attach(self._proxy.sortChanged, "sort")

    def _observe_loading(self) -> None:
        self._reconciler = LoadingStateReconciler(
            self._store,
            self._loading_rows,
            is_alive=lambda: not self._disposed,
            table_id=self._options.table_id,
            event_bus=self._events,
        )
        self._reconciler.attach(self._options.loading)

    def _col_span(self, row: Row) -> int:
        if self._store is None:
            return 1
        auto_group = self._store.auto_group_column_def()
        return auto_group.span_for(row) if auto_group is not None else 1

    @Slot(object)
    def _on_triggered(self, event: TriggerEvent) -> None:
        if self._disposed or self._coordinator is None or self._proxy is None:
            return
        self._coordinator.trigger(self._proxy.view_state(event.payload))


__all__ = [
    "FeatureSetup",
    "FilterSkipContext",
    "HybridServerSideFeature",
    "filter_skip_key",
    "is_row_selectable",
]
