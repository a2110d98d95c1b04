"""Clear → fetch → apply cycle for one table instance."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional, Protocol

from PySide6.QtCore import QObject, QRunnable, QThreadPool, QTimer, Signal, Slot

from .. import config
from ..errors import FetchError, FetchTimeoutError
from ..errors.handler import ErrorHandler, ErrorSeverity
from ..events.bus import EventBus
from ..events.sync_events import ChunkAppliedEvent, FetchDiscardedEvent, FetchStartedEvent
from ..models.row_store import RowStoreModel
from ..models.rows import Row
from ..models.view_state import ViewState
from .options import HybridServerSideOptions
from .worker import FetchSignals, FetchWorker

logger = logging.getLogger(__name__)


class FetchState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"


class RunnablePool(Protocol):
    def start(self, runnable: QRunnable) -> None: ...


class FetchCoordinator(QObject):
    """Run one fetch per trigger and apply only the newest result.

    Each trigger bumps a generation counter, clears the row store and starts
    a :class:`FetchWorker` tagged with that generation.  Results and failures
    for any other generation are dropped, so a slow fetch can never
    overwrite the rows of a newer one.  A watchdog fails fetches that run
    longer than ``fetch_timeout_ms``.
    """

    fetchStarted = Signal(int)
    chunkApplied = Signal(int, int)
    fetchFailed = Signal(object)
    resultDiscarded = Signal(int)
    stateChanged = Signal(object)

    def __init__(
        self,
        store: RowStoreModel,
        options: HybridServerSideOptions,
        *,
        thread_pool: Optional[RunnablePool] = None,
        fetch_timeout_ms: Optional[int] = config.FETCH_TIMEOUT_MS,
        max_threads: int = config.FETCH_MAX_THREADS,
        error_handler: Optional[ErrorHandler] = None,
        event_bus: Optional[EventBus] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._options = options
        if thread_pool is None:
            pool = QThreadPool(self)
            pool.setMaxThreadCount(max(1, max_threads))
            thread_pool = pool
        self._thread_pool = thread_pool
        self._events = event_bus
        self._error_handler = error_handler or ErrorHandler(logger, event_bus)
        self._generation = 0
        self._state = FetchState.IDLE
        self._disposed = False
        # Keep the per-fetch signal objects alive until their result arrives.
        self._in_flight: Dict[int, FetchSignals] = {}

        self._watchdog: Optional[QTimer] = None
        if fetch_timeout_ms is not None:
            self._watchdog = QTimer(self)
            self._watchdog.setSingleShot(True)
            self._watchdog.setInterval(int(fetch_timeout_ms))
            self._watchdog.timeout.connect(self._on_watchdog_timeout)

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def is_fetching(self) -> bool:
        return self._state is FetchState.FETCHING

    def in_flight_generations(self) -> List[int]:
        return sorted(self._in_flight)

    # ------------------------------------------------------------------
    # Fetch cycle
    # ------------------------------------------------------------------
    def trigger(self, view_state: ViewState) -> Optional[int]:
        """Start a new fetch cycle and return its generation.

        Returns ``None`` when the coordinator or its store is torn down.
        """

        if self._disposed or self._store.is_destroyed():
            logger.debug("Ignoring trigger on a disposed table")
            return None

        self._generation += 1
        generation = self._generation
        self._set_state(FetchState.FETCHING)
        self._store.set_row_data([])

        worker = FetchWorker(self._options.fetch, view_state, generation)
        worker.signals.finished.connect(self._on_fetch_finished)
        worker.signals.failed.connect(self._on_fetch_failed)
        self._in_flight[generation] = worker.signals

        logger.debug("Starting fetch generation %d", generation)
        self.fetchStarted.emit(generation)
        self._publish(
            FetchStartedEvent(
                table_id=self._options.table_id,
                generation=generation,
                payload=view_state.payload,
            )
        )
        if self._watchdog is not None:
            self._watchdog.start()
        self._thread_pool.start(worker)
        return generation

    def dispose(self) -> None:
        """Stop applying results; in-flight fetches finish without effect."""

        self._disposed = True
        self._generation += 1
        if self._watchdog is not None:
            self._watchdog.stop()
        self._state = FetchState.IDLE

    # ------------------------------------------------------------------
    # Worker callbacks
    # ------------------------------------------------------------------
    @Slot(int, object)
    def _on_fetch_finished(self, generation: int, rows: List[Row]) -> None:
        self._in_flight.pop(generation, None)
        if not self._accepts(generation):
            return
        self._stop_watchdog()
        self._apply(generation, rows)

    @Slot(int, object)
    def _on_fetch_failed(self, generation: int, error: object) -> None:
        self._in_flight.pop(generation, None)
        if not self._accepts(generation):
            return
        self._stop_watchdog()
        self._fail(generation, self._as_fetch_error(generation, error))

    @Slot()
    def _on_watchdog_timeout(self) -> None:
        if self._disposed or self._state is not FetchState.FETCHING:
            return
        generation = self._generation
        logger.warning("Fetch generation %d timed out", generation)
        self._fail(
            generation,
            FetchTimeoutError(
                f"Fetch generation {generation} exceeded {self._watchdog.interval()} ms",
                generation,
            ),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _accepts(self, generation: int) -> bool:
        if self._disposed or self._store.is_destroyed():
            logger.debug("Suppressing result of generation %d after teardown", generation)
            return False
        if generation != self._generation or self._state is not FetchState.FETCHING:
            logger.debug(
                "Discarding stale result of generation %d (current %d)",
                generation,
                self._generation,
            )
            self.resultDiscarded.emit(generation)
            self._publish(
                FetchDiscardedEvent(
                    table_id=self._options.table_id,
                    generation=generation,
                    current_generation=self._generation,
                )
            )
            return False
        return True

    def _apply(self, generation: int, rows: List[Row]) -> None:
        try:
            self._store.set_row_data(rows)
        except Exception as exc:
            logger.warning("Chunk of generation %d could not be applied: %s", generation, exc)
            self._fail(generation, self._as_fetch_error(generation, exc))
            return
        self._options.data_emit.emit(list(rows))
        self._set_state(FetchState.IDLE)
        logger.debug("Applied %d row(s) from generation %d", len(rows), generation)
        self.chunkApplied.emit(generation, len(rows))
        self._publish(
            ChunkAppliedEvent(
                table_id=self._options.table_id,
                generation=generation,
                row_count=len(rows),
            )
        )

    def _fail(self, generation: int, error: FetchError) -> None:
        # An empty table is preferable to stale rows mixed with placeholders.
        self._store.set_row_data([])
        self._options.data_emit.emit([])
        self._set_state(FetchState.IDLE)
        self._error_handler.handle(
            error,
            ErrorSeverity.ERROR,
            {"generation": generation, "table_id": self._options.table_id},
        )
        self.fetchFailed.emit(error)

    @staticmethod
    def _as_fetch_error(generation: int, error: object) -> FetchError:
        if isinstance(error, FetchError):
            if error.generation is None:
                error.generation = generation
            return error
        failure = FetchError(f"Fetch generation {generation} failed: {error}", generation)
        if isinstance(error, BaseException):
            failure.__cause__ = error
        return failure

    def _stop_watchdog(self) -> None:
        if self._watchdog is not None:
            self._watchdog.stop()

    def _set_state(self, state: FetchState) -> None:
        if state is self._state:
            return
        self._state = state
        self.stateChanged.emit(state)

    def _publish(self, event) -> None:
        if self._events is not None:
            self._events.publish(event)


__all__ = ["FetchCoordinator", "FetchState", "RunnablePool"]
