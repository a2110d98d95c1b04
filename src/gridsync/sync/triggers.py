"""Debounced aggregation of the signals that should cause a refetch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from .. import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TriggerEvent:
    """The last signal of a quiescent burst."""

    source: str
    payload: Any
    burst_size: int


class TriggerAggregator(QObject):
    """Merge several signal sources into one debounced ``triggered`` signal.

    Every emission of an attached source restarts a single-shot timer; the
    aggregator fires once the sources have been silent for the whole
    interval and reports only the last emission of the burst.  Sources are
    expected to emit on the thread that owns the aggregator.
    """

    triggered = Signal(object)

    def __init__(self, debounce_ms: int = config.DEBOUNCE_MS, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(debounce_ms)))
        self._timer.timeout.connect(self._on_quiescent)
        self._connections: List[Tuple[Any, Callable[..., None]]] = []
        self._last: Optional[TriggerEvent] = None
        self._burst_size = 0
        self._disposed = False

    def debounce_ms(self) -> int:
        return self._timer.interval()

    def attach(self, source: Any, name: str) -> None:
        """Listen to *source*, a Qt signal or a :class:`~gridsync.utils.signal.Signal`."""

        def handler(*args: Any) -> None:
            if not args:
                payload = None
            elif len(args) == 1:
                payload = args[0]
            else:
                payload = args
            self.notify(name, payload)

        source.connect(handler)
        self._connections.append((source, handler))

    def notify(self, source: str, payload: Any = None) -> None:
        """Record one event and restart the quiescence window."""

        if self._disposed:
            return
        self._burst_size += 1
        self._last = TriggerEvent(source, payload, self._burst_size)
        self._timer.start()

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def flush(self) -> bool:
        """Fire immediately if a burst is pending; return whether it fired."""

        if not self._timer.isActive():
            return False
        self._timer.stop()
        self._on_quiescent()
        return True

    def dispose(self) -> None:
        self._disposed = True
        self._timer.stop()
        for source, handler in self._connections:
            try:
                source.disconnect(handler)
            except (TypeError, RuntimeError, ValueError):  # pragma: no cover - Qt disconnect quirk
                pass
        self._connections.clear()
        self._last = None
        self._burst_size = 0

    @Slot()
    def _on_quiescent(self) -> None:
        event = self._last
        self._last = None
        self._burst_size = 0
        if event is None or self._disposed:
            return
        logger.debug(
            "Trigger fired after %d event(s); last from %s", event.burst_size, event.source
        )
        self.triggered.emit(event)


__all__ = ["TriggerAggregator", "TriggerEvent"]
