"""Pure Python signal system with no Qt dependency.

Data sources hand the table plain ``Signal`` objects for their loading
state, their external refresh trigger and the sink that receives fetched
chunks, so they can be driven from code that never touches Qt.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Signal:
    """Pure Python signal that does not depend on Qt.

    Thread-safe: all handler mutations and emissions are protected by a lock.
    Exceptions raised by individual handlers are caught and logged so that one
    failing handler does not prevent subsequent handlers from executing.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> None:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)

