"""Console output for the ``gridsync`` logger hierarchy."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

HANDLER_NAME = "gridsync-console"
ROOT_LOGGER = "gridsync"
# Fetch workers log from pool threads, so the thread name is part of every line.
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"


def configure_console_logging(
    verbose: bool = False,
    *,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Attach one console handler to the ``gridsync`` logger and return it.

    Calling again reuses the installed handler and only updates its level,
    so the demo and CLI can call this unconditionally.
    """

    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    handler = next((h for h in logger.handlers if h.get_name() == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(level)
    logger.setLevel(level)
    return handler


__all__ = ["configure_console_logging"]
