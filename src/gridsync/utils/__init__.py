from .console_logger import configure_console_logging
from .signal import Signal

__all__ = ["Signal", "configure_console_logging"]
