"""Custom exception hierarchy for gridsync."""

from __future__ import annotations


class GridSyncError(Exception):
    """Base class for all custom errors raised by gridsync."""


# --- Data source errors ---

class DataSourceError(GridSyncError):
    """Base class for failures reported by the remote data source."""


class FetchError(DataSourceError):
    """Raised when the data source fails to deliver a chunk."""

    def __init__(self, message: str, generation: int | None = None) -> None:
        super().__init__(message)
        self.generation = generation


class FetchTimeoutError(FetchError):
    """Raised when a fetch exceeds the configured watchdog interval."""


# --- Configuration errors ---

class ColumnConfigError(GridSyncError):
    """Raised when column definitions cannot be overridden."""


class SettingsError(GridSyncError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "ColumnConfigError",
    "DataSourceError",
    "FetchError",
    "FetchTimeoutError",
    "GridSyncError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
]
