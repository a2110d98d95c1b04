"""Default configuration values for gridsync."""

from __future__ import annotations

from typing import Final

# Number of placeholder rows shown while the remote source reports loading.
# The whole batch is inserted and removed in a single transaction.
LOADING_ROW_COUNT: Final[int] = 25
LOADING_ROW_PREFIX: Final[str] = "loading"

# Quiescence window for filter/sort/external triggers.  A burst of changes
# produces one fetch once the sources stay silent for this long.
DEBOUNCE_MS: Final[int] = 100

# Watchdog for a single fetch.  A fetch running longer than this is treated
# as failed so placeholder rows can never stay on screen indefinitely.
FETCH_TIMEOUT_MS: Final[int] = 30_000

# Worker threads reserved for fetches.  Two is enough for a superseded fetch
# to finish in the background while the current one is already running.
FETCH_MAX_THREADS: Final[int] = 2

# Codepoint used as the "sorts last" sentinel when a column is ascending.
# Descending and unsorted columns use ``chr(0)``.
SENTINEL_MAX_CODEPOINT: Final[int] = 10000
SENTINEL_MIN_CODEPOINT: Final[int] = 0

# Registry key prefix for loading rows that must still be subject to the
# client-side filter.  The full key is ``<token>_<table id>``.
FILTER_SKIP_TOKEN: Final[str] = "loadingRowDroppedFromFilteringIds"

# CSS-like class name attached to loading cells by the auto group column.
LOADING_CELL_CLASS: Final[str] = "-loading-cell"

# Column id of the synthetic tree/group column shown first in the table.
AUTO_GROUP_COLUMN_ID: Final[str] = "ag-Grid-AutoColumn"

# Skeleton bar geometry used by the loading row delegate.
SKELETON_BAR_MARGIN: Final[int] = 6
SKELETON_BAR_RADIUS: Final[int] = 4
