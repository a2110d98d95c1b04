"""Configuration surface a data source hands to the table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from ..models.rows import Row
from ..models.view_state import ViewState
from ..utils.signal import Signal

FetchFn = Callable[[ViewState], Sequence[Row]]


@dataclass
class HybridServerSideOptions:
    """Wiring between one table and its remote data source.

    ``fetch`` is invoked once per debounced trigger on a worker thread and
    must return the complete replacement chunk.  ``loading`` emits the data
    source's own notion of "busy" as a bool.  ``additional_trigger`` requests
    a refetch with an arbitrary payload.  Every applied chunk is published
    into ``data_emit``.
    """

    fetch: FetchFn
    loading: Signal = field(default_factory=Signal)
    additional_trigger: Signal = field(default_factory=Signal)
    data_emit: Signal = field(default_factory=Signal)
    table_id: Optional[str] = None


__all__ = ["FetchFn", "HybridServerSideOptions"]
