"""Events published while a table synchronises with its data source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .bus import Event


@dataclass(kw_only=True)
class FetchStartedEvent(Event):
    table_id: Optional[str] = None
    generation: int = 0
    payload: Any = None


@dataclass(kw_only=True)
class ChunkAppliedEvent(Event):
    table_id: Optional[str] = None
    generation: int = 0
    row_count: int = 0


@dataclass(kw_only=True)
class FetchDiscardedEvent(Event):
    """A superseded fetch finished; its rows were not applied."""

    table_id: Optional[str] = None
    generation: int = 0
    current_generation: int = 0


@dataclass(kw_only=True)
class LoadingRowsChangedEvent(Event):
    table_id: Optional[str] = None
    present: bool = False
    row_ids: tuple[str, ...] = field(default_factory=tuple)
