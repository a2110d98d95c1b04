from .bus import Event, EventBus, Subscription
from .sync_events import (
    ChunkAppliedEvent,
    FetchDiscardedEvent,
    FetchStartedEvent,
    LoadingRowsChangedEvent,
)

__all__ = [
    "ChunkAppliedEvent",
    "Event",
    "EventBus",
    "FetchDiscardedEvent",
    "FetchStartedEvent",
    "LoadingRowsChangedEvent",
    "Subscription",
]
