"""Server-side synchronisation engine: triggers, fetches and placeholders."""

from .coordinator import FetchCoordinator, FetchState
from .feature import (
    FeatureSetup,
    FilterSkipContext,
    HybridServerSideFeature,
    filter_skip_key,
    is_row_selectable,
)
from .options import FetchFn, HybridServerSideOptions
from .reconciler import LoadingStateReconciler
from .triggers import TriggerAggregator, TriggerEvent
from .worker import FetchSignals, FetchWorker

__all__ = [
    "FeatureSetup",
    "FetchCoordinator",
    "FetchFn",
    "FetchSignals",
    "FetchState",
    "FetchWorker",
    "FilterSkipContext",
    "HybridServerSideFeature",
    "HybridServerSideOptions",
    "LoadingStateReconciler",
    "TriggerAggregator",
    "TriggerEvent",
    "filter_skip_key",
    "is_row_selectable",
]
