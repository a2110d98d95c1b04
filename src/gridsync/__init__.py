"""gridsync: keep a Qt table in step with a server-side data source.

The engine debounces sort, filter and external refresh signals into
fetches, applies only the newest result and shows a batch of placeholder
rows while the data source reports that it is loading.
"""

from .models import (
    ColumnDef,
    LoadingAwareProxyModel,
    RowStoreModel,
    ViewState,
    build_loading_rows,
)
from .settings import SyncSettings, load_settings
from .sync import (
    FeatureSetup,
    FilterSkipContext,
    HybridServerSideFeature,
    HybridServerSideOptions,
)

__version__ = "0.1.0"

__all__ = [
    "ColumnDef",
    "FeatureSetup",
    "FilterSkipContext",
    "HybridServerSideFeature",
    "HybridServerSideOptions",
    "LoadingAwareProxyModel",
    "RowStoreModel",
    "SyncSettings",
    "ViewState",
    "build_loading_rows",
    "load_settings",
]
