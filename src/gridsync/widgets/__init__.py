"""Qt widgets for tables backed by the sync engine."""

from .clipboard import export_indexes
from .delegate import LoadingRowDelegate
from .table_view import SyncTableView

__all__ = ["LoadingRowDelegate", "SyncTableView", "export_indexes"]
