"""Snapshot of the view configuration handed to the data source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence, Tuple

from .cell_values import SortDirection
from .columns import ColumnState


@dataclass(frozen=True)
class ViewState:
    """Sort and filter state at the moment a fetch was triggered.

    ``payload`` carries whatever the last trigger of the burst emitted, so an
    external refresh signal can pass parameters through to the fetch.
    """

    columns: Tuple[ColumnState, ...] = ()
    filters: Tuple[Tuple[str, str], ...] = ()
    payload: Any = field(default=None, compare=False)

    @classmethod
    def build(
        cls,
        columns: Sequence[ColumnState],
        filters: Mapping[str, str],
        payload: Any = None,
    ) -> "ViewState":
        return cls(
            columns=tuple(columns),
            filters=tuple(sorted(filters.items())),
            payload=payload,
        )

    @property
    def sort_model(self) -> list[ColumnState]:
        return [state for state in self.columns if state.sort is not SortDirection.NONE]

    @property
    def filter_model(self) -> Dict[str, str]:
        return dict(self.filters)


__all__ = ["ViewState"]
