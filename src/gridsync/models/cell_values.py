"""Cell value variants used by the loading-aware column overrides.

Value getters never return raw values to the sorting code.  They return
either a :class:`RealValue` wrapping what the column produced, or a
:class:`SortSentinel` that sits at one end of the ordering depending on the
column's sort direction.  Display and export code branch on the variant
instead of guessing from the type of the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Union

from .. import config


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"
    NONE = "none"

    @property
    def is_descending(self) -> bool:
        return self is SortDirection.DESC


class Ordering(Enum):
    """Tri-state comparator result.

    ``NO_OPINION`` asks the caller to fall back to its own comparison.
    """

    LESS_THAN = -1
    GREATER_THAN = 1
    NO_OPINION = 0

    def inverted(self) -> "Ordering":
        if self is Ordering.LESS_THAN:
            return Ordering.GREATER_THAN
        if self is Ordering.GREATER_THAN:
            return Ordering.LESS_THAN
        return self


@dataclass(frozen=True)
class RealValue:
    value: Any

    def display_text(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SortSentinel:
    """Out-of-band value that sorts after (ascending) or before everything."""

    direction: SortDirection
    max_codepoint: int = config.SENTINEL_MAX_CODEPOINT

    @property
    def is_max(self) -> bool:
        return self.direction is SortDirection.ASC

    @property
    def text(self) -> str:
        """Codepoint form for hosts that can only sort strings."""
        if self.is_max:
            return chr(self.max_codepoint)
        return chr(config.SENTINEL_MIN_CODEPOINT)

    def display_text(self) -> str:
        return self.text


CellValue = Union[RealValue, SortSentinel]


@dataclass(frozen=True)
class AggregateValue:
    """Placeholder produced by group aggregation, e.g. a column total."""

    value: Any
    func: str = "sum"

    def __str__(self) -> str:
        return str(self.value)


def is_aggregation(value: Any) -> bool:
    return isinstance(value, AggregateValue)


def _natural_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, Real):
        return (0, value)
    return (1, str(value).casefold())


def compare_cell_values(left: CellValue, right: CellValue) -> int:
    """Return -1, 0 or 1 for the natural order of two cell values.

    Sentinels sit at the extreme named by their direction.  Numbers compare
    numerically and sort before any text; text compares case-insensitively.
    """

    if isinstance(left, SortSentinel) or isinstance(right, SortSentinel):
        left_rank = _sentinel_rank(left)
        right_rank = _sentinel_rank(right)
        return (left_rank > right_rank) - (left_rank < right_rank)

    left_key = _natural_key(left.value)
    right_key = _natural_key(right.value)
    if left_key == right_key:
        return 0
    return -1 if left_key < right_key else 1


def _sentinel_rank(value: CellValue) -> int:
    if isinstance(value, SortSentinel):
        return 1 if value.is_max else -1
    return 0


__all__ = [
    "AggregateValue",
    "CellValue",
    "Ordering",
    "RealValue",
    "SortDirection",
    "SortSentinel",
    "compare_cell_values",
    "is_aggregation",
]
