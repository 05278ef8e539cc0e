from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Row partition models for the reconciliation grid.

Partition membership is derived on demand from the finding and duplicate
sets; it is never stored.
"""

__all__ = [
    "RowStatus",
    "FilterView",
    "RowCounts",
]


class RowStatus(Enum):
    """Partition a row belongs to.

    A row with findings is HAS_ERRORS even when it also collides with an
    existing driver, so every row lands in exactly one partition.
    """
    READY = "ready"
    HAS_ERRORS = "errors"
    IS_DUPLICATE = "duplicate"


class FilterView(Enum):
    ALL = "all"
    READY = "ready"
    ERRORS = "errors"
    DUPLICATES = "duplicates"

    def admits(self, status: RowStatus) -> bool:
        if self is FilterView.ALL:
            return True
        return _VIEW_STATUS[self] is status


_VIEW_STATUS = {
    FilterView.READY: RowStatus.READY,
    FilterView.ERRORS: RowStatus.HAS_ERRORS,
    FilterView.DUPLICATES: RowStatus.IS_DUPLICATE,
}


@dataclass(frozen=True)
class RowCounts:
    """Per-partition row counts. ready + errors + duplicates == total."""
    total: int
    ready: int
    errors: int
    duplicates: int

    @property
    def is_consistent(self) -> bool:
        return self.ready + self.errors + self.duplicates == self.total
