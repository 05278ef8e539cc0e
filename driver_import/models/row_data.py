from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

"""RawRow model for the driver import.

RawRow represents one physical data line of the uploaded file after it has
been split into cells and keyed by header. It is produced once by the
tabular reader and never modified afterwards; operator edits are applied to
the projected record held by the reconciliation grid, not to the raw row.
"""

__all__ = [
    "RawRow",
]


@dataclass(frozen=True)
class RawRow(Mapping[str, str]):
    """Immutable column -> raw cell mapping for one data line.

    row_index is 0-based over data lines (the header line is not counted).
    Column order follows the header row.
    """
    row_index: int
    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # 読み取り専用ビューで保持 (dict を外から書き換えられないように)
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, column: str) -> str:
        return self.values[column]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def get(self, column: str, default: str = "") -> str:  # type: ignore[override]
        """Return the cell for column, or "" when the column is absent."""
        return self.values.get(column, default)
