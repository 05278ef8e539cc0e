from __future__ import annotations

from dataclasses import dataclass, field

from .fields import IGNORE, DestinationField, Ignore

"""Column mapping models.

A ColumnMapping associates one source column with a destination field (or
"ignore"). Mappings are frozen; operator overrides replace the mapping for
a column via dataclasses.replace so earlier snapshots stay valid.
"""

__all__ = [
    "ColumnMapping",
    "QuickFix",
]


@dataclass(frozen=True)
class ColumnMapping:
    """Operator-controlled association of a source column to a destination.

    preview_value caches the preview row's cell for this column and is
    re-synced whenever the preview row changes.
    """
    source_column: str
    destination_field: DestinationField | Ignore = IGNORE
    preview_value: str = ""

    @property
    def is_ignored(self) -> bool:
        return self.destination_field == IGNORE


@dataclass(frozen=True)
class QuickFix:
    """One-click mapping proposal for an unmapped required field."""
    destination_field: DestinationField
    candidates: list[str] = field(default_factory=list)  # ignore 中のソース列名 (列順)
