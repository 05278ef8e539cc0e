from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .fields import DestinationField

"""Validation finding models.

Findings are row-local, never raised: they are state attached to a cell.
A finding may carry a machine-computed repair suggestion; applying the
suggestion (or editing the cell) clears the finding.
"""

__all__ = [
    "ErrorKind",
    "ValidationFinding",
]


class ErrorKind(Enum):
    """Classification of a per-cell validation problem.

    FORMAT_SUGGESTION is the only non-blocking kind from a data point of
    view (the value is usable, only its notation is off), but every finding
    still keeps its row out of the ready set until it is resolved.
    """
    MISSING_REQUIRED = "MISSING_REQUIRED"
    INVALID_EMAIL = "INVALID_EMAIL"
    PHONE_TOO_SHORT = "PHONE_TOO_SHORT"
    PHONE_TOO_LONG = "PHONE_TOO_LONG"
    FORMAT_SUGGESTION = "FORMAT_SUGGESTION"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    UNPARSEABLE_DATE = "UNPARSEABLE_DATE"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def is_blocking(self) -> bool:
        return self is not ErrorKind.FORMAT_SUGGESTION


_MESSAGES = {
    ErrorKind.MISSING_REQUIRED: "Required field",
    ErrorKind.INVALID_EMAIL: "Invalid email format",
    ErrorKind.PHONE_TOO_SHORT: "Phone number too short",
    ErrorKind.PHONE_TOO_LONG: "Phone number too long",
    ErrorKind.FORMAT_SUGGESTION: "Format suggestion",
    ErrorKind.INVALID_DATE_FORMAT: "Invalid date format",
    ErrorKind.UNPARSEABLE_DATE: "Unrecognized date",
}


@dataclass(frozen=True)
class ValidationFinding:
    """A per-field, per-row problem report.

    Attributes:
        row_index: 0-based data row index
        field: Destination field the finding belongs to
        raw_value: Cell value that was validated ("" for missing values)
        error_kind: Classification of the problem
        suggestion: Auto-computed replacement value, if one could be derived
    """
    row_index: int
    field: DestinationField
    raw_value: str
    error_kind: ErrorKind
    suggestion: str | None = None

    @property
    def message(self) -> str:
        return self.error_kind.message

    @property
    def has_suggestion(self) -> bool:
        return self.suggestion is not None
