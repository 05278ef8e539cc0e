"""Domain models for the driver roster import.

This package contains the domain model classes shared by the reader, the
validation services, the reconciliation grid and the importer.
"""

from .duplicate import DuplicateMatch, ExistingDriver, MatchKey
from .error_record import ErrorRecord
from .fields import DATE_FIELDS, IGNORE, REQUIRED_FIELDS, DestinationField
from .finding import ErrorKind, ValidationFinding
from .import_result import ImportContext, ImportResult
from .mapping import ColumnMapping, QuickFix
from .partition import FilterView, RowCounts, RowStatus
from .row_data import RawRow

__all__ = [
    # Destination schema
    "DestinationField",
    "IGNORE",
    "REQUIRED_FIELDS",
    "DATE_FIELDS",
    # Parsing / mapping
    "RawRow",
    "ColumnMapping",
    "QuickFix",
    # Validation / reconciliation
    "ErrorKind",
    "ValidationFinding",
    "ExistingDriver",
    "DuplicateMatch",
    "MatchKey",
    "RowStatus",
    "FilterView",
    "RowCounts",
    # Import
    "ImportContext",
    "ImportResult",
    "ErrorRecord",
]
