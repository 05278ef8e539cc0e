from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .finding import ValidationFinding

"""ErrorRecord model for the JSON Lines error log.

One record per outstanding validation finding, unresolved duplicate, or
commit failure. row=-1 is the sentinel for file-level problems (parse
errors) where no data row applies.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source file name
        row: 0-based data row index, -1 for file-level errors
        field: Destination field name, "" when not field specific
        error_type: Error classification in UPPER_SNAKE_CASE format
        value: Offending cell value ("" when not applicable)
        message: Human-readable description
    """
    timestamp: str
    file: str
    row: int
    field: str
    error_type: str
    value: str
    message: str

    @staticmethod
    def create(
        file: str, row: int, error_type: str, message: str, *, field: str = "", value: str = ""
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            field=field,
            error_type=error_type,
            value=value,
            message=message,
        )

    @staticmethod
    def from_finding(file: str, finding: ValidationFinding) -> ErrorRecord:
        message = finding.message
        if finding.suggestion is not None:
            message = f"{message}: {finding.suggestion}"
        return ErrorRecord.create(
            file=file,
            row=finding.row_index,
            error_type=finding.error_kind.value,
            message=message,
            field=finding.field.value,
            value=finding.raw_value,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
