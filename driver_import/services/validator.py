from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from ..models.fields import DATE_FIELDS, REQUIRED_FIELDS, DestinationField
from ..models.finding import ErrorKind, ValidationFinding
from .dates import check_date

"""Field validation and auto-repair suggestions.

Rules are applied per field and the first failing rule wins, so a field
carries at most one finding:

- required fields must be non-empty
- email must look like local@domain.tld
- phone must have 10 or 11 digits; valid numbers not already written as
  NNN-NNN-NNNN get a FormatSuggestion with the canonical form
- date fields must be YYYY-MM-DD; other parseable notations get an
  InvalidDateFormat finding with the canonical form as suggestion
"""

__all__ = [
    "validate_email",
    "format_phone_number",
    "check_phone",
    "validate_field",
    "validate_record",
    "validate_all",
]

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_NON_DIGIT = re.compile(r"\D")

_PHONE_FIELDS = (DestinationField.PHONE,)


def validate_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def format_phone_number(value: str) -> str:
    """Best-effort NNN-NNN-NNNN rendering of a phone number.

    11 digits drop the leading country digit, longer numbers keep the first
    ten digits, shorter ones are returned as bare digits.
    """
    digits = _NON_DIGIT.sub("", value)
    if len(digits) == 10:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    if len(digits) == 11:
        return f"{digits[1:4]}-{digits[4:7]}-{digits[7:]}"
    if len(digits) > 11:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:10]}"
    if digits:
        return digits
    return value


def check_phone(value: str) -> tuple[ErrorKind | None, str | None]:
    """Return (error_kind, suggestion) for a phone value; (None, None) when canonical."""
    digits = _NON_DIGIT.sub("", value)
    formatted = format_phone_number(value)
    suggestion = formatted if formatted != value else None
    if len(digits) < 10:
        return ErrorKind.PHONE_TOO_SHORT, suggestion
    if len(digits) > 11:
        return ErrorKind.PHONE_TOO_LONG, suggestion
    if suggestion is not None:
        return ErrorKind.FORMAT_SUGGESTION, suggestion
    return None, None


def validate_field(row_index: int, field: DestinationField, value: str | None) -> ValidationFinding | None:
    """Run the rules that apply to one field; at most one finding is returned."""
    raw = value or ""
    if not raw.strip():
        if field.required:  # type: ignore[attr-defined]
            return ValidationFinding(row_index, field, raw, ErrorKind.MISSING_REQUIRED)
        return None

    if field is DestinationField.EMAIL:
        if not validate_email(raw):
            return ValidationFinding(row_index, field, raw, ErrorKind.INVALID_EMAIL)
        return None

    if field in _PHONE_FIELDS:
        kind, suggestion = check_phone(raw)
        if kind is not None:
            return ValidationFinding(row_index, field, raw, kind, suggestion)
        return None

    if field in DATE_FIELDS:
        result = check_date(raw)
        if result.valid:
            return None
        if result.suggestion is not None:
            return ValidationFinding(row_index, field, raw, ErrorKind.INVALID_DATE_FORMAT, result.suggestion)
        return ValidationFinding(row_index, field, raw, ErrorKind.UNPARSEABLE_DATE)

    return None


def validate_record(row_index: int, record: Mapping[DestinationField, str]) -> list[ValidationFinding]:
    """Validate one projected record.

    Required fields are checked even when no column is mapped to them; other
    fields only when present in the record.
    """
    findings: list[ValidationFinding] = []
    fields: list[DestinationField] = list(REQUIRED_FIELDS)
    fields.extend(f for f in record if f not in REQUIRED_FIELDS)
    for field in fields:
        finding = validate_field(row_index, field, record.get(field))
        if finding is not None:
            findings.append(finding)
    return findings


def validate_all(records: Sequence[Mapping[DestinationField, str]]) -> dict[int, list[ValidationFinding]]:
    """Full validation pass. Rows without findings are absent from the result."""
    result: dict[int, list[ValidationFinding]] = {}
    for idx, record in enumerate(records):
        findings = validate_record(idx, record)
        if findings:
            result[idx] = findings
    total = sum(len(v) for v in result.values())
    logger.debug("validation pass rows=%d rows_with_findings=%d findings=%d", len(records), len(result), total)
    return result
