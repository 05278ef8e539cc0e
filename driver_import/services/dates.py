from __future__ import annotations

import logging
import re
import warnings
from dataclasses import dataclass
from datetime import date

import pandas as pd

"""Date checking and normalization for driver date fields.

Canonical form is ISO 8601 calendar date (YYYY-MM-DD). Parsing happens in
two stages:

1. pandas.to_datetime on the raw string (handles ISO timestamps, US
   slashes, month names, ...).
2. If that fails, a three-integer-token heuristic: MM/DD/YYYY when the
   first token is <= 12, otherwise (or when that is not a real calendar
   date) DD/MM/YYYY.

Values where both day and month are <= 12 are read month-first. That guess
is silent; files written day-first throughout will be misread for those
dates.
"""

__all__ = [
    "DateCheck",
    "is_canonical",
    "parse_date",
    "check_date",
    "normalize_date",
]

logger = logging.getLogger(__name__)

_CANONICAL_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_INT_TOKEN = re.compile(r"\d+")
_DIGIT = re.compile(r"\d")


@dataclass(frozen=True)
class DateCheck:
    """Outcome of checking one date cell.

    valid: already canonical (or empty)
    suggestion: canonical rewrite when the value parsed in another notation
    """
    valid: bool
    suggestion: str | None = None

    @property
    def parseable(self) -> bool:
        return self.valid or self.suggestion is not None


def is_canonical(value: str) -> bool:
    return bool(_CANONICAL_RE.match(value))


def _native_parse(value: str) -> date | None:
    # "today" / "now" などの相対表現は日付として扱わない
    if not _DIGIT.search(value):
        return None
    try:
        with warnings.catch_warnings():
            # dayfirst 推論の UserWarning は抑止 (ヒューリスティック側で判断する)
            warnings.simplefilter("ignore")
            ts = pd.to_datetime(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts.date()


def _token_parse(value: str) -> date | None:
    tokens = _INT_TOKEN.findall(value)
    if len(tokens) != 3:
        return None
    first, second, third = (int(t) for t in tokens)
    if first <= 12:
        try:
            return date(third, first, second)  # MM/DD/YYYY
        except (ValueError, OverflowError):
            pass
    try:
        return date(third, second, first)  # DD/MM/YYYY
    except (ValueError, OverflowError):
        return None


def parse_date(value: str) -> date | None:
    """Parse a raw date cell with the two-stage strategy; None if unparseable."""
    text = value.strip()
    if not text:
        return None
    parsed = _native_parse(text)
    if parsed is None:
        parsed = _token_parse(text)
    return parsed


def check_date(value: str) -> DateCheck:
    """Check one date cell. Empty values are valid (required-ness is checked elsewhere)."""
    text = value.strip()
    if not text:
        return DateCheck(valid=True)

    parsed = _native_parse(text)
    if parsed is not None:
        if is_canonical(text):
            return DateCheck(valid=True)
        return DateCheck(valid=False, suggestion=parsed.isoformat())

    parsed = _token_parse(text)
    if parsed is not None:
        return DateCheck(valid=False, suggestion=parsed.isoformat())

    logger.debug("unparseable date value=%r", value)
    return DateCheck(valid=False)


def normalize_date(value: str) -> str:
    """Canonical form of value when derivable, else value unchanged.

    Idempotent: canonical input is returned as-is.
    """
    result = check_date(value)
    if result.valid:
        return value.strip()
    if result.suggestion is not None:
        return result.suggestion
    return value
