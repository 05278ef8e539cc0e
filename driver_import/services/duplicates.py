from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..models.duplicate import DuplicateMatch, ExistingDriver, MatchKey
from ..models.fields import DestinationField

"""Duplicate detection against already-stored drivers.

Identity keys are email and license number, compared case-insensitively.
Email is searched across the whole reference list before license number,
so when the two keys hit different drivers only the email match is
reported.
"""

__all__ = [
    "find_duplicate",
    "detect_duplicates",
]

logger = logging.getLogger(__name__)


def _key(value: str | None) -> str:
    return (value or "").strip().lower()


def find_duplicate(
    row_index: int, record: Mapping[DestinationField, str], existing: Sequence[ExistingDriver]
) -> DuplicateMatch | None:
    email = _key(record.get(DestinationField.EMAIL))
    license_number = _key(record.get(DestinationField.LICENSE_NUMBER))

    # 空キー同士は一致扱いしない
    if email:
        for driver in existing:
            if _key(driver.email) == email:
                return DuplicateMatch(row_index, dict(record), driver, MatchKey.EMAIL)
    if license_number:
        for driver in existing:
            if _key(driver.license_number) == license_number:
                return DuplicateMatch(row_index, dict(record), driver, MatchKey.LICENSE_NUMBER)
    return None


def detect_duplicates(
    records: Sequence[Mapping[DestinationField, str]], existing: Sequence[ExistingDriver]
) -> dict[int, DuplicateMatch]:
    """Flag every record colliding with an existing driver (row index -> match)."""
    matches: dict[int, DuplicateMatch] = {}
    if not existing:
        return matches
    for idx, record in enumerate(records):
        match = find_duplicate(idx, record, existing)
        if match is not None:
            matches[idx] = match
    logger.debug("duplicate check rows=%d reference=%d matches=%d", len(records), len(existing), len(matches))
    return matches
