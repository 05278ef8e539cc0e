from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.fields import DestinationField
from ..models.mapping import ColumnMapping
from ..models.row_data import RawRow

"""Row projection: raw source rows -> destination-shaped records."""

__all__ = [
    "ProjectedRecord",
    "project",
    "project_all",
    "duplicate_targets",
]

logger = logging.getLogger(__name__)

ProjectedRecord = dict[DestinationField, str]


def project(raw_row: RawRow, mappings: Sequence[ColumnMapping]) -> ProjectedRecord:
    """Copy mapped cells into a record keyed by destination field.

    Ignored columns are absent from the result. When two columns target the
    same field the later column (header order) wins.
    """
    record: ProjectedRecord = {}
    for m in mappings:
        if m.is_ignored:
            continue
        record[m.destination_field] = raw_row.get(m.source_column)  # type: ignore[index]
    return record


def project_all(rows: Sequence[RawRow], mappings: Sequence[ColumnMapping]) -> list[ProjectedRecord]:
    conflicts = duplicate_targets(mappings)
    if conflicts:
        logger.debug("multiple source columns map to the same field (last wins): %s", conflicts)
    return [project(r, mappings) for r in rows]


def duplicate_targets(mappings: Sequence[ColumnMapping]) -> dict[str, list[str]]:
    """Destination fields targeted by more than one source column."""
    targets: dict[str, list[str]] = {}
    for m in mappings:
        if m.is_ignored:
            continue
        targets.setdefault(str(m.destination_field), []).append(m.source_column)
    return {k: v for k, v in targets.items() if len(v) > 1}
