from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Literal

from ..models.duplicate import DuplicateMatch, ExistingDriver
from ..models.fields import IGNORE, DestinationField, Ignore, parse_destination
from ..models.finding import ValidationFinding
from ..models.mapping import ColumnMapping, QuickFix
from ..models.partition import FilterView, RowCounts, RowStatus
from ..tabular.reader import ParsedFile
from .auto_mapper import (
    build_initial_mappings,
    detect_full_name_issue,
    find_missing_required,
    suggest_quick_fixes,
    sync_preview,
)
from .duplicates import detect_duplicates
from .projector import ProjectedRecord, project_all
from .validator import validate_all, validate_field

"""Reconciliation grid: the editable, validated view of every uploaded row.

State held per session:
- mappings (operator owned after the initial auto-match)
- mapped rows (projection of the raw rows, patched by cell edits)
- findings per row, duplicate matches per row, rows whose duplicate flag
  was skipped by the operator
- preview row index for the mapping-stage column preview

Any mapping change recomputes projection, findings and duplicates in full
(and forgets skipped duplicates). Cell edits and duplicate skips patch a
single row.
"""

__all__ = [
    "GridError",
    "ReconciliationGrid",
]

logger = logging.getLogger(__name__)


class GridError(Exception):
    """Raised for operations referring to unknown rows, columns or findings."""


def _resolve(field: DestinationField | str) -> DestinationField | Ignore:
    if isinstance(field, DestinationField):
        return field
    try:
        return parse_destination(field)
    except ValueError as e:
        raise GridError(str(e)) from e


class ReconciliationGrid:
    """Stateful reconciliation view over one parsed upload.

    Args:
        parsed: Parsed upload (headers + raw rows)
        existing: Reference drivers for duplicate detection (read once by the caller)
        mappings: Operator mappings to start from; auto-matched when None/empty
        trust_edits: When True an edited cell is accepted without re-running
            its validation rule (legacy behaviour). Default re-validates.
    """

    def __init__(
        self,
        parsed: ParsedFile,
        existing: Sequence[ExistingDriver] = (),
        mappings: Sequence[ColumnMapping] | None = None,
        *,
        trust_edits: bool = False,
    ) -> None:
        self.file_name = parsed.file_name
        self.headers = list(parsed.headers)
        self.raw_rows = list(parsed.rows)
        self.existing = list(existing)
        self.trust_edits = trust_edits
        self.preview_row_index = 0

        if mappings:
            self._mappings = sync_preview(mappings, self.raw_rows, self.preview_row_index)
        else:
            self._mappings = build_initial_mappings(self.headers, self.raw_rows, self.preview_row_index)

        self._mapped_rows: list[ProjectedRecord] = []
        self._findings: dict[int, list[ValidationFinding]] = {}
        self._duplicates: dict[int, DuplicateMatch] = {}
        self._skipped: set[int] = set()
        self._recompute()

    # ------------------------------------------------------------------
    # Mapping stage
    # ------------------------------------------------------------------
    @property
    def mappings(self) -> list[ColumnMapping]:
        return list(self._mappings)

    def set_mapping(self, source_column: str, destination: DestinationField | Ignore | str) -> None:
        """Override the destination of one source column and recompute everything."""
        target = _resolve(destination)
        if source_column not in {m.source_column for m in self._mappings}:
            raise GridError(f"unknown source column: {source_column!r}")
        self._mappings = [
            replace(m, destination_field=target) if m.source_column == source_column else m
            for m in self._mappings
        ]
        logger.debug("mapping changed column=%s -> %s", source_column, target)
        self._recompute()

    def replace_mappings(self, mappings: Sequence[ColumnMapping]) -> None:
        self._mappings = sync_preview(mappings, self.raw_rows, self.preview_row_index)
        self._recompute()

    def apply_quick_fix(self, fix: QuickFix, source_column: str) -> None:
        if source_column not in fix.candidates:
            raise GridError(f"{source_column!r} is not a candidate for {fix.destination_field}")
        self.set_mapping(source_column, fix.destination_field)

    def missing_required(self) -> list[DestinationField]:
        return find_missing_required(self._mappings)

    def quick_fixes(self) -> list[QuickFix]:
        return suggest_quick_fixes(self._mappings)

    def full_name_warnings(self) -> list[str]:
        """Source columns holding a full name but mapped to a single name field."""
        return [m.source_column for m in self._mappings if detect_full_name_issue(m.source_column, m.destination_field)]

    def set_preview_row(self, index: int) -> int:
        """Move the preview row (clamped to the data range) and re-sync previews."""
        last = max(len(self.raw_rows) - 1, 0)
        self.preview_row_index = min(max(index, 0), last)
        self._mappings = sync_preview(self._mappings, self.raw_rows, self.preview_row_index)
        return self.preview_row_index

    def cycle_preview(self, direction: Literal["next", "prev"]) -> int:
        step = 1 if direction == "next" else -1
        return self.set_preview_row(self.preview_row_index + step)

    # ------------------------------------------------------------------
    # Review stage
    # ------------------------------------------------------------------
    def _recompute(self) -> None:
        self._mapped_rows = project_all(self.raw_rows, self._mappings)
        self._findings = validate_all(self._mapped_rows)
        self._duplicates = detect_duplicates(self._mapped_rows, self.existing)
        self._skipped = set()
        counts = self.counts()
        logger.info(
            "validated rows=%d ready=%d errors=%d duplicates=%d",
            counts.total,
            counts.ready,
            counts.errors,
            counts.duplicates,
        )

    def _check_row(self, row_index: int) -> None:
        if not 0 <= row_index < len(self._mapped_rows):
            raise GridError(f"row index out of range: {row_index}")

    def __len__(self) -> int:
        return len(self._mapped_rows)

    @property
    def mapped_rows(self) -> list[ProjectedRecord]:
        return [dict(r) for r in self._mapped_rows]

    def record(self, row_index: int) -> ProjectedRecord:
        self._check_row(row_index)
        return dict(self._mapped_rows[row_index])

    def findings_for(self, row_index: int) -> list[ValidationFinding]:
        return list(self._findings.get(row_index, []))

    def all_findings(self) -> list[ValidationFinding]:
        return [f for idx in sorted(self._findings) for f in self._findings[idx]]

    @property
    def duplicates(self) -> dict[int, DuplicateMatch]:
        return dict(self._duplicates)

    @property
    def skipped_rows(self) -> set[int]:
        return set(self._skipped)

    def edit_cell(self, row_index: int, field: DestinationField | str, value: str) -> list[ValidationFinding]:
        """Commit an operator edit and return the row's findings afterwards."""
        self._check_row(row_index)
        target = _resolve(field)
        if target == IGNORE:
            raise GridError("cannot edit an ignored column")
        self._mapped_rows[row_index][target] = value  # type: ignore[index]

        remaining = [f for f in self._findings.get(row_index, []) if f.field != target]
        if not self.trust_edits:
            finding = validate_field(row_index, target, value)  # type: ignore[arg-type]
            if finding is not None:
                remaining.append(finding)
        if remaining:
            self._findings[row_index] = remaining
        else:
            self._findings.pop(row_index, None)
        logger.debug("cell edit row=%d field=%s findings=%d", row_index, target, len(remaining))
        return list(remaining)

    def apply_suggestion(self, row_index: int, field: DestinationField | str) -> list[ValidationFinding]:
        target = _resolve(field)
        for finding in self._findings.get(row_index, []):
            if finding.field == target and finding.suggestion is not None:
                return self.edit_cell(row_index, target, finding.suggestion)
        raise GridError(f"no suggestion for row={row_index} field={target}")

    def apply_all_suggestions(self) -> int:
        """Apply every outstanding suggestion; returns how many cells changed."""
        pending = [f for f in self.all_findings() if f.suggestion is not None]
        for finding in pending:
            self.edit_cell(finding.row_index, finding.field, finding.suggestion)  # type: ignore[arg-type]
        return len(pending)

    def skip_duplicate(self, row_index: int) -> bool:
        """Drop the duplicate flag of a row for this session. False if it had none."""
        self._check_row(row_index)
        if self._duplicates.pop(row_index, None) is None:
            return False
        self._skipped.add(row_index)
        logger.debug("duplicate skipped row=%d status=%s", row_index, self.status(row_index).value)
        return True

    def skip_all_duplicates(self) -> int:
        rows = list(self._duplicates)
        for idx in rows:
            self.skip_duplicate(idx)
        return len(rows)

    # ------------------------------------------------------------------
    # Partition
    # ------------------------------------------------------------------
    def status(self, row_index: int) -> RowStatus:
        self._check_row(row_index)
        if self._findings.get(row_index):
            return RowStatus.HAS_ERRORS
        if row_index in self._duplicates:
            return RowStatus.IS_DUPLICATE
        return RowStatus.READY

    def partition(self) -> dict[RowStatus, list[int]]:
        parts: dict[RowStatus, list[int]] = {s: [] for s in RowStatus}
        for idx in range(len(self._mapped_rows)):
            parts[self.status(idx)].append(idx)
        return parts

    def counts(self) -> RowCounts:
        parts = self.partition()
        return RowCounts(
            total=len(self._mapped_rows),
            ready=len(parts[RowStatus.READY]),
            errors=len(parts[RowStatus.HAS_ERRORS]),
            duplicates=len(parts[RowStatus.IS_DUPLICATE]),
        )

    def view(self, view: FilterView | str = FilterView.ALL) -> list[tuple[int, ProjectedRecord]]:
        """Rows admitted by a filter view, in row order."""
        selected = view if isinstance(view, FilterView) else FilterView(view)
        return [
            (idx, dict(row))
            for idx, row in enumerate(self._mapped_rows)
            if selected.admits(self.status(idx))
        ]

    def ready_records(self) -> list[tuple[int, ProjectedRecord]]:
        return self.view(FilterView.READY)
