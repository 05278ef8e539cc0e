from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Protocol

from ..models.duplicate import ExistingDriver
from ..models.fields import DATE_FIELDS, DestinationField
from ..models.import_result import CommitStatsAccumulator, ImportContext, ImportResult
from .dates import normalize_date
from .progress import ProgressTracker

"""Sequential commit of ready rows to the driver store.

Rows are committed one at a time, in row order, each after the previous
create call returned. There is no transaction around the batch: when a
create call fails the loop stops, rows committed before it stay committed,
and the failure is raised as CommitError.
"""

__all__ = [
    "DriverStore",
    "CommitError",
    "build_payload",
    "run_import",
]

logger = logging.getLogger(__name__)


class DriverStore(Protocol):
    """Destination record store (external collaborator)."""

    def list_existing(self, organization_id: str, include_deleted: bool = True) -> list[ExistingDriver]: ...

    def create(self, payload: Mapping[str, Any]) -> str: ...


class CommitError(Exception):
    """Raised when a create call fails part-way through an import.

    Attributes:
        committed: Number of rows committed before the failure (not rolled back)
        row_index: Data row whose commit failed
        attempted: Rows attempted including the failing one
    """

    def __init__(self, committed: int, row_index: int, attempted: int, cause: BaseException) -> None:
        self.committed = committed
        self.row_index = row_index
        self.attempted = attempted
        self.cause = cause
        super().__init__(
            f"import aborted at row {row_index}: {cause} "
            f"({committed} row(s) already committed and not rolled back)"
        )


def build_payload(record: Mapping[DestinationField, str], context: ImportContext) -> dict[str, Any]:
    """Shape one ready record for the store.

    Date fields are normalized to YYYY-MM-DD, empty optional fields are
    dropped, and organization/actor context is attached.
    """
    payload: dict[str, Any] = {}
    for field, raw in record.items():
        value = (raw or "").strip()
        if not value:
            if field.required:  # type: ignore[attr-defined]
                payload[field.value] = value
            continue
        if field in DATE_FIELDS:
            value = normalize_date(value)
        payload[field.value] = value
    payload["organizationId"] = context.organization_id
    payload["createdBy"] = context.actor_id
    return payload


def run_import(
    records: Sequence[tuple[int, Mapping[DestinationField, str]]],
    store: DriverStore,
    context: ImportContext,
    *,
    on_complete: Callable[[ImportResult], None] | None = None,
    progress: bool = True,
) -> ImportResult:
    """Commit ready records sequentially.

    Args:
        records: (row_index, record) pairs, typically grid.ready_records()
        store: Destination store
        context: Organization/actor attached to each created driver
        on_complete: Called with the result after every row committed
        progress: Show a tqdm bar (TTY only)

    Raises:
        CommitError: On the first failing create call; later rows are not attempted
    """
    start_time = datetime.now(UTC)
    stats = CommitStatsAccumulator()
    created_ids: list[str] = []

    with ProgressTracker(len(records), description="Importing drivers", enabled=progress) as bar:
        for attempt, (row_index, record) in enumerate(records, start=1):
            payload = build_payload(record, context)
            t0 = time.perf_counter()
            try:
                created_id = store.create(payload)
            except Exception as e:
                logger.error(
                    "commit failed row=%d attempted=%d committed=%d: %s",
                    row_index,
                    attempt,
                    len(created_ids),
                    e,
                )
                raise CommitError(committed=len(created_ids), row_index=row_index, attempted=attempt, cause=e) from e
            finally:
                stats.add_commit_time(time.perf_counter() - t0)
            created_ids.append(created_id)
            bar.advance(committed=len(created_ids))
            logger.debug("committed row=%d id=%s", row_index, created_id)

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    _, avg, p95 = stats.get_stats()
    result = ImportResult(
        attempted=len(records),
        committed=len(created_ids),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=(len(created_ids) / elapsed) if elapsed > 0 else 0.0,
        created_ids=created_ids,
        avg_commit_seconds=avg,
        p95_commit_seconds=p95,
    )
    logger.info("import complete committed=%d elapsed=%.3fs", result.committed, elapsed)
    if on_complete is not None:
        on_complete(result)
    return result
