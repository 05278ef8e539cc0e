from __future__ import annotations

from ..models.import_result import ImportResult
from ..models.partition import RowCounts

"""SUMMARY line rendering for the import CLI.

Format:
SUMMARY rows={total} ready={ready} errors={errors} duplicates={duplicates}
committed={committed} failed={failed} elapsed_sec={elapsed} throughput_rps={throughput}
"""

__all__ = [
    "format_number",
    "render_summary_line",
]


def format_number(value: float) -> str:
    """Render a metric without trailing zeros or scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(
    counts: RowCounts, result: ImportResult | None, *, committed: int = 0, failed: int = 0
) -> str:
    """Render the SUMMARY line.

    Args:
        counts: Grid partition counts at import time
        result: Import result (None for dry runs or aborted imports)
        committed: Rows committed before an abort (used when result is None)
        failed: 1 when the commit loop aborted, else 0

    Examples:
        >>> render_summary_line(RowCounts(total=3, ready=2, errors=1, duplicates=0), None)
        'SUMMARY rows=3 ready=2 errors=1 duplicates=0 committed=0 failed=0 elapsed_sec=0 throughput_rps=0'
    """
    if result is not None:
        committed = result.committed
    elapsed = result.elapsed_seconds if result is not None else 0.0
    throughput = result.throughput_rows_per_sec if result is not None else 0.0
    return (
        f"SUMMARY rows={counts.total} "
        f"ready={counts.ready} "
        f"errors={counts.errors} "
        f"duplicates={counts.duplicates} "
        f"committed={committed} "
        f"failed={failed} "
        f"elapsed_sec={format_number(elapsed)} "
        f"throughput_rps={format_number(throughput)}"
    )
