from __future__ import annotations

from pathlib import Path

import pandas as pd

from ..models.fields import DestinationField
from .grid import ReconciliationGrid

"""Reconciliation report: the grid as a pandas DataFrame / CSV file.

Columns: row (1-based, as shown to operators), status, one column per
destination field, issues (findings and duplicate match, "; " separated).
"""

__all__ = [
    "grid_to_frame",
    "write_report",
]


def _issues(grid: ReconciliationGrid, row_index: int) -> str:
    parts = []
    for f in grid.findings_for(row_index):
        text = f"{f.field.value}: {f.message}"
        if f.suggestion is not None:
            text += f" (suggest {f.suggestion})"
        parts.append(text)
    match = grid.duplicates.get(row_index)
    if match is not None:
        parts.append(f"duplicate of {match.existing.id} by {match.matched_on.label}")
    return "; ".join(parts)


def grid_to_frame(grid: ReconciliationGrid) -> pd.DataFrame:
    columns = ["row", "status", *[f.value for f in DestinationField], "issues"]
    records = []
    for idx, row in grid.view():
        item: dict[str, object] = {"row": idx + 1, "status": grid.status(idx).value}
        for f in DestinationField:
            item[f.value] = row.get(f, "")
        item["issues"] = _issues(grid, idx)
        records.append(item)
    return pd.DataFrame.from_records(records, columns=columns)


def write_report(grid: ReconciliationGrid, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    grid_to_frame(grid).to_csv(path, index=False)
    return path
