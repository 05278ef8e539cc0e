from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from ..models.duplicate import MatchKey
from ..models.error_record import ErrorRecord

if TYPE_CHECKING:
    from ..services.grid import ReconciliationGrid
    from ..services.importer import CommitError

"""Error log buffering.

- JSON Lines, fixed key set (ErrorRecord)
- 実行ごとに `logs/errors-YYYYMMDD-HHMMSS.log` (UTC), 最初の flush で作成
- 行の findings / 未解決の重複 / コミット失敗をバッファし、まとめて書き出す
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "DUPLICATE_ERROR_TYPE",
    "COMMIT_ERROR_TYPE",
    "PARSE_ERROR_TYPE",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

DUPLICATE_ERROR_TYPE = "DUPLICATE"
COMMIT_ERROR_TYPE = "COMMIT_FAILED"
PARSE_ERROR_TYPE = "PARSE_ERROR"


class ErrorLogBuffer:
    """In-memory buffer of ErrorRecord; flush() appends JSON Lines to the run's file.

    The file path is fixed on first access. Serial use only.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self.logs_dir = logs_dir if logs_dir is not None else LOGS_DIR
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def record_grid(self, file: str, grid: ReconciliationGrid) -> int:
        """Buffer every outstanding finding and active duplicate match. Returns the count added."""
        before = len(self._records)
        for finding in grid.all_findings():
            self.append(ErrorRecord.from_finding(file, finding))
        for row_index, match in sorted(grid.duplicates.items()):
            matched_value = match.existing.email if match.matched_on is MatchKey.EMAIL else match.existing.license_number
            self.append(
                ErrorRecord.create(
                    file=file,
                    row=row_index,
                    error_type=DUPLICATE_ERROR_TYPE,
                    message=f"matches existing driver {match.existing.id} by {match.matched_on.label}",
                    field=match.matched_on.value,
                    value=matched_value or "",
                )
            )
        return len(self._records) - before

    def record_commit_failure(self, file: str, error: CommitError) -> None:
        self.append(
            ErrorRecord.create(
                file=file,
                row=error.row_index,
                error_type=COMMIT_ERROR_TYPE,
                message=str(error),
            )
        )

    def record_parse_failure(self, file: str, error: Exception) -> None:
        self.append(ErrorRecord.create(file=file, row=-1, error_type=PARSE_ERROR_TYPE, message=str(error)))

    def flush(self) -> Path | None:
        """Write buffered records; no file is created when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
