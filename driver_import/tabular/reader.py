from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..models.row_data import RawRow

"""Delimited text reader for driver roster uploads.

First non-blank line is the header row, every following non-blank line is a
data row. Cells are split on "," and have surrounding double quotes
stripped (not unescaped). Quoted delimiters, multi-line fields and
delimiter sniffing are intentionally unsupported: a malformed line simply
yields a shorter row whose missing trailing cells read as "".
"""

__all__ = [
    "DELIMITER",
    "ParseError",
    "EmptyFileError",
    "NoDataRowsError",
    "UnsupportedFileError",
    "ParsedFile",
    "parse_csv_text",
    "read_csv_file",
    "read_csv_file_async",
]

logger = logging.getLogger(__name__)

DELIMITER = ","
QUOTE = '"'


class ParseError(Exception):
    """Base class for fatal file-level parse errors."""


class EmptyFileError(ParseError):
    """Raised when the file has no non-blank lines."""

    def __init__(self, message: str = "File is empty") -> None:
        super().__init__(message)


class NoDataRowsError(ParseError):
    """Raised when the file has a header row but no data rows."""

    def __init__(self, message: str = "No data rows found in file") -> None:
        super().__init__(message)


class UnsupportedFileError(ParseError):
    """Raised when the upload is not a .csv file."""


@dataclass
class ParsedFile:
    headers: list[str]
    rows: list[RawRow] = field(default_factory=list)
    file_name: str | None = None

    def __len__(self) -> int:
        return len(self.rows)


def _clean_cell(text: str) -> str:
    # 前後空白除去 → 両端の " を1つずつ除去 (エスケープ解除はしない)
    cell = text.strip()
    if cell.startswith(QUOTE):
        cell = cell[1:]
    if cell.endswith(QUOTE):
        cell = cell[:-1]
    return cell


def parse_csv_text(text: str, file_name: str | None = None) -> ParsedFile:
    """Parse the full text content of a delimited file.

    Parameters
    ----------
    text: file content (already decoded)
    file_name: original file name, kept for error logging

    Raises:
        EmptyFileError: no non-blank lines
        NoDataRowsError: header row only
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        raise EmptyFileError()

    headers = [_clean_cell(h) for h in lines[0].split(DELIMITER)]
    if len(lines) == 1:
        raise NoDataRowsError()

    rows: list[RawRow] = []
    for idx, line in enumerate(lines[1:]):
        cells = [_clean_cell(v) for v in line.split(DELIMITER)]
        if len(cells) != len(headers):
            logger.debug(
                "row=%d cell_count=%d header_count=%d (short rows padded, extra cells dropped)",
                idx,
                len(cells),
                len(headers),
            )
        values = {h: (cells[i] if i < len(cells) else "") for i, h in enumerate(headers)}
        rows.append(RawRow(row_index=idx, values=values))

    logger.debug("parsed file=%s headers=%d rows=%d", file_name, len(headers), len(rows))
    return ParsedFile(headers=headers, rows=rows, file_name=file_name)


def read_csv_file(path: Path) -> ParsedFile:
    """Read and parse an uploaded .csv file.

    Raises:
        UnsupportedFileError: the file name does not end in .csv
        ParseError: the file cannot be read or decoded (plus the parse errors above)
    """
    if path.suffix.lower() != ".csv":
        raise UnsupportedFileError(f"Please upload a CSV file: {path.name}")
    try:
        # utf-8-sig: Excel 出力の BOM を除去
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Failed to read file {path.name}: {e}") from e
    return parse_csv_text(text, file_name=path.name)


async def read_csv_file_async(path: Path) -> ParsedFile:
    """Async variant: the file read runs in a worker thread, parsing after it resolves."""
    return await asyncio.to_thread(read_csv_file, path)
