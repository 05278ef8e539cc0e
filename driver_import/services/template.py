from __future__ import annotations

from pathlib import Path

from ..models.fields import DestinationField
from ..tabular.reader import DELIMITER

"""Downloadable import template.

One header per destination field (display labels, catalogue order) plus an
illustrative example row. Every header auto-maps to its own field.
"""

__all__ = [
    "TEMPLATE_FILE_NAME",
    "TEMPLATE_HEADERS",
    "TEMPLATE_EXAMPLE_ROW",
    "render_template",
    "write_template",
]

TEMPLATE_FILE_NAME = "driver-import-template.csv"

TEMPLATE_HEADERS: list[str] = [f.label for f in DestinationField]  # type: ignore[attr-defined]

TEMPLATE_EXAMPLE_ROW: list[str] = [
    "Carlos",
    "A",
    "Gonzalez",
    "carlos@example.com",
    "909-213-6870",
    "06/21/2000",
    "***-**-5678",
    "D5211514",
    "CA",
    "12/30/2025",
    "Class C",
    "12/30/2025",
    "12/30/2025",
    "12/30/2025",
    "11/16/2020",
    "Active",
    "Full-time",
    "",
    "10/31/2020",
    "1311 W Maitland St",
    "Apt 201",
    "Ontario",
    "CA",
    "91762",
    "Maria Gonzalez",
    "909-555-0123",
]


def render_template() -> str:
    lines = [DELIMITER.join(TEMPLATE_HEADERS), DELIMITER.join(TEMPLATE_EXAMPLE_ROW)]
    return "\n".join(lines) + "\n"


def write_template(path: Path) -> Path:
    """Write the template; a directory path receives the default file name."""
    target = path / TEMPLATE_FILE_NAME if path.is_dir() else path
    target.write_text(render_template(), encoding="utf-8")
    return target
