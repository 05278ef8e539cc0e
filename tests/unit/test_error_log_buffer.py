from __future__ import annotations
import json
from pathlib import Path
from driver_import.logging.error_log import (
    COMMIT_ERROR_TYPE,
    DUPLICATE_ERROR_TYPE,
    ErrorLogBuffer,
    ErrorRecord,
)
from driver_import.models.duplicate import ExistingDriver
from driver_import.models.fields import DestinationField
from driver_import.models.finding import ErrorKind, ValidationFinding
from driver_import.services.grid import ReconciliationGrid
from driver_import.services.importer import CommitError
from driver_import.tabular.reader import parse_csv_text

KEYS = {"timestamp", "file", "row", "field", "error_type", "value", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create("roster.csv", 10, "COMMIT_FAILED", "duplicate key", field="email", value="a@b.co")
    data = json.loads(rec.to_json_line())
    assert data["file"] == "roster.csv"
    assert data["row"] == 10
    assert data["error_type"] == "COMMIT_FAILED"
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_error_record_from_finding():
    finding = ValidationFinding(2, DestinationField.PHONE, "9092136870", ErrorKind.FORMAT_SUGGESTION, "909-213-6870")
    rec = ErrorRecord.from_finding("roster.csv", finding)
    assert rec.row == 2
    assert rec.field == "phone"
    assert rec.error_type == "FORMAT_SUGGESTION"
    assert rec.value == "9092136870"
    assert rec.message == "Format suggestion: 909-213-6870"


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("f.csv", 1, "INVALID_EMAIL", "Invalid email format"))
    buf.append(ErrorRecord.create("f.csv", 2, "MISSING_REQUIRED", "Required field"))
    path = buf.flush()
    assert path.parent == Path("logs")
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    # flush 後バッファクリア
    assert len(buf) == 0


def test_error_log_buffer_multiple_flushes(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("f.csv", 1, "X", "one"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("f.csv", 2, "X", "two"))
    assert buf.flush() == path
    assert path.stat().st_size > size1


def test_empty_flush_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_record_grid_and_commit_failure(tmp_path: Path, make_csv):
    existing = [ExistingDriver("drv_1", license_number="D5211515")]
    grid = ReconciliationGrid(parse_csv_text(make_csv({"Email": "bad"}, {})), existing)
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    assert buf.record_grid("roster.csv", grid) == 2
    finding, dup = buf.records
    assert (finding.row, finding.error_type, finding.value) == (0, "INVALID_EMAIL", "bad")
    assert (dup.row, dup.error_type, dup.field, dup.value) == (1, DUPLICATE_ERROR_TYPE, "licenseNumber", "D5211515")
    assert "drv_1" in dup.message

    buf.record_commit_failure("roster.csv", CommitError(1, 3, 2, RuntimeError("boom")))
    assert buf.records[-1].error_type == COMMIT_ERROR_TYPE
    assert buf.records[-1].row == 3
    assert "boom" in buf.records[-1].message
