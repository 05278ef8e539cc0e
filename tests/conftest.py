# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Callable
import pytest

from driver_import.logging.init import reset_logging

# テンプレートと同じラベル (1:1 で自動マッピングされる必須列)
REQUIRED_HEADERS = [
    "First Name",
    "Last Name",
    "Email",
    "Phone",
    "License Number",
    "License State",
    "License Expiration",
    "License Class",
    "Hire Date",
    "Employment Status",
    "Employment Type",
]

VALID_ROW = {
    "First Name": "Carlos",
    "Last Name": "Gonzalez",
    "Email": "carlos@example.com",
    "Phone": "909-213-6870",
    "License Number": "D5211514",
    "License State": "CA",
    "License Expiration": "2025-12-30",
    "License Class": "Class C",
    "Hire Date": "2020-11-16",
    "Employment Status": "Active",
    "Employment Type": "Full-time",
}


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """organization_id: org_1
actor_id: user_1
trust_edits: false
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def mock_db(monkeypatch) -> None:
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")


@pytest.fixture()
def make_csv() -> Callable[..., str]:
    """Build CSV text from row overrides on top of VALID_ROW.

    make_csv({"Email": ""}, {"Phone": "9092136870"}) -> header + 2 rows
    """
    def _make(*overrides: dict[str, str], headers: list[str] | None = None) -> str:
        cols = list(headers or REQUIRED_HEADERS)
        lines = [",".join(cols)]
        for i, ov in enumerate(overrides):
            row = dict(VALID_ROW)
            row["Email"] = f"driver{i}@example.com"
            row["License Number"] = f"D{5211514 + i}"
            row.update(ov)
            lines.append(",".join(row.get(c, "") for c in cols))
        return "\n".join(lines) + "\n"
    return _make


@pytest.fixture()
def write_roster(temp_workdir: Path, make_csv) -> Callable[..., Path]:
    def _write(*overrides: dict[str, str], name: str = "roster.csv", headers: list[str] | None = None) -> Path:
        path = temp_workdir / "data" / name
        path.write_text(make_csv(*overrides, headers=headers), encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def required_headers() -> list[str]:
    return list(REQUIRED_HEADERS)
