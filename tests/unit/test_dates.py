from __future__ import annotations

from datetime import date

import pytest

from driver_import.services.dates import DateCheck, check_date, is_canonical, normalize_date, parse_date


def test_canonical_value_is_valid():
    assert check_date("2025-12-30") == DateCheck(valid=True)
    assert is_canonical("2025-12-30")
    assert not is_canonical("2025-1-3")


def test_empty_is_valid():
    assert check_date("") == DateCheck(valid=True)
    assert check_date("   ").valid


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("12/30/2025", "2025-12-30"),
        ("02/03/2025", "2025-02-03"),  # 両方 <= 12 は月/日として読む
        ("2025-12-30T08:15:00", "2025-12-30"),
        ("Dec 30, 2025", "2025-12-30"),
        ("30/12/2025", "2025-12-30"),
    ],
)
def test_other_notations_get_suggestion(raw: str, expected: str):
    result = check_date(raw)
    assert result.valid is False
    assert result.suggestion == expected
    assert result.parseable


@pytest.mark.parametrize("raw", ["not a date", "13/13/2025", "tomorrow-ish"])
def test_unparseable(raw: str):
    result = check_date(raw)
    assert result == DateCheck(valid=False, suggestion=None)
    assert not result.parseable
    assert parse_date(raw) is None


def test_parse_date():
    assert parse_date("12/30/2025") == date(2025, 12, 30)
    assert parse_date("") is None


def test_normalize_date_idempotent():
    once = normalize_date("12/30/2025")
    assert once == "2025-12-30"
    assert normalize_date(once) == once


def test_normalize_date_leaves_unparseable_unchanged():
    assert normalize_date("n/a") == "n/a"


@pytest.mark.parametrize(
    "raw",
    [
        "1/1/99999999999",
        "99999999999/1/2020",
        "1/99999999999999999999/2020",
        "1/1/0000",
        "today",
        "now",
        "Tomorrow",
        "yesterday",
    ],
)
def test_out_of_range_and_relative_values_are_unparseable(raw: str):
    assert check_date(raw) == DateCheck(valid=False, suggestion=None)
    assert parse_date(raw) is None
    assert normalize_date(raw) == raw
