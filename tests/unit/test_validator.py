from __future__ import annotations

import pytest

from driver_import.models.fields import REQUIRED_FIELDS, DestinationField
from driver_import.models.finding import ErrorKind, ValidationFinding
from driver_import.services.validator import (
    check_phone,
    format_phone_number,
    validate_all,
    validate_email,
    validate_field,
    validate_record,
)

F = DestinationField


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("9092136870", "909-213-6870"),
        ("(909) 213-6870", "909-213-6870"),
        ("1-909-213-6870", "909-213-6870"),
        ("909213687012", "909-213-6870"),
        ("213-68", "21368"),
        ("", ""),
    ],
)
def test_format_phone_number(raw: str, expected: str):
    assert format_phone_number(raw) == expected


def test_check_phone_canonical_is_idempotent():
    assert check_phone("909-213-6870") == (None, None)
    assert format_phone_number("909-213-6870") == "909-213-6870"


def test_check_phone_kinds():
    assert check_phone("9092136870") == (ErrorKind.FORMAT_SUGGESTION, "909-213-6870")
    assert check_phone("19092136870") == (ErrorKind.FORMAT_SUGGESTION, "909-213-6870")
    assert check_phone("12345") == (ErrorKind.PHONE_TOO_SHORT, None)
    assert check_phone("123-45") == (ErrorKind.PHONE_TOO_SHORT, "12345")
    assert check_phone("909213687012") == (ErrorKind.PHONE_TOO_LONG, "909-213-6870")


@pytest.mark.parametrize("value", ["a@b.co", "carlos.gonzalez+1@example.com"])
def test_valid_emails(value: str):
    assert validate_email(value)


@pytest.mark.parametrize("value", ["carlos", "carlos@", "carlos@example", "a b@c.de", "@example.com"])
def test_invalid_emails(value: str):
    assert not validate_email(value)


def test_missing_required_vs_optional():
    f = validate_field(3, F.EMAIL, "  ")
    assert f == ValidationFinding(3, F.EMAIL, "  ", ErrorKind.MISSING_REQUIRED)
    assert f.message == "Required field"
    assert validate_field(3, F.MIDDLE_NAME, "") is None
    assert validate_field(3, F.TERMINATION_DATE, "") is None


def test_phone_finding_carries_suggestion():
    f = validate_field(0, F.PHONE, "9092136870")
    assert f is not None
    assert f.error_kind is ErrorKind.FORMAT_SUGGESTION
    assert f.suggestion == "909-213-6870"
    assert f.has_suggestion
    assert not f.error_kind.is_blocking


def test_date_rules():
    assert validate_field(0, F.HIRE_DATE, "2020-11-16") is None
    f = validate_field(0, F.LICENSE_EXPIRATION, "12/30/2025")
    assert f.error_kind is ErrorKind.INVALID_DATE_FORMAT
    assert f.suggestion == "2025-12-30"
    g = validate_field(0, F.DATE_OF_BIRTH, "not-a-date")
    assert g.error_kind is ErrorKind.UNPARSEABLE_DATE
    assert g.suggestion is None


def test_unvalidated_fields_pass():
    assert validate_field(0, F.CITY, "anything at all") is None
    # 緊急連絡先の電話は形式チェック対象外
    assert validate_field(0, F.EMERGENCY_CONTACT_PHONE, "123") is None


def test_validate_record_flags_unmapped_required():
    findings = validate_record(0, {F.FIRST_NAME: "Carlos"})
    fields = [f.field for f in findings]
    assert F.FIRST_NAME not in fields
    assert fields == [f for f in REQUIRED_FIELDS if f is not F.FIRST_NAME]
    assert all(f.error_kind is ErrorKind.MISSING_REQUIRED for f in findings)


def test_at_most_one_finding_per_field():
    record = {f: "" for f in REQUIRED_FIELDS}
    record[F.PHONE] = "12"
    findings = validate_record(0, record)
    assert len(findings) == len({f.field for f in findings})


def test_validate_all_only_lists_rows_with_findings():
    ok = {f: "x" for f in REQUIRED_FIELDS}
    ok.update({
        F.EMAIL: "a@b.co",
        F.PHONE: "909-213-6870",
        F.LICENSE_EXPIRATION: "2025-12-30",
        F.HIRE_DATE: "2020-11-16",
    })
    bad = {**ok, F.EMAIL: "nope"}
    result = validate_all([ok, bad])
    assert list(result) == [1]
    assert result[1][0].error_kind is ErrorKind.INVALID_EMAIL


@pytest.mark.parametrize("value", ["1/1/99999999999", "99999999999/1/2020", "today"])
def test_hostile_dates_become_unparseable_findings(value: str):
    f = validate_field(0, F.HIRE_DATE, value)
    assert f.error_kind is ErrorKind.UNPARSEABLE_DATE
    assert f.suggestion is None
