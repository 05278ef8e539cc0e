from __future__ import annotations

import pytest

from driver_import.models.fields import IGNORE, REQUIRED_FIELDS, DestinationField
from driver_import.models.mapping import ColumnMapping, QuickFix
from driver_import.services.auto_mapper import (
    SYNONYMS,
    auto_match_column,
    build_initial_mappings,
    detect_full_name_issue,
    find_missing_required,
    mapped_count,
    normalize_header,
    suggest_quick_fixes,
    sync_preview,
)
from driver_import.tabular.reader import parse_csv_text

F = DestinationField


@pytest.mark.parametrize("key,expected", sorted(SYNONYMS.items()))
def test_every_synonym_maps_to_its_field(key: str, expected: DestinationField):
    assert auto_match_column(key) is expected


@pytest.mark.parametrize(
    "header,expected",
    [
        ("First Name", F.FIRST_NAME),
        ("E-mail Address", F.EMAIL),
        ("  PHONE NUMBER ", F.PHONE),
        ("D.O.B.", F.DATE_OF_BIRTH),
        ("Zip Code", F.ZIP_CODE),
        ("Address Line 2", F.ADDRESS2),
        ("TWIC Exp", F.TWIC_EXPIRATION),
    ],
)
def test_header_variants(header: str, expected: DestinationField):
    assert auto_match_column(header) is expected


@pytest.mark.parametrize("header", ["Full Name", "Notes", "", "Truck #", "CDL"])
def test_unknown_headers_are_ignored(header: str):
    assert auto_match_column(header) == IGNORE


def test_normalize_header():
    assert normalize_header("Pre-Employment Check Date") == "preemploymentcheckdate"
    assert normalize_header("#") == ""


def test_build_initial_mappings_preview_values():
    parsed = parse_csv_text("First Name,Notes\nCarlos,n1\nMaria,n2\n")
    mappings = build_initial_mappings(parsed.headers, parsed.rows)
    assert mappings == [
        ColumnMapping("First Name", F.FIRST_NAME, "Carlos"),
        ColumnMapping("Notes", IGNORE, "n1"),
    ]
    assert mapped_count(mappings) == 1

    synced = sync_preview(mappings, parsed.rows, 1)
    assert [m.preview_value for m in synced] == ["Maria", "n2"]
    # 元のスナップショットは変わらない
    assert mappings[0].preview_value == "Carlos"


def test_preview_out_of_range_is_empty():
    parsed = parse_csv_text("First Name\nCarlos\n")
    assert sync_preview(build_initial_mappings(parsed.headers, parsed.rows), parsed.rows, 5)[0].preview_value == ""


def test_find_missing_required_in_catalogue_order():
    mappings = [ColumnMapping("Email", F.EMAIL), ColumnMapping("Notes")]
    missing = find_missing_required(mappings)
    assert F.EMAIL not in missing
    assert missing == [f for f in REQUIRED_FIELDS if f is not F.EMAIL]
    assert missing[0] is F.FIRST_NAME


def test_suggest_quick_fixes_substring_candidates():
    mappings = [
        ColumnMapping("Mail"),  # "mail" ⊂ "email"
        ColumnMapping("Driver Email Addr"),  # contains "email"
        ColumnMapping("#"),  # 正規化後は空 → 候補にしない
        ColumnMapping("Last Name", F.LAST_NAME),
    ]
    fixes = suggest_quick_fixes(mappings)
    email_fix = next(f for f in fixes if f.destination_field is F.EMAIL)
    assert email_fix == QuickFix(F.EMAIL, ["Mail", "Driver Email Addr"])
    assert all("#" not in f.candidates for f in fixes)
    assert all(f.destination_field is not F.LAST_NAME for f in fixes)


def test_suggest_quick_fixes_none_when_all_required_mapped():
    mappings = [ColumnMapping(f.label, f) for f in REQUIRED_FIELDS] + [ColumnMapping("Email 2")]
    assert suggest_quick_fixes(mappings) == []


@pytest.mark.parametrize(
    "column,dest,expected",
    [
        ("Full Name", F.FIRST_NAME, True),
        ("Driver full name", F.LAST_NAME, True),
        ("Full Name", IGNORE, False),
        ("Full Name", F.EMERGENCY_CONTACT_NAME, False),
        ("First Name", F.FIRST_NAME, False),
    ],
)
def test_detect_full_name_issue(column, dest, expected):
    assert detect_full_name_issue(column, dest) is expected
