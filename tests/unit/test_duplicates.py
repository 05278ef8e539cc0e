from __future__ import annotations

from driver_import.models.duplicate import ExistingDriver, MatchKey
from driver_import.models.fields import DestinationField
from driver_import.services.duplicates import detect_duplicates, find_duplicate

F = DestinationField


def test_email_match_is_case_insensitive_even_if_license_differs():
    existing = [ExistingDriver("drv_1", email="Carlos@Example.com", license_number="X1")]
    match = find_duplicate(0, {F.EMAIL: "carlos@example.COM", F.LICENSE_NUMBER: "D999"}, existing)
    assert match is not None
    assert match.matched_on is MatchKey.EMAIL
    assert match.existing.id == "drv_1"
    assert match.projected[F.LICENSE_NUMBER] == "D999"


def test_license_match():
    existing = [ExistingDriver("drv_2", email="other@example.com", license_number="d5211514")]
    match = find_duplicate(4, {F.EMAIL: "new@example.com", F.LICENSE_NUMBER: "D5211514"}, existing)
    assert match.matched_on is MatchKey.LICENSE_NUMBER
    assert match.row_index == 4


def test_email_wins_across_the_whole_reference_list():
    existing = [
        ExistingDriver("by_license", email="x@example.com", license_number="D1"),
        ExistingDriver("by_email", email="carlos@example.com", license_number="Z9"),
    ]
    match = find_duplicate(0, {F.EMAIL: "carlos@example.com", F.LICENSE_NUMBER: "D1"}, existing)
    assert match.existing.id == "by_email"
    assert match.matched_on is MatchKey.EMAIL


def test_empty_keys_never_match():
    existing = [ExistingDriver("drv_3", email=None, license_number="")]
    assert find_duplicate(0, {F.EMAIL: "", F.LICENSE_NUMBER: "  "}, existing) is None


def test_deleted_drivers_still_match():
    existing = [ExistingDriver("old", email="a@b.co", is_deleted=True)]
    assert find_duplicate(0, {F.EMAIL: "a@b.co"}, existing) is not None


def test_detect_duplicates():
    existing = [ExistingDriver.from_mapping({"_id": "k1", "licenseNumber": "D2", "isDeleted": False})]
    records = [{F.LICENSE_NUMBER: "D1"}, {F.LICENSE_NUMBER: "D2"}]
    matches = detect_duplicates(records, existing)
    assert list(matches) == [1]
    assert matches[1].existing.id == "k1"
    assert detect_duplicates(records, []) == {}


def test_existing_driver_from_snake_case():
    d = ExistingDriver.from_mapping({"id": 7, "email": "a@b.co", "license_number": "L", "is_deleted": 1})
    assert d == ExistingDriver("7", "a@b.co", "L", True)
