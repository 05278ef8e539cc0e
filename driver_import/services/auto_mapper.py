from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..models.fields import IGNORE, REQUIRED_FIELDS, DestinationField, Ignore
from ..models.mapping import ColumnMapping, QuickFix
from ..models.row_data import RawRow

"""Column auto-mapping for driver roster uploads.

Source headers are normalized (lowercase, alphanumerics only) and looked up
in a static synonym table. Auto-matching runs once per header set; after
that the operator owns the mapping and nothing here re-applies it.
"""

__all__ = [
    "SYNONYMS",
    "normalize_header",
    "auto_match_column",
    "build_initial_mappings",
    "sync_preview",
    "find_missing_required",
    "suggest_quick_fixes",
    "mapped_count",
    "detect_full_name_issue",
]

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")

F = DestinationField

# 正規化済ヘッダ → 宛先フィールド
SYNONYMS: dict[str, DestinationField] = {
    "firstname": F.FIRST_NAME,
    "fname": F.FIRST_NAME,
    "givenname": F.FIRST_NAME,
    "middlename": F.MIDDLE_NAME,
    "mname": F.MIDDLE_NAME,
    "lastname": F.LAST_NAME,
    "lname": F.LAST_NAME,
    "surname": F.LAST_NAME,
    "familyname": F.LAST_NAME,
    "email": F.EMAIL,
    "emailaddress": F.EMAIL,
    "emailaddr": F.EMAIL,
    "phone": F.PHONE,
    "phonenumber": F.PHONE,
    "mobile": F.PHONE,
    "cell": F.PHONE,
    "telephone": F.PHONE,
    "tel": F.PHONE,
    "dateofbirth": F.DATE_OF_BIRTH,
    "dob": F.DATE_OF_BIRTH,
    "birthdate": F.DATE_OF_BIRTH,
    "ssn": F.SSN,
    "socialsecurity": F.SSN,
    "socialsecuritynumber": F.SSN,
    "licensenumber": F.LICENSE_NUMBER,
    "dlnumber": F.LICENSE_NUMBER,
    "driverslicense": F.LICENSE_NUMBER,
    "licensestate": F.LICENSE_STATE,
    "dlstate": F.LICENSE_STATE,
    "licenseexpiration": F.LICENSE_EXPIRATION,
    "licenseexp": F.LICENSE_EXPIRATION,
    "dlexpiration": F.LICENSE_EXPIRATION,
    "licenseclass": F.LICENSE_CLASS,
    "dlclass": F.LICENSE_CLASS,
    "class": F.LICENSE_CLASS,
    "medicalexpiration": F.MEDICAL_EXPIRATION,
    "medicalexp": F.MEDICAL_EXPIRATION,
    "medicalcardexpiration": F.MEDICAL_EXPIRATION,
    "badgeexpiration": F.BADGE_EXPIRATION,
    "badgeexp": F.BADGE_EXPIRATION,
    "twicexpiration": F.TWIC_EXPIRATION,
    "twicexp": F.TWIC_EXPIRATION,
    "hiredate": F.HIRE_DATE,
    "datehired": F.HIRE_DATE,
    "startdate": F.HIRE_DATE,
    "employmentstatus": F.EMPLOYMENT_STATUS,
    "status": F.EMPLOYMENT_STATUS,
    "employmenttype": F.EMPLOYMENT_TYPE,
    "emptype": F.EMPLOYMENT_TYPE,
    "terminationdate": F.TERMINATION_DATE,
    "dateterm": F.TERMINATION_DATE,
    "preemploymentcheckdate": F.PRE_EMPLOYMENT_CHECK_DATE,
    "address": F.ADDRESS,
    "streetaddress": F.ADDRESS,
    "street": F.ADDRESS,
    "address2": F.ADDRESS2,
    "addressline2": F.ADDRESS2,
    "addressln2": F.ADDRESS2,
    "apt": F.ADDRESS2,
    "apartment": F.ADDRESS2,
    "suite": F.ADDRESS2,
    "unit": F.ADDRESS2,
    "city": F.CITY,
    "state": F.STATE,
    "zipcode": F.ZIP_CODE,
    "zip": F.ZIP_CODE,
    "postalcode": F.ZIP_CODE,
    "emergencycontactname": F.EMERGENCY_CONTACT_NAME,
    "emergencyname": F.EMERGENCY_CONTACT_NAME,
    "emergencycontactphone": F.EMERGENCY_CONTACT_PHONE,
    "emergencyphone": F.EMERGENCY_CONTACT_PHONE,
}


def normalize_header(text: str) -> str:
    """Lowercase and strip every non-alphanumeric character."""
    return _NON_ALNUM.sub("", text.lower())


def auto_match_column(header: str) -> DestinationField | Ignore:
    return SYNONYMS.get(normalize_header(header), IGNORE)


def _preview_for(rows: Sequence[RawRow], index: int, column: str) -> str:
    if 0 <= index < len(rows):
        return rows[index].get(column)
    return ""


def build_initial_mappings(
    headers: Sequence[str], rows: Sequence[RawRow], preview_index: int = 0
) -> list[ColumnMapping]:
    """Propose one mapping per header, seeding preview values from the preview row."""
    mappings = [
        ColumnMapping(
            source_column=h,
            destination_field=auto_match_column(h),
            preview_value=_preview_for(rows, preview_index, h),
        )
        for h in headers
    ]
    logger.debug(
        "auto-mapped %d/%d columns: %s",
        mapped_count(mappings),
        len(mappings),
        {m.source_column: str(m.destination_field) for m in mappings if not m.is_ignored},
    )
    return mappings


def sync_preview(
    mappings: Sequence[ColumnMapping], rows: Sequence[RawRow], preview_index: int
) -> list[ColumnMapping]:
    """Return mappings whose preview_value reflects the given preview row."""
    return [
        ColumnMapping(
            source_column=m.source_column,
            destination_field=m.destination_field,
            preview_value=_preview_for(rows, preview_index, m.source_column),
        )
        for m in mappings
    ]


def mapped_count(mappings: Sequence[ColumnMapping]) -> int:
    return sum(1 for m in mappings if not m.is_ignored)


def find_missing_required(mappings: Sequence[ColumnMapping]) -> list[DestinationField]:
    """Required fields no source column is currently mapped to (catalogue order)."""
    mapped = {m.destination_field for m in mappings if not m.is_ignored}
    return [f for f in REQUIRED_FIELDS if f not in mapped]


def suggest_quick_fixes(mappings: Sequence[ColumnMapping]) -> list[QuickFix]:
    """Propose ignored source columns for every unmapped required field.

    A column is a candidate when its normalized name is contained in, or
    contains, the field's normalized label. Multiple candidates may be
    returned for one field; the operator picks.
    """
    ignored = [m for m in mappings if m.is_ignored]
    fixes: list[QuickFix] = []
    for rf in find_missing_required(mappings):
        label = normalize_header(rf.label)  # type: ignore[attr-defined]
        candidates = []
        for m in ignored:
            source = normalize_header(m.source_column)
            if not source:
                continue  # 記号だけの列名は全ラベルに部分一致してしまう
            if source in label or label in source:
                candidates.append(m.source_column)
        if candidates:
            fixes.append(QuickFix(destination_field=rf, candidates=candidates))
    return fixes


def detect_full_name_issue(source_column: str, destination_field: DestinationField | Ignore) -> bool:
    """True when a "full name" style column is mapped to a single name field."""
    lowered = source_column.lower()
    return (
        "full" in lowered
        and "name" in lowered
        and destination_field in (DestinationField.FIRST_NAME, DestinationField.LAST_NAME)
    )
