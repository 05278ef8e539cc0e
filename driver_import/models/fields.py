from __future__ import annotations

from enum import Enum
from typing import Literal

"""Destination field catalogue for the driver import.

The destination schema is closed: 26 driver fields grouped as identity,
license, compliance dates, employment, address and emergency contact.
Each member carries its display label (used by the template export and the
quick-fix heuristic) and whether the field is required for a commit.
"""

__all__ = [
    "IGNORE",
    "Ignore",
    "DestinationField",
    "REQUIRED_FIELDS",
    "DATE_FIELDS",
    "parse_destination",
]

IGNORE: Literal["ignore"] = "ignore"
Ignore = Literal["ignore"]


class DestinationField(str, Enum):
    """Closed set of driver fields a source column can be mapped to.

    Values are the store's attribute names (camelCase, as persisted).
    """

    FIRST_NAME = ("firstName", "First Name", True)
    MIDDLE_NAME = ("middleName", "Middle Name", False)
    LAST_NAME = ("lastName", "Last Name", True)
    EMAIL = ("email", "Email", True)
    PHONE = ("phone", "Phone", True)
    DATE_OF_BIRTH = ("dateOfBirth", "Date of Birth", False)
    SSN = ("ssn", "SSN", False)
    LICENSE_NUMBER = ("licenseNumber", "License Number", True)
    LICENSE_STATE = ("licenseState", "License State", True)
    LICENSE_EXPIRATION = ("licenseExpiration", "License Expiration", True)
    LICENSE_CLASS = ("licenseClass", "License Class", True)
    MEDICAL_EXPIRATION = ("medicalExpiration", "Medical Expiration", False)
    BADGE_EXPIRATION = ("badgeExpiration", "Badge Expiration", False)
    TWIC_EXPIRATION = ("twicExpiration", "TWIC Expiration", False)
    HIRE_DATE = ("hireDate", "Hire Date", True)
    EMPLOYMENT_STATUS = ("employmentStatus", "Employment Status", True)
    EMPLOYMENT_TYPE = ("employmentType", "Employment Type", True)
    TERMINATION_DATE = ("terminationDate", "Termination Date", False)
    PRE_EMPLOYMENT_CHECK_DATE = ("preEmploymentCheckDate", "Pre-Employment Check Date", False)
    ADDRESS = ("address", "Address", False)
    ADDRESS2 = ("address2", "Address Line 2", False)
    CITY = ("city", "City", False)
    STATE = ("state", "State", False)
    ZIP_CODE = ("zipCode", "ZIP Code", False)
    EMERGENCY_CONTACT_NAME = ("emergencyContactName", "Emergency Contact Name", False)
    EMERGENCY_CONTACT_PHONE = ("emergencyContactPhone", "Emergency Contact Phone", False)

    def __new__(cls, value: str, label: str, required: bool) -> DestinationField:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.label = label  # type: ignore[attr-defined]
        obj.required = required  # type: ignore[attr-defined]
        return obj

    def __str__(self) -> str:
        return self.value


REQUIRED_FIELDS: tuple[DestinationField, ...] = tuple(f for f in DestinationField if f.required)  # type: ignore[attr-defined]

# 正規化対象の日付列 (必須/任意混在)
DATE_FIELDS: tuple[DestinationField, ...] = (
    DestinationField.LICENSE_EXPIRATION,
    DestinationField.HIRE_DATE,
    DestinationField.DATE_OF_BIRTH,
    DestinationField.MEDICAL_EXPIRATION,
    DestinationField.BADGE_EXPIRATION,
    DestinationField.TWIC_EXPIRATION,
    DestinationField.TERMINATION_DATE,
    DestinationField.PRE_EMPLOYMENT_CHECK_DATE,
)


def parse_destination(value: str) -> DestinationField | Ignore:
    """Resolve a field name (e.g. from config overrides) to a destination.

    Accepts the persisted name (``firstName``) or the literal ``ignore``.

    Raises:
        ValueError: If the name is not a known destination field
    """
    if value == IGNORE:
        return IGNORE
    try:
        return DestinationField(value)
    except ValueError as e:
        raise ValueError(f"unknown destination field: {value!r}") from e
