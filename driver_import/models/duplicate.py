from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .fields import DestinationField

"""Duplicate detection models.

ExistingDriver is the slice of a stored driver the import needs for
collision checks. The reference list is read once per session, including
soft-deleted drivers, so a re-import of a deactivated driver is flagged.
"""

__all__ = [
    "MatchKey",
    "ExistingDriver",
    "DuplicateMatch",
]


class MatchKey(Enum):
    EMAIL = "email"
    LICENSE_NUMBER = "licenseNumber"

    @property
    def label(self) -> str:
        return "email" if self is MatchKey.EMAIL else "license number"


@dataclass(frozen=True)
class ExistingDriver:
    """Reference record used for collision checks."""
    id: str
    email: str | None = None
    license_number: str | None = None
    is_deleted: bool = False

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ExistingDriver:
        """Build from a store row (camelCase or snake_case keys accepted)."""
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            email=data.get("email"),
            license_number=data.get("licenseNumber", data.get("license_number")),
            is_deleted=bool(data.get("isDeleted", data.get("is_deleted", False))),
        )


@dataclass(frozen=True)
class DuplicateMatch:
    """A row flagged as colliding with an existing driver.

    At most one per row: the first match wins (email is searched before
    license number).
    """
    row_index: int
    projected: dict[DestinationField, str]
    existing: ExistingDriver
    matched_on: MatchKey
