from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from psycopg2 import sql

from ..models.duplicate import ExistingDriver

"""Driver store implementations.

PostgresDriverStore writes through a psycopg2 cursor. Non-sensitive
attributes go to `drivers`; license number, SSN and date of birth go to
`drivers_sensitive_info` keyed by the new driver id. Each create() is its
own transaction: a failing row is rolled back alone, earlier rows stay
committed.

InMemoryDriverStore backs mock mode (DISABLE_DB_CONNECT=1) and tests.
"""

__all__ = [
    "DriverStoreError",
    "SENSITIVE_FIELDS",
    "PostgresDriverStore",
    "InMemoryDriverStore",
]

SENSITIVE_FIELDS = ("licenseNumber", "ssn", "dateOfBirth")

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


class DriverStoreError(Exception):
    pass


def _column(name: str) -> str:
    """camelCase payload key -> snake_case column (twicExpiration -> twic_expiration)."""
    return _CAMEL.sub("_", name).lower()


class PostgresDriverStore:
    """psycopg2-backed store.

    Parameters
    ----------
    cursor: psycopg2 cursor (autocommit off; commit/rollback go through cursor.connection)
    drivers_table / sensitive_table: テーブル名 (スキーマ修飾なし)
    """

    def __init__(
        self, cursor: Any, *, drivers_table: str = "drivers", sensitive_table: str = "drivers_sensitive_info"
    ) -> None:
        self.cursor = cursor
        self.drivers_table = drivers_table
        self.sensitive_table = sensitive_table

    def list_existing(self, organization_id: str, include_deleted: bool = True) -> list[ExistingDriver]:
        query = sql.SQL(
            "SELECT d.id, d.email, s.license_number, d.is_deleted "
            "FROM {drivers} d LEFT JOIN {sensitive} s ON s.driver_id = d.id "
            "WHERE d.organization_id = %s"
        ).format(drivers=sql.Identifier(self.drivers_table), sensitive=sql.Identifier(self.sensitive_table))
        if not include_deleted:
            query = query + sql.SQL(" AND NOT d.is_deleted")
        try:
            self.cursor.execute(query, (organization_id,))
            rows = self.cursor.fetchall()
        except Exception as e:
            raise DriverStoreError(f"failed to read existing drivers: {e}") from e
        return [
            ExistingDriver(id=str(r[0]), email=r[1], license_number=r[2], is_deleted=bool(r[3]))
            for r in rows
        ]

    def _insert(self, table: str, values: Mapping[str, Any], returning: str | None = None) -> Any:
        cols = [_column(k) for k in values]
        stmt = sql.SQL("INSERT INTO {table} ({cols}) VALUES ({vals})").format(
            table=sql.Identifier(table),
            cols=sql.SQL(", ").join(sql.Identifier(c) for c in cols),
            vals=sql.SQL(", ").join(sql.Placeholder() for _ in cols),
        )
        if returning:
            stmt = stmt + sql.SQL(" RETURNING {}").format(sql.Identifier(returning))
        self.cursor.execute(stmt, list(values.values()))
        if returning:
            row = self.cursor.fetchone()
            return row[0] if row else None
        return None

    def create(self, payload: Mapping[str, Any]) -> str:
        """Insert one driver (two tables) and commit; returns the new driver id."""
        public = {k: v for k, v in payload.items() if k not in SENSITIVE_FIELDS}
        sensitive = {k: payload[k] for k in SENSITIVE_FIELDS if payload.get(k)}
        conn = self.cursor.connection
        try:
            driver_id = self._insert(self.drivers_table, public, returning="id")
            if driver_id is None:
                raise DriverStoreError("INSERT returned no id")
            self._insert(self.sensitive_table, {"driverId": driver_id, **sensitive})
            conn.commit()
        except Exception as e:
            try:
                conn.rollback()
            except Exception:  # pragma: no cover
                pass
            if isinstance(e, DriverStoreError):
                raise
            raise DriverStoreError(str(e)) from e
        return str(driver_id)


class InMemoryDriverStore:
    """List-backed store. Existing drivers can be seeded as ExistingDriver or dicts."""

    def __init__(self, existing: Iterable[ExistingDriver | Mapping[str, Any]] = ()) -> None:
        self.existing: list[ExistingDriver] = [
            d if isinstance(d, ExistingDriver) else ExistingDriver.from_mapping(dict(d)) for d in existing
        ]
        self.created: list[dict[str, Any]] = []
        self.list_calls = 0

    def list_existing(self, organization_id: str, include_deleted: bool = True) -> list[ExistingDriver]:
        self.list_calls += 1
        drivers = self.existing if include_deleted else [d for d in self.existing if not d.is_deleted]
        return list(drivers)

    def create(self, payload: Mapping[str, Any]) -> str:
        driver_id = f"drv_{len(self.existing) + len(self.created) + 1}"
        self.created.append({"id": driver_id, **payload})
        return driver_id
