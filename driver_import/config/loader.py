from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.fields import DestinationField, Ignore, parse_destination

"""Import config loader.

- Load YAML config/import.yml
- Validate against the bundled JSON schema (unknown keys rejected)
- Resolve column_overrides to destination fields
- Resolve the PostgreSQL DSN (environment first, config section as fallback)
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "DatabaseConfig",
    "ImportConfig",
    "load_config",
    "resolve_dsn",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).with_name("schema.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ImportConfig:
    organization_id: str
    actor_id: str
    column_overrides: dict[str, DestinationField | Ignore] = field(default_factory=dict)
    trust_edits: bool = False
    apply_suggestions: bool = False
    skip_duplicates: bool = False
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the
            config violates it (missing required keys, wrong types, unknown keys)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _parse_overrides(raw: Mapping[str, str]) -> dict[str, DestinationField | Ignore]:
    overrides: dict[str, DestinationField | Ignore] = {}
    for column, name in raw.items():
        try:
            overrides[column] = parse_destination(name)
        except ValueError as e:
            raise ConfigError(f"column_overrides[{column!r}]: {e}") from e
    return overrides


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return ImportConfig(
        organization_id=data["organization_id"],
        actor_id=data["actor_id"],
        column_overrides=_parse_overrides(data.get("column_overrides") or {}),
        trust_edits=bool(data.get("trust_edits", False)),
        apply_suggestions=bool(data.get("apply_suggestions", False)),
        skip_duplicates=bool(data.get("skip_duplicates", False)),
        database=db,
    )


def resolve_dsn(db_cfg: DatabaseConfig, env: Mapping[str, str] | None = None) -> str:
    """Resolve the libpq DSN.

    優先順位:
        1. DATABASE_URL / PGDSN (DSN 全体)
        2. database.dsn (config)
        3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, 不足分は config の個別キー
    """
    env = os.environ if env is None else env
    dsn = env.get("DATABASE_URL") or env.get("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = env.get("PGHOST", db_cfg.host or "localhost")
    port = env.get("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = env.get("PGUSER", db_cfg.user or "postgres")
    password = env.get("PGPASSWORD", db_cfg.password or "")
    database = env.get("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn
