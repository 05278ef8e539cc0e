from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from driver_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, ImportConfig, load_config, resolve_dsn
from driver_import.db.driver_store import DriverStoreError, InMemoryDriverStore, PostgresDriverStore
from driver_import.logging.error_log import ErrorLogBuffer
from driver_import.logging.init import log_summary, set_debug, setup_logging
from driver_import.models.import_result import ImportContext, ImportResult
from driver_import.services.importer import CommitError, DriverStore
from driver_import.services.report import write_report
from driver_import.services.session import ImportSession
from driver_import.services.summary import render_summary_line
from driver_import.services.template import write_template
from driver_import.tabular.reader import ParseError

"""CLI entrypoint.

Flow:
- Load .env and config/import.yml
- Parse the roster file, auto-map columns, apply config column_overrides
- Optionally apply every suggestion / skip every duplicate
- Buffer outstanding findings and duplicates to the error log
- Commit ready rows (unless --dry-run), print the SUMMARY line

Exit codes: 0 every row imported, 2 partial (rows left out or commit
aborted), 1 fatal (config, parse, store connection).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[PostgresDriverStore]:
    """psycopg2 connection + cursor wrapped in a PostgresDriverStore.

    DSN の解決順は resolve_dsn() を参照 (.env は main() 冒頭で上書きロード済み)。
    """
    conn = psycopg2.connect(resolve_dsn(cfg.database))
    conn.autocommit = False  # create() ごとに commit
    cur = conn.cursor()
    try:
        yield PostgresDriverStore(cur)
    finally:
        try:
            cur.close()
        finally:
            conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; .env values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Driver roster CSV importer")
    p.add_argument("file", nargs="?", type=Path, help="Roster .csv file to import")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Config YAML path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--dry-run", action="store_true", help="Validate and report only, commit nothing")
    p.add_argument("--apply-suggestions", action="store_true", help="Apply every format suggestion")
    p.add_argument("--skip-duplicates", action="store_true", help="Import rows flagged as duplicates")
    p.add_argument("--report", type=Path, help="Write the reconciliation report CSV")
    p.add_argument("--template", type=Path, help="Write the import template CSV and exit")
    return p.parse_args(argv)


def _run(args: argparse.Namespace, cfg: ImportConfig, store: DriverStore, logger: logging.Logger) -> int:
    errors = ErrorLogBuffer()
    file_name = args.file.name
    session = ImportSession(
        store,
        ImportContext(organization_id=cfg.organization_id, actor_id=cfg.actor_id),
        trust_edits=cfg.trust_edits,
    )
    try:
        grid = session.load_file(args.file)
    except ParseError as e:
        logger.error(f"parse: {e}")
        errors.record_parse_failure(file_name, e)
        errors.flush()
        return EXIT_FATAL
    except DriverStoreError as e:
        logger.error(f"store: {e}")
        return EXIT_FATAL

    for column, destination in cfg.column_overrides.items():
        if column not in grid.headers:
            logger.warning(f"column override ignored, no such column: {column}")
            continue
        grid.set_mapping(column, destination)

    for mapping in grid.mappings:
        logger.debug(f"mapping {mapping.source_column!r} -> {mapping.destination_field}")
    for column in grid.full_name_warnings():
        logger.warning(f"column {column!r} looks like a full name; split it into first/last name")
    for fix in grid.quick_fixes():
        logger.info(f"quick fix: {fix.destination_field.value} <- {', '.join(fix.candidates)}")
    missing = grid.missing_required()
    if missing:
        logger.warning("required fields not mapped: " + ", ".join(f.value for f in missing))

    if args.apply_suggestions or cfg.apply_suggestions:
        applied = grid.apply_all_suggestions()
        logger.info(f"suggestions applied={applied}")
    if args.skip_duplicates or cfg.skip_duplicates:
        skipped = grid.skip_all_duplicates()
        logger.info(f"duplicates skipped={skipped}")

    counts = grid.counts()
    logger.info(
        f"file={file_name} rows={counts.total} ready={counts.ready} "
        f"errors={counts.errors} duplicates={counts.duplicates}"
    )
    if args.report:
        logger.info(f"report written: {write_report(grid, args.report)}")
    errors.record_grid(file_name, grid)

    result: ImportResult | None = None
    committed = 0
    failed = 0
    if args.dry_run:
        logger.info("dry run: nothing committed")
    else:
        try:
            result = session.run_import(progress=sys.stdout.isatty())
            committed = result.committed
        except CommitError as e:
            errors.record_commit_failure(file_name, e)
            committed = e.committed
            failed = 1

    log_path = errors.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    summary_line = render_summary_line(counts, result, committed=committed, failed=failed)
    log_summary(summary_line[len("SUMMARY "):])

    if failed or counts.ready != counts.total:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()
    # [] が渡された場合に sys.argv を読まないよう None のときのみ
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug(True)

    if args.template is not None:
        logger.info(f"template written: {write_template(args.template)}")
        return EXIT_SUCCESS_ALL
    if args.file is None:
        logger.error("no input file given")
        return EXIT_FATAL

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    # DISABLE_DB_CONNECT=1 でインメモリストア (テスト・検証用)
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
        return _run(args, cfg, InMemoryDriverStore(), logger)
    try:
        with _db_connection(cfg) as store:
            return _run(args, cfg, store, logger)
    except psycopg2.Error as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
