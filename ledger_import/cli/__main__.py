from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from ledger_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ledger_import.config.registry import RegistryError, build_registry
from ledger_import.db.insert import make_dry_run_insert_one, make_pg_insert_one
from ledger_import.excel.reader import UnsupportedFormatError
from ledger_import.excel.writer import write_sample_template
from ledger_import.logging.error_log import ErrorLogBuffer
from ledger_import.logging.init import log_summary, setup_logging
from ledger_import.models.config_models import ImportConfig
from ledger_import.models.field_spec import AliasRegistry
from ledger_import.models.import_outcome import ValidationError
from ledger_import.services.executor import InsertOne
from ledger_import.services.mapping_editor import MappingError
from ledger_import.services.summary import generate_import_report, render_summary_line
from ledger_import.services.wizard import ImportWizard

"""CLI entrypoint: run one import wizard session headlessly.

    ledger-import ENTITY FILE [--map TARGET=SOURCE ...] [--dry-run]

upload -> auto-map (+ --map overrides) -> preview -> import -> report.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

PREVIEW_ROWS = 3
LISTED_VALIDATION_ERRORS = 5


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Provide a psycopg2 cursor on an autocommit connection.

    Connection settings resolve in this order:
        1. DATABASE_URL / PGDSN (after .env has been loaded)
        2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        3. the database section of the config file
    Autocommit makes every inserted row its own transaction.
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    conn = psycopg2.connect(dsn)
    try:
        conn.autocommit = True
        with conn.cursor() as cur:
            yield cur
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv so its values take precedence."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ledger-import",
        description="Import a CSV / XLS / XLSX export into the ledger datastore",
    )
    p.add_argument("entity", help="Target entity (clients, vendors, items, invoices, invoice_items, ...)")
    p.add_argument("file", nargs="?", help="CSV / XLS / XLSX file to import")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument(
        "--map",
        action="append",
        default=[],
        metavar="TARGET=SOURCE",
        help="Override one column mapping; SOURCE 'none' unmaps the target field",
    )
    p.add_argument("--dry-run", action="store_true", help="Run every step without writing to the database")
    p.add_argument("--inspect-data", action="store_true", help="Print headers, proposed mapping & first rows then exit")
    p.add_argument("--export-sample", type=Path, default=None, metavar="PATH",
                   help="Write the entity's sample template (.csv / .xlsx) then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load(args: argparse.Namespace) -> ImportConfig:
    if args.config is not None:
        return load_config(args.config)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return ImportConfig()


def _inspect_data(wizard: ImportWizard) -> int:
    print(f"FILE: {wizard.filename} rows={len(wizard.raw_rows)}")
    print(f"  headers={list(wizard.headers)}")
    for spec in wizard.definition.target_fields:
        marker = "*" if spec.required else " "
        print(f"  {marker} {spec.field:<16} <- {wizard.mapped_source(spec.field)}")
    for raw in wizard.raw_rows[:PREVIEW_ROWS]:
        safe = {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in raw.items()}
        print("    sample_row=", safe)
    return EXIT_SUCCESS_ALL


async def _run(
    args: argparse.Namespace,
    registry: AliasRegistry,
    insert_one: InsertOne,
    error_log: ErrorLogBuffer,
) -> int:
    logger = setup_logging()
    wizard = ImportWizard(args.entity, registry, insert_one, error_log=error_log, show_progress=True)

    if not await wizard.upload(Path(args.file)):
        return EXIT_FATAL

    for override in args.map:
        target, sep, source = override.partition("=")
        if not sep:
            logger.error(f"invalid --map value (expected TARGET=SOURCE): {override}")
            return EXIT_FATAL
        try:
            wizard.set_mapping(target.strip(), source.strip())
        except MappingError as e:
            logger.error(f"mapping: {e}")
            return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(wizard)

    if not wizard.proceed_to_preview():
        missing = ", ".join(wizard.missing_required())
        logger.error(f"{wizard.error}: {missing}")
        return EXIT_FATAL

    for err in wizard.errors[:LISTED_VALIDATION_ERRORS]:
        logger.warning(f"row {err.row}: {err.message}")
    if len(wizard.errors) > LISTED_VALIDATION_ERRORS:
        logger.warning(f"... and {len(wizard.errors) - LISTED_VALIDATION_ERRORS} more errors")

    total_rows = len(wizard.transformed)
    if not await wizard.run_import():
        logger.error(wizard.error or "import failed")
        log_summary(render_summary_line(wizard.entity, total_rows, len(wizard.errors), None).removeprefix("SUMMARY "))
        return EXIT_FATAL

    outcome = wizard.outcome
    if outcome is None:
        logger.error("import finished without an outcome")
        return EXIT_FATAL
    failures = [
        ValidationError(row=r.row_number, message=f"Insert failed: {r.error}") for r in outcome.failures
    ]
    report = generate_import_report(total_rows, outcome.success, [*wizard.errors, *failures])
    for line in report.rstrip("\n").splitlines():
        logger.info(line)

    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(wizard.entity, total_rows, len(wizard.errors), outcome).removeprefix("SUMMARY "))

    if outcome.failed > 0 or wizard.errors:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # Only read process arguments for None; [] from tests must stay empty
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = _load(args)
        registry = build_registry(cfg)
    except (ConfigError, RegistryError) as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.entity not in registry:
        logger.error(f"unknown entity: {args.entity} (known: {', '.join(registry.names())})")
        return EXIT_FATAL
    definition = registry[args.entity]

    if args.export_sample is not None:
        try:
            path = write_sample_template(definition, args.export_sample)
        except UnsupportedFormatError as e:
            logger.error(f"export: {e}")
            return EXIT_FATAL
        logger.info(f"sample template written: {path}")
        return EXIT_SUCCESS_ALL

    if not args.file:
        logger.error("no input file given")
        return EXIT_FATAL
    source = Path(args.file)
    if not source.exists():
        logger.error(f"file not found: {source}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer(cfg.error_log_dir)
    dry_run = args.dry_run or args.inspect_data or os.getenv("DISABLE_DB_CONNECT") == "1"
    try:
        if dry_run:
            logger.info(f"mode=dry-run entity={definition.name} file={source.name}")
            code = asyncio.run(_run(args, registry, make_dry_run_insert_one(definition.name), error_log))
        else:
            # per-row database errors are wrapped by the insert adapter; anything
            # reaching this handler is a connection level failure
            try:
                with _db_connection(cfg) as cur:
                    logger.info(f"mode=live entity={definition.name} table={definition.table} file={source.name}")
                    insert_one = make_pg_insert_one(cur, definition.table, entity=definition.name)
                    code = asyncio.run(_run(args, registry, insert_one, error_log))
            except psycopg2.Error as e:
                logger.error(f"db: {e}")
                return EXIT_FATAL
    finally:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")
    return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
