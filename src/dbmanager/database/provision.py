"""Database provisioning from a template file or schema/seed SQL files.

Applications often ship a prebuilt database next to their code and copy it
to a writable location on first run. This module does that, and can
alternatively build a fresh database by running `schema.sql` and an
optional `seed_data.sql`.
"""

from __future__ import annotations

import logging
import shutil
import sqlite3
from pathlib import Path

from .connection import _ensure_parent_dir, execute_script, open_connection
from .errors import DatabaseError, from_sqlite_error

logger = logging.getLogger(__name__)

_SIDECAR_SUFFIXES = ("-journal", "-wal", "-shm")


class DatabaseLockedError(DatabaseError):
    """Raised when database deletion fails because the database is in use."""


def _read_sql(path: Path, label: str) -> str:
    if not path.is_file():
        msg = f"{label} file not found: {path}"
        raise FileNotFoundError(msg)
    return path.read_text(encoding="utf-8")


def delete_database(db_path: Path) -> int:
    """Delete a SQLite database file and its journal/WAL/SHM sidecars.

    Args:
        db_path: Path to SQLite database file.

    Returns:
        Number of files removed (0 when nothing existed).

    Raises:
        DatabaseLockedError: If a file cannot be removed because it is in use.
        OSError: If deletion fails for other reasons (permissions, etc.).

    Logs:
        - INFO: "Deleted database at {path}" on success.
    """
    files = [db_path] + [db_path.with_name(db_path.name + s) for s in _SIDECAR_SUFFIXES]
    removed = 0
    for file_path in files:
        if not file_path.exists():
            continue
        try:
            file_path.unlink()
        except PermissionError as exc:
            msg = f"Database file {file_path} is in use; close all processes using it and retry."
            raise DatabaseLockedError(msg) from exc
        removed += 1
        logger.debug("Deleted %s", file_path)

    if removed:
        logger.info("Deleted database at %s (%d file(s) removed)", db_path, removed)
    return removed


def _terminated(sql: str) -> str:
    """Return sql with a trailing statement terminator, or "" if it holds no statements."""
    if not sql.strip():
        return ""
    return sql if sqlite3.complete_statement(sql) else sql + "\n;"


def _apply_sql(db_path: Path, schema_sql: str, seed_sql: str | None) -> None:
    """Run schema and seed SQL as one transaction."""
    # executescript() commits an open transaction first; BEGIN/COMMIT must be part of the script.
    parts = ["BEGIN;", _terminated(schema_sql)]
    if seed_sql:
        parts.append(_terminated(seed_sql))
    parts.append("COMMIT;")
    script = "\n".join(part for part in parts if part)

    try:
        conn = open_connection(db_path, create_parents=True)
    except sqlite3.Error as exc:
        raise from_sqlite_error(exc, "open") from exc
    try:
        execute_script(conn, script, description="schema/seed")
    except sqlite3.Error as exc:
        if conn.in_transaction:
            conn.rollback()
        conn.close()
        # A half-built file would be kept as "already provisioned" on the next run.
        delete_database(db_path)
        raise from_sqlite_error(exc, "statement") from exc
    finally:
        conn.close()


def provision_database(
    target: str | Path,
    *,
    template: str | Path | None = None,
    schema_sql: str | Path | None = None,
    seed_sql: str | Path | None = None,
    overwrite: bool = False,
) -> Path:
    """Create a working database at target.

    If template is given, the template file is copied to target. Otherwise,
    if schema_sql is given, the schema (and seed_sql, if given) is applied
    to a new database inside a single transaction. With neither, an empty
    database file is created.

    An existing target is left untouched unless overwrite is True, in which
    case it is deleted first. A failed provision removes whatever it wrote
    at target, so a retry starts from scratch.

    Args:
        target: Path of the database to create.
        template: Prebuilt database file to copy.
        schema_sql: Path to a schema SQL script.
        seed_sql: Path to a seed data SQL script (used with schema_sql).
        overwrite: Replace an existing target.

    Returns:
        Path to the provisioned database.

    Raises:
        FileNotFoundError: If template, schema or seed file is missing.
        StatementError: If the schema or seed SQL fails.
        OpenError: If the target cannot be opened as a database.
        OSError: If the template cannot be copied.
        DatabaseLockedError: If overwrite is True and the target is in use.

    Logs:
        - INFO: "Provisioning database at {target}" at start.
        - INFO: "Database already exists at {target}, leaving it untouched" when skipped.
    """
    target_path = Path(target)
    template_path = Path(template) if template is not None else None

    if template_path is not None and not template_path.is_file():
        msg = f"Template database not found: {template_path}"
        raise FileNotFoundError(msg)
    schema_text = _read_sql(Path(schema_sql), "Schema") if schema_sql is not None else None
    seed_text = _read_sql(Path(seed_sql), "Seed data") if seed_sql is not None else None

    if target_path.exists():
        if not overwrite:
            logger.info("Database already exists at %s, leaving it untouched", target_path)
            return target_path
        delete_database(target_path)

    logger.info("Provisioning database at %s", target_path)
    _ensure_parent_dir(target_path)

    if template_path is not None:
        try:
            shutil.copyfile(template_path, target_path)
        except OSError:
            delete_database(target_path)
            raise
        logger.info("Copied template %s", template_path)
    elif schema_text is not None:
        _apply_sql(target_path, schema_text, seed_text)
    else:
        try:
            open_connection(target_path).close()
        except sqlite3.Error as exc:
            raise from_sqlite_error(exc, "open") from exc

    return target_path
