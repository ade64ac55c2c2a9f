"""Database connection helpers.

This module provides a small, synchronous API for opening SQLite
connections configured for local, single-user workloads.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


def _ensure_parent_dir(db_path: Path) -> None:
    """Ensure the parent directory for a database file exists.

    Args:
        db_path: Path to database file whose parent directory should exist.

    Side Effects:
        - Creates parent directory if it doesn't exist (with parents=True).
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)


def _configure_connection(conn: sqlite3.Connection) -> None:
    """Apply standard pragmas to a new connection.

    Rows are left as plain tuples; callers read column names from
    cursor.description.

    Args:
        conn: SQLite connection to configure.

    Side Effects:
        - Enables foreign key constraints.
    """
    conn.execute("PRAGMA foreign_keys = ON")
    # Using default DELETE journal mode (no WAL) since this is single-user.


def _verify_readable(conn: sqlite3.Connection) -> None:
    """Force SQLite to read the file header.

    sqlite3.connect() is lazy: a file that is not a database only fails on
    first access. Reading the schema version surfaces that at open time.

    Args:
        conn: Freshly opened connection.

    Raises:
        sqlite3.DatabaseError: If the file is not a database or is corrupt.
    """
    conn.execute("PRAGMA schema_version").fetchone()


def open_connection(
    db_path: str | Path,
    *,
    create_parents: bool = False,
) -> sqlite3.Connection:
    """Return a configured SQLite connection in autocommit mode.

    Every statement executed on the returned connection is applied on its
    own, unless the caller issues an explicit BEGIN.

    Args:
        db_path: Path to SQLite database file, or ":memory:".
        create_parents: If True, create the parent directory before opening.
            Otherwise a missing directory makes the open fail.

    Returns:
        Configured SQLite connection ready for use.

    Raises:
        sqlite3.Error: If the file cannot be opened or is not a database.

    Logs:
        - DEBUG: "Opening SQLite database at {path}" when creating connection.

    Side Effects:
        - Creates database file if it doesn't exist.
        - Creates parent directory if create_parents is True.
    """
    target = str(db_path)
    if target != MEMORY_DB and create_parents:
        _ensure_parent_dir(Path(target))

    logger.debug("Opening SQLite database at %s", target)
    conn = sqlite3.connect(target, isolation_level=None)
    try:
        _configure_connection(conn)
        _verify_readable(conn)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def execute_script(conn: sqlite3.Connection, sql: str, *, description: str) -> None:
    """Execute a multi-statement SQL script with logging.

    Executes SQL that may contain multiple statements separated by semicolons.
    Primarily intended for schema initialization and seed data scripts.

    Args:
        conn: Database connection to execute script on.
        sql: Multi-statement SQL script to execute.
        description: Human-readable description for logging purposes.

    Raises:
        sqlite3.Error: If script execution fails.

    Logs:
        - INFO: "Executing SQL script: {description}" before execution.
        - DEBUG: "Failed while executing SQL script: {description}" on failure;
            the error propagates.

    Side Effects:
        - Executes SQL statements against the database.
    """
    logger.info("Executing SQL script: %s", description)
    try:
        conn.executescript(sql)
    except sqlite3.Error as exc:
        logger.debug("Failed while executing SQL script: %s (%s)", description, exc)
        raise
