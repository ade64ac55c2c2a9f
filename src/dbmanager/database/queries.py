"""Basic query execution helpers.

These wrap low-level sqlite3 operations with logging and typed return
shapes used by the accessor.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from typing import Any

from .types import ExecutionResult, QueryResult, Row, to_column_value

logger = logging.getLogger(__name__)

Params = tuple[Any, ...] | dict[str, Any] | None

# String literals, quoted identifiers and comments; blanked out before scanning for keywords.
_NOISE = re.compile(
    r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|`[^`]*`|\[[^\]]*\]|--[^\n]*|/\*.*?\*/",
    re.DOTALL,
)
_TOKEN = re.compile(r"[()]|[A-Za-z_][A-Za-z0-9_]*")
_MAIN_KEYWORDS = frozenset({"INSERT", "REPLACE", "UPDATE", "DELETE", "SELECT", "VALUES"})


def statement_keyword(sql: str) -> str:
    """Return the keyword naming what a statement does.

    For a statement with a leading WITH clause this is the first keyword
    after the common table expressions, found at parenthesis depth zero.
    Otherwise it is the statement's first word. Returns "" for empty SQL.
    """
    depth = 0
    leading = ""
    for match in _TOKEN.finditer(_NOISE.sub(" ", sql)):
        token = match.group(0)
        if token == "(":
            depth += 1
        elif token == ")":
            depth -= 1
        elif depth == 0:
            word = token.upper()
            if not leading:
                leading = word
                if leading != "WITH":
                    return leading
            elif word in _MAIN_KEYWORDS:
                return word
    return leading


def is_insert_statement(sql: str) -> bool:
    """Return True if the statement inserts rows (INSERT, REPLACE, or a CTE ending in one)."""
    return statement_keyword(sql) in ("INSERT", "REPLACE")


def execute_query(
    conn: sqlite3.Connection,
    sql: str,
    params: Params = None,
) -> sqlite3.Cursor:
    """Execute a SQL statement and return the cursor.

    Low-level helper that executes SQL with optional parameters and returns
    the cursor for result processing. A new cursor is used for every call.

    Args:
        conn: Database connection.
        sql: Single SQL statement.
        params: Query parameters (tuple or dict). Defaults to empty tuple.

    Returns:
        SQLite cursor positioned before the first result row.

    Raises:
        sqlite3.Error: If the statement cannot be compiled or executed.

    Logs:
        - DEBUG: "Executed query: {sql[:80]}" on success.
        - DEBUG: "Query execution failed: {exc}" on failure; the error propagates.
    """
    try:
        cursor = conn.execute(sql, params or ())
        logger.debug("Executed query: %s", sql[:80])
        return cursor
    except sqlite3.Error as exc:
        logger.debug("Query execution failed: %s", exc)
        raise


def fetch_rows(
    conn: sqlite3.Connection,
    sql: str,
    params: Params = None,
) -> QueryResult:
    """Execute a read statement and collect every row.

    Column names are captured when the first row is visited, so a statement
    that yields no rows produces an empty column list as well.

    Args:
        conn: Database connection.
        sql: SQL query string.
        params: Query parameters (tuple or dict). Defaults to empty tuple.

    Returns:
        QueryResult with column names and converted rows.

    Raises:
        sqlite3.Error: If the query fails while compiling or stepping.
    """
    cursor = execute_query(conn, sql, params)
    columns: list[str] = []
    rows: list[Row] = []
    try:
        for raw in cursor:
            if not columns:
                columns = [desc[0] for desc in cursor.description]
            rows.append([to_column_value(value) for value in raw])
    except sqlite3.Error as exc:
        logger.debug("Query execution failed: %s", exc)
        raise
    finally:
        cursor.close()

    logger.debug("Fetched %d row(s) with %d column(s)", len(rows), len(columns))
    return QueryResult(columns=columns, rows=rows)


def execute_update(
    conn: sqlite3.Connection,
    sql: str,
    params: Params = None,
) -> ExecutionResult:
    """Execute INSERT/UPDATE/DELETE/DDL and return execution metadata.

    Args:
        conn: Database connection.
        sql: SQL statement.
        params: Query parameters (tuple or dict). Defaults to empty tuple.

    Returns:
        ExecutionResult with the number of rows changed by this statement
        and, for INSERT/REPLACE, the rowid of the last inserted row.

    Raises:
        sqlite3.Error: If statement execution fails.

    Logs:
        - DEBUG: "Update affected {rowcount} rows" on success.
    """
    cursor = execute_query(conn, sql, params)
    try:
        # RETURNING rows must be drained before the statement completes and rowcount is final.
        cursor.fetchall()
        # rowcount is -1 for statements that change no rows (DDL, PRAGMA).
        affected = max(cursor.rowcount, 0)
    except sqlite3.Error as exc:
        logger.debug("Query execution failed: %s", exc)
        raise
    finally:
        cursor.close()

    last_id: int | None = None
    if is_insert_statement(sql):
        last_id = conn.execute("SELECT last_insert_rowid()").fetchone()[0]

    logger.debug("Update affected %s rows", affected)
    return ExecutionResult(affected_rows=affected, last_inserted_row_id=last_id)
