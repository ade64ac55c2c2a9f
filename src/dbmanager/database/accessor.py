"""The database accessor.

`DBManager` owns one SQLite connection for its whole lifetime and exposes
two calls: a read that returns rows, and a mutation that returns execution
metadata. Both calls return a fresh result object. The most recent
successful results are also mirrored on the instance (`column_names`,
`affected_rows`, `last_inserted_row_id`) for callers that read them after
the call.

Example:
    with DBManager("banks.sqlite") as db:
        db.execute_query("CREATE TABLE banks (id INTEGER PRIMARY KEY, name TEXT)")
        inserted = db.execute_query("INSERT INTO banks (name) VALUES ('Acme Bank')")
        inserted.last_inserted_row_id  # 1
        db.load_data_from_db("SELECT id, name FROM banks").rows  # [[1, 'Acme Bank']]
"""

from __future__ import annotations

import contextlib
import logging
import shutil
import sqlite3
from pathlib import Path
from types import TracebackType

from . import queries
from .connection import MEMORY_DB, execute_script, open_connection
from .errors import AccessorClosedError, OpenError, from_sqlite_error
from .queries import Params
from .types import ExecutionResult, QueryResult

logger = logging.getLogger(__name__)


class DBManager:
    """Synchronous accessor over a single SQLite database file.

    Instances are not thread-safe; use one instance per thread.

    Attributes:
        filename: Database path as given to the constructor.
    """

    def __init__(self, filename: str | Path, *, template: str | Path | None = None) -> None:
        """Open (or create) the database file.

        Args:
            filename: Path to the database file, resolved against the
                current working directory when relative, or ":memory:".
            template: Optional prebuilt database copied to filename when
                filename does not exist yet.

        Raises:
            OpenError: If the file cannot be opened, is not a database, or
                the template cannot be copied.
        """
        self.filename = str(filename)
        self._conn: sqlite3.Connection | None = None
        self._column_names: list[str] = []
        self._last_execution = ExecutionResult()

        if template is not None:
            self._copy_template(Path(template))

        try:
            self._conn = open_connection(self.filename)
        except sqlite3.Error as exc:
            raise OpenError(f"Cannot open database {self.filename!r}: {exc}") from exc
        logger.debug("Opened accessor for %s", self.filename)

    def _copy_template(self, template: Path) -> None:
        target = Path(self.filename)
        if self.filename == MEMORY_DB or target.exists():
            return
        if not template.is_file():
            raise OpenError(f"Template database not found: {template}")
        try:
            shutil.copyfile(template, target)
        except OSError as exc:
            with contextlib.suppress(OSError):
                target.unlink()
            raise OpenError(f"Cannot copy template {template} to {target}: {exc}") from exc
        logger.info("Copied template database %s to %s", template, target)

    # -- lifecycle -----------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def close(self) -> None:
        """Close the underlying connection. Safe to call more than once."""
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug("Closed accessor for %s", self.filename)

    def __enter__(self) -> DBManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        conn = getattr(self, "_conn", None)
        if conn is not None:
            # The collector may run on another thread, where close() is refused.
            with contextlib.suppress(sqlite3.Error):
                conn.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"DBManager({self.filename!r}, {state})"

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise AccessorClosedError(f"Accessor for {self.filename!r} is closed")
        return self._conn

    # -- side-channel state --------------------------------------------------

    @property
    def column_names(self) -> list[str]:
        """Column names of the most recent successful read."""
        return list(self._column_names)

    @property
    def affected_rows(self) -> int:
        """Rows changed by the most recent successful mutation."""
        return self._last_execution.affected_rows

    @property
    def last_inserted_row_id(self) -> int | None:
        """Rowid from the most recent successful mutation, None unless it was an insert."""
        return self._last_execution.last_inserted_row_id

    # -- operations ----------------------------------------------------------

    def load_data_from_db(self, query: str, params: Params = None) -> QueryResult:
        """Run a read statement and return its rows.

        Args:
            query: SQL statement that yields rows.
            params: Optional parameters bound to placeholders in query.

        Returns:
            QueryResult holding column names and rows. Both are empty when
            the statement yields no rows.

        Raises:
            QueryError: If the statement cannot be compiled or executed.
            AccessorClosedError: If the accessor has been closed.
        """
        conn = self._connection()
        try:
            result = queries.fetch_rows(conn, query, params)
        except sqlite3.Error as exc:
            raise from_sqlite_error(exc, "query") from exc
        self._column_names = list(result.columns)
        return result

    def execute_query(self, statement: str, params: Params = None) -> ExecutionResult:
        """Run an INSERT/UPDATE/DELETE/DDL statement to completion.

        Args:
            statement: Single SQL statement.
            params: Optional parameters bound to placeholders in statement.

        Returns:
            ExecutionResult with the affected-row count and, for inserts,
            the last inserted rowid.

        Raises:
            StatementError: If the statement cannot be executed; nothing is
                applied in that case.
            IntegrityError: If the statement violates a constraint.
            AccessorClosedError: If the accessor has been closed.
        """
        conn = self._connection()
        try:
            result = queries.execute_update(conn, statement, params)
        except sqlite3.Error as exc:
            raise from_sqlite_error(exc, "statement") from exc
        self._last_execution = result
        return result

    def execute_script(self, sql: str, *, description: str = "script") -> None:
        """Run a multi-statement SQL script, e.g. a schema file.

        Raises:
            StatementError: If any statement in the script fails. Statements
                before the failing one stay applied unless the script wraps
                itself in BEGIN/COMMIT.
            AccessorClosedError: If the accessor has been closed.
        """
        conn = self._connection()
        try:
            execute_script(conn, sql, description=description)
        except sqlite3.Error as exc:
            if conn.in_transaction:
                conn.rollback()
            raise from_sqlite_error(exc, "statement") from exc

    # Short aliases
    query = load_data_from_db
    execute = execute_query


def open_database(filename: str | Path, *, template: str | Path | None = None) -> DBManager:
    """Open a database file and return its accessor."""
    return DBManager(filename, template=template)
