"""Database-specific exception types for the project."""

from __future__ import annotations

import sqlite3
from typing import Literal

ErrorKind = Literal["open", "query", "statement"]


class DatabaseError(Exception):
    """Base exception for database-related errors."""


class OpenError(DatabaseError):
    """Raised when a database file cannot be opened, is corrupt, or is inaccessible."""


class QueryError(DatabaseError):
    """Raised when a read statement cannot be compiled or executed."""


class StatementError(DatabaseError):
    """Raised when a mutation statement or script cannot be executed."""


class IntegrityError(StatementError):
    """Raised when a constraint violation occurs."""


class AccessorClosedError(DatabaseError):
    """Raised when an operation is attempted on a closed accessor."""


def from_sqlite_error(error: sqlite3.Error, kind: ErrorKind) -> DatabaseError:
    """Map a raw sqlite3 error to a project-level DatabaseError.

    The mapping depends on which operation failed: opening a file, running a
    read, or running a mutation. Constraint violations raised by a mutation
    become IntegrityError, a StatementError subclass.

    Args:
        error: SQLite exception to convert.
        kind: Operation that failed: "open", "query" or "statement".

    Returns:
        OpenError, QueryError, StatementError or IntegrityError instance
        carrying the engine's message.
    """
    message = str(error)
    if kind == "open":
        return OpenError(message)
    if kind == "query":
        return QueryError(message)
    if isinstance(error, sqlite3.IntegrityError):
        return IntegrityError(message)
    return StatementError(message)
