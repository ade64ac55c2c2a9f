"""Public interface for the database package.

This module exposes the main primitives needed by the rest of the
project: the accessor, its result types, the error taxonomy, and
provisioning helpers.
"""

from .accessor import DBManager, open_database
from .connection import open_connection
from .errors import (
    AccessorClosedError,
    DatabaseError,
    IntegrityError,
    OpenError,
    QueryError,
    StatementError,
)
from .provision import DatabaseLockedError, delete_database, provision_database
from .types import (
    ColumnValue,
    ExecutionResult,
    QueryResult,
    Row,
    StorageClass,
    storage_class,
)

__all__ = [
    "DBManager",
    "open_database",
    "open_connection",
    "DatabaseError",
    "OpenError",
    "QueryError",
    "StatementError",
    "IntegrityError",
    "AccessorClosedError",
    "DatabaseLockedError",
    "delete_database",
    "provision_database",
    "ColumnValue",
    "Row",
    "QueryResult",
    "ExecutionResult",
    "StorageClass",
    "storage_class",
]
