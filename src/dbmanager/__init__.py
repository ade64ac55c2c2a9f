"""
dbmanager core package.

A thin, synchronous accessor over a local SQLite database file:
- `dbmanager.database.DBManager` opens a file, runs reads and mutations
- A Typer-based CLI (`dbmanager.cli`) exposes the same operations

Configuration:
- The default database location lives in `dbmanager.global_config`.
"""

from .database import (
    DBManager,
    ExecutionResult,
    QueryResult,
    open_database,
)

__all__ = ["DBManager", "ExecutionResult", "QueryResult", "open_database"]
