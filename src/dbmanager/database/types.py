"""Value and result types returned by the accessor.

SQLite stores loosely typed values. Each value read back is one of five
storage classes, represented here as plain Python objects:

    INTEGER -> int, REAL -> float, TEXT -> str, BLOB -> bytes, NULL -> None
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

ColumnValue = int | float | str | bytes | None
Row = list[ColumnValue]


class StorageClass(str, enum.Enum):
    """Storage class tag of a column value."""

    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BLOB = "blob"
    NULL = "null"


def storage_class(value: ColumnValue) -> StorageClass:
    """Return the storage class tag for a converted column value.

    Args:
        value: Value previously produced by to_column_value().

    Returns:
        Matching StorageClass member.
    """
    if value is None:
        return StorageClass.NULL
    # bool is an int subclass; it never comes back from sqlite3 but is stored as INTEGER.
    if isinstance(value, int):
        return StorageClass.INTEGER
    if isinstance(value, float):
        return StorageClass.REAL
    if isinstance(value, bytes):
        return StorageClass.BLOB
    return StorageClass.TEXT


def to_column_value(raw: Any) -> ColumnValue:
    """Convert a raw value from the driver into a ColumnValue.

    Integers, floats, text, blobs and NULL pass through unchanged. Buffer
    types are copied into bytes. Anything else falls back to its text form.

    Args:
        raw: Value as returned by a sqlite3 cursor.

    Returns:
        Value of one of the five storage-class types.
    """
    if raw is None or isinstance(raw, (int, float, str, bytes)):
        return raw
    if isinstance(raw, (bytearray, memoryview)):
        return bytes(raw)
    return str(raw)


@dataclass(frozen=True)
class QueryResult:
    """Rows and column names produced by a single read statement."""

    columns: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def records(self) -> list[dict[str, ColumnValue]]:
        """Return rows as dictionaries keyed by column name."""
        return [dict(zip(self.columns, row)) for row in self.rows]


@dataclass(frozen=True)
class ExecutionResult:
    """Metadata produced by a single mutation statement.

    Attributes:
        affected_rows: Rows changed by this statement (0 for DDL).
        last_inserted_row_id: Rowid assigned by an INSERT or REPLACE.
            None when the statement was of any other kind, because the
            engine's value is stale in that case.
    """

    affected_rows: int = 0
    last_inserted_row_id: int | None = None
