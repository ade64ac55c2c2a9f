"""Tests for the low-level query helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from dbmanager.database.connection import open_connection
from dbmanager.database.queries import execute_update, fetch_rows, is_insert_statement, statement_keyword


class TestIsInsertStatement:
    """Tests for is_insert_statement."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "sql",
        [
            "INSERT INTO banks (name) VALUES ('a')",
            "  insert into banks default values",
            "REPLACE INTO banks (id, name) VALUES (1, 'a')",
            "INSERT OR IGNORE INTO banks (name) VALUES ('a')",
            "-- add a bank\nINSERT INTO banks (name) VALUES ('a')",
            "/* bulk */ INSERT INTO banks SELECT * FROM staging",
            "WITH s AS (SELECT 'a' AS name) INSERT INTO banks (name) SELECT name FROM s",
        ],
    )
    def test_inserts(self, sql: str) -> None:
        assert is_insert_statement(sql)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "sql",
        [
            "UPDATE banks SET name = 'insert'",
            "DELETE FROM banks",
            "CREATE TABLE banks (id INTEGER PRIMARY KEY)",
            "-- INSERT\nDELETE FROM banks",
            "WITH t AS (SELECT replace(name, 'a', 'b') AS n FROM banks) UPDATE banks SET name = (SELECT n FROM t)",
            "SELECT 'INSERT INTO x' AS s",
            "",
        ],
    )
    def test_non_inserts(self, sql: str) -> None:
        assert not is_insert_statement(sql)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("sql", "keyword"),
        [
            ("select 1", "SELECT"),
            ("WITH RECURSIVE c(n) AS (SELECT 1 UNION ALL SELECT n + 1 FROM c) SELECT n FROM c", "SELECT"),
            ("WITH old AS (SELECT id FROM banks WHERE name = 'replace') DELETE FROM banks WHERE id IN old", "DELETE"),
            ("/* note */ pragma foreign_keys", "PRAGMA"),
            ("  ", ""),
        ],
    )
    def test_statement_keyword(self, sql: str, keyword: str) -> None:
        assert statement_keyword(sql) == keyword


@pytest.fixture
def conn(sqlite_path: Path):
    connection = open_connection(sqlite_path)
    try:
        yield connection
    finally:
        connection.close()


@pytest.mark.integration
def test_fetch_rows_and_execute_update(conn: sqlite3.Connection) -> None:
    assert execute_update(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)").affected_rows == 0
    inserted = execute_update(conn, "INSERT INTO t (v) VALUES (?), (?)", ("a", "b"))
    assert inserted.affected_rows == 2
    assert inserted.last_inserted_row_id == 2

    result = fetch_rows(conn, "SELECT id, v FROM t ORDER BY id")
    assert result.columns == ["id", "v"]
    assert result.rows == [[1, "a"], [2, "b"]]


@pytest.mark.integration
def test_fetch_rows_propagates_sqlite_errors(conn: sqlite3.Connection) -> None:
    with pytest.raises(sqlite3.OperationalError):
        fetch_rows(conn, "SELECT * FROM missing")


@pytest.mark.integration
def test_open_connection_creates_parents_on_request(project_root: Path) -> None:
    target = project_root / "a" / "b" / "db.sqlite"
    open_connection(target, create_parents=True).close()
    assert target.parent.is_dir()


@pytest.mark.integration
def test_open_connection_is_autocommit(sqlite_path: Path) -> None:
    writer = open_connection(sqlite_path)
    try:
        execute_update(writer, "CREATE TABLE t (v TEXT)")
        execute_update(writer, "INSERT INTO t VALUES ('x')")
        reader = sqlite3.connect(sqlite_path)
        try:
            assert reader.execute("SELECT v FROM t").fetchall() == [("x",)]
        finally:
            reader.close()
    finally:
        writer.close()
