"""Tests for the db CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from dbmanager.cli.main import app
from dbmanager.database import DBManager

runner = CliRunner()


@pytest.fixture
def banks_file(sqlite_path: Path) -> Path:
    with DBManager(sqlite_path) as db:
        db.execute_query("CREATE TABLE banks (id INTEGER PRIMARY KEY, name TEXT)")
    return sqlite_path


@pytest.mark.integration
def test_execute_prints_metadata(banks_file: Path) -> None:
    result = runner.invoke(
        app,
        ["db", "execute", "INSERT INTO banks (name) VALUES ('Acme Bank')", "--db-path", str(banks_file)],
    )
    assert result.exit_code == 0, result.output
    assert "affected_rows: 1" in result.output
    assert "last_inserted_row_id: 1" in result.output


@pytest.mark.integration
def test_query_prints_table(banks_file: Path) -> None:
    with DBManager(banks_file) as db:
        db.execute_query("INSERT INTO banks (name) VALUES ('Acme Bank')")

    result = runner.invoke(app, ["db", "query", "SELECT id, name FROM banks", "--db-path", str(banks_file)])
    assert result.exit_code == 0, result.output
    assert "Acme Bank" in result.output
    assert "name" in result.output


@pytest.mark.integration
def test_query_with_no_rows(banks_file: Path) -> None:
    result = runner.invoke(app, ["db", "query", "SELECT * FROM banks", "--db-path", str(banks_file)])
    assert result.exit_code == 0, result.output
    assert "(no rows)" in result.output


@pytest.mark.integration
def test_bad_statement_exits_with_error(banks_file: Path) -> None:
    result = runner.invoke(app, ["db", "execute", "INSRT INTO banks", "--db-path", str(banks_file)])
    assert result.exit_code == 1
    assert "db execute failed" in result.output


@pytest.mark.integration
def test_script_command(project_root: Path, sqlite_path: Path) -> None:
    script = project_root / "setup.sql"
    script.write_text(
        "CREATE TABLE banks (id INTEGER PRIMARY KEY, name TEXT);\n"
        "INSERT INTO banks (name) VALUES ('Scripted');\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["db", "script", str(script), "--db-path", str(sqlite_path)])
    assert result.exit_code == 0, result.output

    with DBManager(sqlite_path) as db:
        assert db.load_data_from_db("SELECT name FROM banks").rows == [["Scripted"]]


@pytest.mark.integration
def test_provision_command(project_root: Path) -> None:
    schema = project_root / "schema.sql"
    schema.write_text("CREATE TABLE banks (id INTEGER PRIMARY KEY, name TEXT);", encoding="utf-8")
    target = project_root / "db" / "banks.sqlite"

    result = runner.invoke(
        app,
        ["db", "provision", "--db-path", str(target), "--schema", str(schema)],
    )
    assert result.exit_code == 0, result.output
    assert "Database ready at" in result.output
    with DBManager(target) as db:
        assert db.load_data_from_db("SELECT * FROM banks").rows == []
