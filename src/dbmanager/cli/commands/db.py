"""CLI commands for running statements against a database file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from ... import global_config as g
from ...database import DBManager, QueryResult, provision_database
from ..base import BaseCLI

db_app = typer.Typer(help="Run queries and statements against a SQLite database.")

DbPathOption = Annotated[
    Path,
    typer.Option(
        "--db-path",
        help="Path to SQLite database file (defaults to global config)",
    ),
]


def _render_value(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bytes):
        return f"<blob {len(value)} bytes>"
    return str(value)


def render_table(result: QueryResult) -> Table:
    """Build a Rich table for a query result."""
    table = Table(show_lines=False)
    for name in result.columns:
        table.add_column(name)
    for row in result.rows:
        table.add_row(*(_render_value(v) for v in row))
    return table


class DatabaseCLI(BaseCLI):
    """CLI helpers for accessor operations."""

    def __init__(self) -> None:
        """Initialize DatabaseCLI with db domain name."""
        super().__init__("db")

    def query(self, *, db_path: Path, sql: str) -> QueryResult:
        """Run a read statement and print the rows as a table.

        User Output:
            - Rich table of rows, or "(no rows)" when the result is empty.
        """
        result = self.handle_cli_operation(
            operation="db query",
            op_callable=lambda: self._query_operation(db_path=db_path, sql=sql),
            quiet=True,
        )
        if result.rows:
            Console().print(render_table(result))
        else:
            typer.echo("(no rows)")
        return result

    def execute(self, *, db_path: Path, sql: str) -> dict[str, Any]:
        """Run a mutation statement and print its execution metadata."""
        return self.handle_cli_operation(
            operation="db execute",
            op_callable=lambda: self._execute_operation(db_path=db_path, sql=sql),
        )

    def script(self, *, db_path: Path, script_path: Path) -> dict[str, Any]:
        """Run a SQL script file against the database."""
        return self.handle_cli_operation(
            operation="db script",
            op_callable=lambda: self._script_operation(db_path=db_path, script_path=script_path),
        )

    def provision(
        self,
        *,
        db_path: Path,
        template: Path | None,
        schema: Path | None,
        seed: Path | None,
        overwrite: bool,
    ) -> dict[str, Any]:
        """Provision a database from a template or schema/seed files."""
        return self.handle_cli_operation(
            operation="db provision",
            op_callable=lambda: self._provision_operation(
                db_path=db_path,
                template=template,
                schema=schema,
                seed=seed,
                overwrite=overwrite,
            ),
            pre_message="Provisioning database...",
        )

    def _query_operation(self, *, db_path: Path, sql: str) -> QueryResult:
        with DBManager(db_path) as db:
            return db.load_data_from_db(sql)

    def _execute_operation(self, *, db_path: Path, sql: str) -> dict[str, Any]:
        with DBManager(db_path) as db:
            result = db.execute_query(sql)
        return {
            "success": True,
            "affected_rows": result.affected_rows,
            "last_inserted_row_id": result.last_inserted_row_id,
        }

    def _script_operation(self, *, db_path: Path, script_path: Path) -> dict[str, Any]:
        sql = script_path.read_text(encoding="utf-8")
        with DBManager(db_path) as db:
            db.execute_script(sql, description=script_path.name)
        return {"success": True, "message": f"Executed {script_path.name}"}

    def _provision_operation(
        self,
        *,
        db_path: Path,
        template: Path | None,
        schema: Path | None,
        seed: Path | None,
        overwrite: bool,
    ) -> dict[str, Any]:
        path = provision_database(
            db_path,
            template=template,
            schema_sql=schema,
            seed_sql=seed,
            overwrite=overwrite,
        )
        return {"success": True, "message": f"Database ready at {path}"}


cli = DatabaseCLI()


@db_app.command("query")
def query_command(
    sql: Annotated[str, typer.Argument(help="Read statement, e.g. 'SELECT * FROM banks'")],
    db_path: DbPathOption = g.DEFAULT_DB_PATH,
) -> None:
    """Run a read statement and print the resulting rows."""
    cli.query(db_path=db_path, sql=sql)


@db_app.command("execute")
def execute_command(
    sql: Annotated[str, typer.Argument(help="INSERT/UPDATE/DELETE or DDL statement")],
    db_path: DbPathOption = g.DEFAULT_DB_PATH,
) -> None:
    """Run a mutation statement and print affected rows and last inserted id."""
    cli.execute(db_path=db_path, sql=sql)


@db_app.command("script")
def script_command(
    script_path: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="SQL script file to execute"),
    ],
    db_path: DbPathOption = g.DEFAULT_DB_PATH,
) -> None:
    """Run a multi-statement SQL script file."""
    cli.script(db_path=db_path, script_path=script_path)


@db_app.command("provision")
def provision_command(
    db_path: DbPathOption = g.DEFAULT_DB_PATH,
    template: Annotated[
        Path | None,
        typer.Option("--template", help="Prebuilt database file to copy"),
    ] = None,
    schema: Annotated[
        Path | None,
        typer.Option("--schema", help="Schema SQL file (ignored when --template is set)"),
    ] = None,
    seed: Annotated[
        Path | None,
        typer.Option("--seed", help="Seed data SQL file, applied after --schema"),
    ] = None,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace an existing database"),
    ] = False,
) -> None:
    """Create a database from a template file or schema/seed SQL files.

    An existing database is left untouched unless --overwrite is given.
    """
    cli.provision(
        db_path=db_path,
        template=template,
        schema=schema,
        seed=seed,
        overwrite=overwrite,
    )


app = db_app
