from __future__ import annotations

import json
import sys
from typing import Optional

import typer

from tablegen.config import get_settings
from tablegen.errors import GenerationError
from tablegen.generator import build_planner, generate, validate_counts
from tablegen.infrastructure.catalog import PostgresCatalogReader, load_catalog
from tablegen.infrastructure.db_factory import sync_connection
from tablegen.reporter import print_plan, print_result, print_rows
from tablegen.rendering.python import evaluate_rows
from tablegen.row_sources import available_row_sources, resolve_row_source
from tablegen.utils.logging import configure_logging

app = typer.Typer(help="Schema-driven synthetic INSERT/UPDATE/DELETE workloads for PostgreSQL tables.")


def _fail(exc: GenerationError) -> None:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=2)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"chunk={settings.insert_chunk_size} row_source={settings.row_source} "
        f"max_string_size={settings.max_string_size}"
    )
    typer.echo("Available row sources: " + ", ".join(available_row_sources()))


@app.command()
def plan(
    schema: str = typer.Argument(..., help="Schema of the target table."),
    table: str = typer.Argument(..., help="Target table."),
    insert: int = typer.Option(0, "--insert", "-i", help="Rows to insert."),
    max_string_size: Optional[int] = typer.Option(
        None, "--max-string-size", "-s", help="Generated length for character columns."
    ),
    delete: int = typer.Option(0, "--delete", "-d", help="Rows to delete."),
    update: int = typer.Option(0, "--update", "-u", help="Rows to update."),
) -> None:
    """
    Show how each column would be generated, without mutating the table.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    size = settings.max_string_size if max_string_size is None else max_string_size
    try:
        validate_counts(insert, size, delete, update)
        with sync_connection() as conn:
            catalog = load_catalog(PostgresCatalogReader(conn), schema, table)
        generation_plan = build_planner(settings).plan(catalog, insert, size, delete, update)
    except GenerationError as exc:
        _fail(exc)
        return
    print_plan(generation_plan)


@app.command()
def preview(
    schema: str = typer.Argument(..., help="Schema of the target table."),
    table: str = typer.Argument(..., help="Target table."),
    rows: int = typer.Option(5, "--rows", "-r", help="Sample rows to evaluate."),
    max_string_size: Optional[int] = typer.Option(
        None, "--max-string-size", "-s", help="Generated length for character columns."
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Deterministic RNG seed."),
) -> None:
    """
    Evaluate the insert projection locally and print sample rows.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    size = settings.max_string_size if max_string_size is None else max_string_size
    try:
        validate_counts(rows, size, 0, 0)
        with sync_connection() as conn:
            catalog = load_catalog(PostgresCatalogReader(conn), schema, table)
        insert_plan = build_planner(settings).plan_insert(catalog, max(rows, 1), size)
    except GenerationError as exc:
        _fail(exc)
        return
    print_rows(evaluate_rows(insert_plan.projection, rows, seed=seed), title=f"Preview: {catalog.qualified_name}")


@app.command("generate")
def generate_command(
    schema: str = typer.Argument(..., help="Schema of the target table."),
    table: str = typer.Argument(..., help="Target table."),
    insert: int = typer.Option(0, "--insert", "-i", help="Rows to insert."),
    max_string_size: Optional[int] = typer.Option(
        None, "--max-string-size", "-s", help="Generated length for character columns."
    ),
    delete: int = typer.Option(0, "--delete", "-d", help="Rows to delete."),
    update: int = typer.Option(0, "--update", "-u", help="Rows to update."),
    row_source: Optional[str] = typer.Option(
        None, "--row-source", help="Candidate-row source for inserts (series, cross_join)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the run summary as JSON."),
) -> None:
    """
    Insert, delete and update randomly generated rows of SCHEMA.TABLE.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    try:
        source = resolve_row_source(row_source or settings.row_source)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--row-source") from exc

    try:
        result = generate(
            schema,
            table,
            insert_count=insert,
            max_string_size=max_string_size,
            delete_count=delete,
            update_count=update,
            row_source=source,
            settings=settings,
        )
    except GenerationError as exc:
        _fail(exc)
        return

    if as_json:
        typer.echo(json.dumps(result, indent=2))
    else:
        print_result(result)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
