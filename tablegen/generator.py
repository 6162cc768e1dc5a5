"""
Entry point for synthetic workload generation.

Usage (example from CLI):
    from tablegen.generator import generate

    result = generate("public", "t1s", insert_count=2, max_string_size=3)
    print(result["inserted"])

The call chain is synchronous: arguments are validated, the column catalog is
loaded, every plan is built (so unsupported types and missing keys fail before
any mutation) and only then are statements issued.
"""

from __future__ import annotations

from typing import Optional

from psycopg import Connection

from tablegen.config import Settings, get_settings
from tablegen.domain.models import ColumnCatalog
from tablegen.errors import GenerationError
from tablegen.executor import BatchExecutor, GenerationResult
from tablegen.infrastructure.catalog import CatalogReader, PostgresCatalogReader, load_catalog
from tablegen.infrastructure.db_factory import get_sync_connection
from tablegen.planning.planner import GenerationPlan, MutationPlanner, validate_counts
from tablegen.planning.registry import ValueGeneratorRegistry
from tablegen.row_sources import RowSource, resolve_row_source
from tablegen.utils.logging import get_logger

log = get_logger(__name__)


def build_planner(settings: Optional[Settings] = None) -> MutationPlanner:
    settings = settings or get_settings()
    registry = ValueGeneratorRegistry(
        temporal_span_seconds=settings.temporal_span_seconds,
        temporal_key_step_seconds=settings.temporal_key_step_seconds,
    )
    return MutationPlanner(registry=registry, chunk_size=settings.insert_chunk_size)


def plan_request(
    catalog: ColumnCatalog,
    insert_count: int,
    max_string_size: int,
    delete_count: int,
    update_count: int,
    settings: Optional[Settings] = None,
) -> GenerationPlan:
    planner = build_planner(settings)
    return planner.plan(catalog, insert_count, max_string_size, delete_count, update_count)


def generate(
    schema_name: str,
    table_name: str,
    insert_count: int = 0,
    max_string_size: Optional[int] = None,
    delete_count: int = 0,
    update_count: int = 0,
    *,
    connection: Optional[Connection] = None,
    reader: Optional[CatalogReader] = None,
    row_source: Optional[RowSource] = None,
    settings: Optional[Settings] = None,
) -> GenerationResult:
    """
    Append, delete and update randomly generated rows of ``schema_name.table_name``.

    Parameters
    ----------
    schema_name, table_name : str
        Target table; it must exist and have an integer-compatible primary key.
    insert_count : int
        Rows to append, in chunks of at most ``settings.insert_chunk_size``.
    max_string_size : int | None
        Generated length for character columns (capped by the column length).
        Defaults to ``settings.max_string_size``.
    delete_count, update_count : int
        Rows to remove / rewrite, sampled at random by primary key.
    connection : psycopg.Connection, optional
        Connection to use. When omitted one is opened from settings and closed
        before returning.
    reader : CatalogReader, optional
        Column metadata source. Defaults to ``information_schema`` on ``connection``.
    row_source : RowSource, optional
        Candidate-row source for inserts. Defaults to ``settings.row_source``.

    Returns
    -------
    GenerationResult
        Row counts and per-phase timings.

    Raises
    ------
    InvalidArgument, UnknownTable, MissingPrimaryKey, UnsupportedColumnType
        Before any statement is issued.
    psycopg.Error
        Engine failures, propagated unchanged.
    """
    settings = settings or get_settings()
    if max_string_size is None:
        max_string_size = settings.max_string_size
    validate_counts(insert_count, max_string_size, delete_count, update_count)

    owns_connection = connection is None
    conn = connection if connection is not None else get_sync_connection()
    try:
        catalog = load_catalog(reader or PostgresCatalogReader(conn), schema_name, table_name)
        plan = plan_request(
            catalog, insert_count, max_string_size, delete_count, update_count, settings
        )
        if plan.is_empty:
            log.info("Nothing to do", extra={"table": catalog.qualified_name})

        executor = BatchExecutor(
            conn,
            row_source=row_source or resolve_row_source(settings.row_source),
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )
        log.info(
            f"[GENERATE START] {catalog.qualified_name}",
            extra={
                "table": catalog.qualified_name,
                "insert_count": insert_count,
                "delete_count": delete_count,
                "update_count": update_count,
                "chunks": plan.insert.chunk_count,
            },
        )
        result = executor.execute(plan)
        log.info(
            f"[GENERATE COMPLETE] {catalog.qualified_name}",
            extra={
                "table": catalog.qualified_name,
                "inserted": result["inserted"],
                "deleted": result["deleted"],
                "updated": result["updated"],
            },
        )
        return result
    except GenerationError:
        if not owns_connection:
            # The catalog read opened a transaction on the caller's connection.
            conn.rollback()
        raise
    finally:
        if owns_connection:
            conn.close()


__all__ = ["build_planner", "generate", "plan_request", "validate_counts"]
