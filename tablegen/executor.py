"""
Batch executor: runs generation plans against PostgreSQL.

Inserts run chunk by chunk in planned order with a commit after each chunk, so
an interruption leaves every finished chunk durable; the caller resumes by
re-invoking with the remaining count. Deletes and updates run as one
statement each, followed by a commit. Statements are never retried: a failing
statement rolls back its own transaction and the engine error propagates
unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict

import psycopg
from psycopg import Connection

from tablegen.infrastructure.db_factory import apply_statement_timeout
from tablegen.planning.planner import DeletePlan, GenerationPlan, InsertPlan, UpdatePlan
from tablegen.rendering.postgres import PostgresRenderer
from tablegen.row_sources import RowSource, SeriesRowSource
from tablegen.utils.logging import get_logger
from tablegen.utils.profiler import profile_block

log = get_logger(__name__)


class GenerationResult(TypedDict, total=False):
    """
    Summary of a completed request.
    """

    table: str
    inserted: int
    chunks: int
    deleted: int
    updated: int
    row_source: str
    phases: List[Dict[str, Any]]


class BatchExecutor:
    """
    Execute insert/delete/update plans on one connection.

    Parameters
    ----------
    connection : psycopg.Connection
        Non-autocommit connection; the executor commits after each chunk and
        after each single-shot statement.
    renderer : PostgresRenderer, optional
        Plan-to-SQL renderer.
    row_source : RowSource, optional
        Candidate-row source for insert chunks. Defaults to ``generate_series``.
    statement_timeout_ms : int
        Session statement timeout applied before the first statement (0 = server default).
    """

    def __init__(
        self,
        connection: Connection,
        renderer: Optional[PostgresRenderer] = None,
        row_source: Optional[RowSource] = None,
        statement_timeout_ms: int = 0,
    ) -> None:
        self._connection = connection
        self.renderer = renderer or PostgresRenderer()
        self.row_source = row_source or SeriesRowSource()
        self.statement_timeout_ms = statement_timeout_ms
        self._timeout_applied = False

    def _cursor(self) -> psycopg.Cursor:
        cur = self._connection.cursor()
        if not self._timeout_applied:
            apply_statement_timeout(cur, self.statement_timeout_ms)
            self._timeout_applied = True
        return cur

    def _rollback(self) -> None:
        try:
            self._connection.rollback()
        except psycopg.Error:
            log.warning("Rollback failed", exc_info=True)

    def _sequence_start(self, cur: psycopg.Cursor, plan: InsertPlan) -> int:
        cur.execute(self.renderer.max_key(plan.catalog, plan.catalog.integer_key_columns))
        row = cur.fetchone()
        highest = row[0] if row and row[0] is not None else 0
        return int(highest) + 1

    def _release(self, cur: psycopg.Cursor, plan: InsertPlan) -> None:
        """Drop request-scoped objects. Temporary objects also vanish with the session."""
        try:
            self.row_source.release(cur)
            if plan.sequence is not None:
                cur.execute(self.renderer.drop_sequence(plan.sequence))
            self._connection.commit()
        except psycopg.Error:
            log.warning(
                "Cleanup of request-scoped objects failed",
                extra={"table": plan.catalog.qualified_name},
                exc_info=True,
            )
            self._rollback()

    def run_insert(self, plan: InsertPlan) -> int:
        """
        Insert ``plan.total_rows`` rows chunk by chunk; return rows inserted.
        """
        if plan.is_empty:
            return 0

        table = plan.catalog.qualified_name
        inserted = 0
        with self._cursor() as cur:
            try:
                if plan.sequence is not None:
                    start = self._sequence_start(cur, plan)
                    cur.execute(self.renderer.create_sequence(plan.sequence, start))
                    log.debug(
                        "Sequence created",
                        extra={"sequence": plan.sequence.name, "start": start},
                    )
                self.row_source.prepare(cur, max(plan.chunk_sizes))
                self._connection.commit()

                for index, size in enumerate(plan.chunk_sizes, start=1):
                    cur.execute(self.renderer.insert(plan, self.row_source.rows_clause(size)))
                    affected = cur.rowcount if cur.rowcount >= 0 else size
                    self._connection.commit()
                    inserted += affected
                    log.info(
                        f"[CHUNK {index}/{plan.chunk_count}] committed",
                        extra={"table": table, "chunk": index, "rows": size, "inserted": inserted},
                    )
            except BaseException:
                log.error(
                    "Insert aborted",
                    extra={"table": table, "inserted": inserted, "remaining": plan.total_rows - inserted},
                )
                self._rollback()
                raise
            finally:
                self._release(cur, plan)
        return inserted

    def _run_single(self, label: str, statement: Any, table: str) -> int:
        with self._cursor() as cur:
            try:
                cur.execute(statement)
                affected = cur.rowcount
                self._connection.commit()
            except BaseException:
                log.error(f"{label.capitalize()} aborted", extra={"table": table})
                self._rollback()
                raise
        log.info(f"{label.capitalize()} committed", extra={"table": table, "rows": affected})
        return max(affected, 0)

    def run_delete(self, plan: DeletePlan) -> int:
        """Delete up to ``selector.limit`` sampled rows; return rows deleted."""
        if plan.is_empty:
            return 0
        return self._run_single("delete", self.renderer.delete(plan), plan.catalog.qualified_name)

    def run_update(self, plan: UpdatePlan) -> int:
        """Rewrite the non-key columns of up to ``selector.limit`` sampled rows."""
        if plan.is_empty:
            return 0
        return self._run_single("update", self.renderer.update(plan), plan.catalog.qualified_name)

    def execute(self, plan: GenerationPlan) -> GenerationResult:
        """Run insert, delete and update in that order."""
        phases: List[Dict[str, Any]] = []

        with profile_block("insert") as stats:
            stats.rows = self.run_insert(plan.insert)
        phases.append(stats.as_dict())
        inserted = stats.rows

        with profile_block("delete") as stats:
            stats.rows = self.run_delete(plan.delete)
        phases.append(stats.as_dict())
        deleted = stats.rows

        with profile_block("update") as stats:
            stats.rows = self.run_update(plan.update)
        phases.append(stats.as_dict())
        updated = stats.rows

        return GenerationResult(
            table=plan.insert.catalog.qualified_name,
            inserted=inserted,
            chunks=plan.insert.chunk_count,
            deleted=deleted,
            updated=updated,
            row_source=self.row_source.name,
            phases=phases,
        )


__all__ = ["BatchExecutor", "GenerationResult"]
