"""
PostgreSQL rendering of generation plans.

Turns the engine-neutral descriptors from ``tablegen.planning`` into
``psycopg.sql`` statements. Random expressions use ``random()``, which
PostgreSQL evaluates once per call per row, so the same rendered projection is
valid for every insert chunk.
"""

from __future__ import annotations

from typing import Sequence

from psycopg import sql

from tablegen.domain.expressions import (
    Expression,
    RandomDecimal,
    RandomInteger,
    RandomString,
    RandomTimeOffset,
    SequenceRef,
    SequenceTimeOffset,
    SequenceValue,
    Truncated,
)
from tablegen.domain.models import ColumnCatalog, ColumnDescriptor
from tablegen.planning.planner import DeletePlan, InsertPlan, SamplingSelector, UpdatePlan


def _int(value: int) -> sql.SQL:
    # Bare integer text: typed literals (e.g. ``5::int8``) break ``left()``/``substr()`` lookup.
    return sql.SQL(str(int(value)))


def table_identifier(catalog: ColumnCatalog) -> sql.Identifier:
    return sql.Identifier(catalog.schema_name, catalog.table_name)


class PostgresRenderer:
    """Render plans and expression descriptors as PostgreSQL statements."""

    def expression(self, expression: Expression) -> sql.Composable:
        if isinstance(expression, SequenceValue):
            return self.nextval(expression.sequence)
        if isinstance(expression, SequenceTimeOffset):
            return sql.SQL("(now() - make_interval(secs => ({} * {})::double precision))").format(
                self.nextval(expression.sequence), _int(expression.step_seconds)
            )
        if isinstance(expression, RandomTimeOffset):
            return sql.SQL("(now() - make_interval(secs => floor(random() * {})))").format(
                _int(expression.span_seconds)
            )
        if isinstance(expression, Truncated):
            return sql.SQL("left({}, {})").format(
                self.expression(expression.inner), _int(expression.length)
            )
        if isinstance(expression, RandomString):
            return self._random_string(expression)
        if isinstance(expression, RandomInteger):
            return sql.SQL("floor(random() * {})::integer").format(_int(expression.upper))
        if isinstance(expression, RandomDecimal):
            # trunc() keeps the value strictly below the upper bound.
            return sql.SQL("trunc((random() * {})::numeric, {})").format(
                _int(expression.upper), _int(expression.scale)
            )
        raise TypeError(f"Unknown expression descriptor: {expression!r}")

    def _random_string(self, expression: RandomString) -> sql.Composable:
        if expression.length == 0:
            return sql.Literal("")
        char = sql.SQL("substr({}, floor(random() * {})::integer + 1, 1)").format(
            sql.Literal(expression.alphabet), _int(len(expression.alphabet))
        )
        return sql.SQL("({})").format(sql.SQL(" || ").join([char] * expression.length))

    def nextval(self, sequence: SequenceRef) -> sql.Composable:
        return sql.SQL("nextval({})").format(sql.Literal(sequence.name))

    def create_sequence(self, sequence: SequenceRef, start: int) -> sql.Composed:
        return sql.SQL("CREATE TEMPORARY SEQUENCE {} START WITH {}").format(
            sql.Identifier(sequence.name), _int(start)
        )

    def drop_sequence(self, sequence: SequenceRef) -> sql.Composed:
        return sql.SQL("DROP SEQUENCE IF EXISTS {}").format(sql.Identifier(sequence.name))

    def max_key(self, catalog: ColumnCatalog, columns: Sequence[ColumnDescriptor]) -> sql.Composed:
        """Highest existing value across the given integer key columns (0 for an empty table)."""
        maxima = sql.SQL(", ").join(
            sql.SQL("COALESCE(MAX({}), 0)").format(sql.Identifier(c.name)) for c in columns
        )
        return sql.SQL("SELECT GREATEST({}) FROM {}").format(maxima, table_identifier(catalog))

    def insert(self, plan: InsertPlan, rows_clause: sql.Composable) -> sql.Composed:
        columns = sql.SQL(", ").join(sql.Identifier(item.column.name) for item in plan.projection)
        values = sql.SQL(", ").join(self.expression(item.expression) for item in plan.projection)
        return sql.SQL("INSERT INTO {} ({}) SELECT {} FROM {}").format(
            table_identifier(plan.catalog), columns, values, rows_clause
        )

    def sampled_keys(self, catalog: ColumnCatalog, selector: SamplingSelector) -> sql.Composed:
        key = sql.Identifier(selector.key.name)
        # random() cannot scale a non-numeric key
        rank = sql.SQL("random() * {}").format(key) if selector.key.is_integer_compatible else sql.SQL("random()")
        return sql.SQL(
            "SELECT {key} FROM ("
            "SELECT {key}, row_number() OVER (ORDER BY {rank}) AS rn FROM {table}"
            ") AS ranked WHERE ranked.rn <= {limit}"
        ).format(key=key, rank=rank, table=table_identifier(catalog), limit=_int(selector.limit))

    def delete(self, plan: DeletePlan) -> sql.Composed:
        return sql.SQL("DELETE FROM {} WHERE {} IN ({})").format(
            table_identifier(plan.catalog),
            sql.Identifier(plan.selector.key.name),
            self.sampled_keys(plan.catalog, plan.selector),
        )

    def update(self, plan: UpdatePlan) -> sql.Composed:
        key = sql.Identifier(plan.selector.key.name)
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(item.column.name), self.expression(item.expression))
            for item in plan.assignments
        )
        return sql.SQL(
            "UPDATE {table} AS t SET {assignments} FROM ({sampled}) AS s WHERE t.{key} = s.{key}"
        ).format(
            table=table_identifier(plan.catalog),
            assignments=assignments,
            sampled=self.sampled_keys(plan.catalog, plan.selector),
            key=key,
        )


__all__ = ["PostgresRenderer", "table_identifier"]
