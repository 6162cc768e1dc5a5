"""
Fallback row source for engines without a native row generator.

A numbering table of ``side`` rows crossed with itself yields ``side ** 2``
candidate rows; ``side`` is the smallest square root covering the largest
chunk (1000 for the default 1,000,000-row chunk). The table is temporary and
uniquely named, so concurrent invocations never share it.
"""

from __future__ import annotations

import math
import uuid
from typing import Optional

import psycopg
from psycopg import sql

from tablegen.row_sources.abstract import AbstractRowSource
from tablegen.utils.logging import get_logger

log = get_logger(__name__)


def square_side(max_rows: int) -> int:
    """Smallest ``side`` with ``side * side >= max_rows``."""
    return max(1, math.isqrt(max(max_rows, 1) - 1) + 1)


class CrossJoinRowSource(AbstractRowSource):
    """Self-cross-product of a request-scoped numbering table."""

    name: str = "cross_join"
    description: str = "Temporary N-row numbering table crossed with itself (N*N rows)."

    def __init__(self) -> None:
        self.table_name = f"tablegen_numbers_{uuid.uuid4().hex[:12]}"
        self.side: Optional[int] = None

    @property
    def _table(self) -> sql.Identifier:
        return sql.Identifier(self.table_name)

    def prepare(self, cursor: psycopg.Cursor, max_rows: int) -> None:
        side = square_side(max_rows)
        cursor.execute(sql.SQL("CREATE TEMPORARY TABLE {} (n integer NOT NULL)").format(self._table))
        cursor.executemany(
            sql.SQL("INSERT INTO {} (n) VALUES (%s)").format(self._table),
            [(i,) for i in range(1, side + 1)],
        )
        self.side = side
        log.debug(
            "Numbering table created",
            extra={"table": self.table_name, "side": side, "capacity": side * side},
        )

    def rows_clause(self, n: int) -> sql.Composable:
        if self.side is None:
            raise RuntimeError("CrossJoinRowSource.prepare() must run before rows_clause()")
        if n > self.side * self.side:
            raise ValueError(f"{n} rows requested; numbering table yields {self.side ** 2}")
        return sql.SQL("{} AS a CROSS JOIN {} AS b LIMIT {}").format(
            self._table, self._table, sql.SQL(str(int(n)))
        )

    def release(self, cursor: psycopg.Cursor) -> None:
        if self.side is None:
            return
        cursor.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(self._table))
        self.side = None
        log.debug("Numbering table dropped", extra={"table": self.table_name})


__all__ = ["CrossJoinRowSource", "square_side"]
