"""
Native row source: ``generate_series(1, n)``.
"""

from __future__ import annotations

from psycopg import sql

from tablegen.row_sources.abstract import AbstractRowSource


class SeriesRowSource(AbstractRowSource):
    """Bounded integer series; needs no auxiliary objects."""

    name: str = "series"
    description: str = "Native generate_series(1, n) set-returning function."

    def rows_clause(self, n: int) -> sql.Composable:
        return sql.SQL("generate_series(1, {}) AS g(n)").format(sql.SQL(str(int(n))))


__all__ = ["SeriesRowSource"]
