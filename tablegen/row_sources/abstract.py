"""
Row source interfaces for tablegen.

A row source supplies the candidate rows an insert chunk projects over: any
relation with at least ``n`` rows works, since every generated column is an
expression evaluated per row. Implementations may create request-scoped
objects in ``prepare`` and must remove them in ``release``.
"""

from __future__ import annotations

import abc
from typing import Protocol, runtime_checkable

import psycopg
from psycopg import sql


@runtime_checkable
class RowSource(Protocol):
    """
    Common interface for candidate-row sources.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the approach.
    """

    name: str
    description: str

    def prepare(self, cursor: psycopg.Cursor, max_rows: int) -> None:
        """
        Create whatever the source needs to yield up to ``max_rows`` rows.
        """
        ...

    def rows_clause(self, n: int) -> sql.Composable:
        """
        FROM-clause body yielding exactly ``n`` rows.
        """
        ...

    def release(self, cursor: psycopg.Cursor) -> None:
        """
        Drop anything created by ``prepare``. Must be safe to call more than once.
        """
        ...


class AbstractRowSource(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Sources that need no setup inherit no-op ``prepare``/``release``.
    """

    name: str
    description: str

    def prepare(self, cursor: psycopg.Cursor, max_rows: int) -> None:
        del cursor, max_rows

    @abc.abstractmethod
    def rows_clause(self, n: int) -> sql.Composable:  # pragma: no cover - interface only
        """Return the FROM-clause body yielding ``n`` rows."""
        raise NotImplementedError

    def release(self, cursor: psycopg.Cursor) -> None:
        del cursor


__all__ = ["RowSource", "AbstractRowSource"]
