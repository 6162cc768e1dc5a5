"""
Error taxonomy for tablegen.

Every error raised by the planner is detected before any statement reaches the
database. Engine failures (``psycopg.Error``) are never wrapped: they surface
from the failing statement unchanged.
"""

from __future__ import annotations

from typing import Any, Optional


class GenerationError(Exception):
    """Base class for errors that abort a generation request."""


class InvalidArgument(GenerationError):
    """A request parameter is out of range (e.g., a negative count)."""

    def __init__(self, name: str, value: Any, reason: str = "must be >= 0") -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid argument {name}={value!r}: {reason}")


class UnsupportedColumnType(GenerationError):
    """A column's declared type has no generation rule."""

    def __init__(self, type_name: str, column: Optional[str] = None) -> None:
        self.type_name = type_name
        self.column = column
        where = f" (column {column!r})" if column else ""
        super().__init__(f"Unsupported column type {type_name!r}{where}")


class MissingPrimaryKey(GenerationError):
    """The table has no primary key, or none of its key columns is integer-compatible."""

    def __init__(self, table: str, detail: str = "no primary key") -> None:
        self.table = table
        super().__init__(f"Table {table} cannot be generated: {detail}")


class UnknownTable(GenerationError):
    """The catalog returned no columns for the requested table."""

    def __init__(self, schema: str, table: str) -> None:
        self.schema = schema
        self.table = table
        super().__init__(
            f"Table {schema}.{table} not found in catalog (missing or not visible)"
        )


__all__ = [
    "GenerationError",
    "InvalidArgument",
    "UnsupportedColumnType",
    "MissingPrimaryKey",
    "UnknownTable",
]
