"""
Column metadata readers.

``PostgresCatalogReader`` enumerates a table's columns and primary key from
``information_schema``. ``load_catalog`` wraps any reader and turns an empty
result into ``UnknownTable``.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from psycopg import Connection

from tablegen.domain.models import ColumnCatalog, ColumnDescriptor
from tablegen.errors import UnknownTable
from tablegen.utils.logging import get_logger

log = get_logger(__name__)

_COLUMNS_SQL = """
    SELECT
        c.column_name,
        c.ordinal_position,
        upper(c.data_type),
        c.character_maximum_length,
        c.numeric_scale,
        (k.column_name IS NOT NULL) AS is_primary_key
    FROM information_schema.columns AS c
    LEFT JOIN (
        SELECT kcu.column_name
        FROM information_schema.table_constraints AS tc
        JOIN information_schema.key_column_usage AS kcu
          ON kcu.constraint_schema = tc.constraint_schema
         AND kcu.constraint_name = tc.constraint_name
         AND kcu.table_name = tc.table_name
        WHERE tc.constraint_type = 'PRIMARY KEY'
          AND tc.table_schema = %(schema)s
          AND tc.table_name = %(table)s
    ) AS k ON k.column_name = c.column_name
    WHERE c.table_schema = %(schema)s
      AND c.table_name = %(table)s
    ORDER BY c.ordinal_position
"""


@runtime_checkable
class CatalogReader(Protocol):
    """Anything that can list a table's column descriptors in position order."""

    def load(self, schema: str, table: str) -> List[ColumnDescriptor]:
        """Return the descriptors, or an empty list when the table is not visible."""
        ...


class PostgresCatalogReader:
    """Read column descriptors from PostgreSQL's ``information_schema``."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def load(self, schema: str, table: str) -> List[ColumnDescriptor]:
        with self._connection.cursor() as cur:
            cur.execute(_COLUMNS_SQL, {"schema": schema, "table": table})
            rows = cur.fetchall()
        return [
            ColumnDescriptor(
                name=name,
                position=position,
                type_name=type_name,
                length=length,
                scale=scale,
                is_primary_key=bool(is_pk),
            )
            for name, position, type_name, length, scale, is_pk in rows
        ]


class StaticCatalogReader:
    """In-memory reader keyed by ``(schema, table)``."""

    def __init__(self, tables: dict[tuple[str, str], List[ColumnDescriptor]]) -> None:
        self._tables = tables

    def load(self, schema: str, table: str) -> List[ColumnDescriptor]:
        return list(self._tables.get((schema, table), []))


def load_catalog(reader: CatalogReader, schema: str, table: str) -> ColumnCatalog:
    """
    Load the column catalog for ``schema.table``.

    Raises
    ------
    UnknownTable
        If the reader returns no columns.
    """
    columns = reader.load(schema, table)
    if not columns:
        raise UnknownTable(schema, table)
    catalog = ColumnCatalog.of(schema, table, columns)
    log.info(
        "Catalog loaded",
        extra={
            "table": catalog.qualified_name,
            "columns": len(catalog.columns),
            "primary_key": [c.name for c in catalog.primary_key],
        },
    )
    return catalog


__all__ = [
    "CatalogReader",
    "PostgresCatalogReader",
    "StaticCatalogReader",
    "load_catalog",
]
