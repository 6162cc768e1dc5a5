"""
Infrastructure package for tablegen.

Centralizes database connectivity and catalog access. Keep this layer focused
on I/O, decoupled from the planner.
"""

from tablegen.infrastructure.catalog import (
    CatalogReader,
    PostgresCatalogReader,
    StaticCatalogReader,
    load_catalog,
)
from tablegen.infrastructure.db_factory import (
    apply_statement_timeout,
    build_dsn,
    get_sync_connection,
    sync_connection,
)

__all__ = [
    "CatalogReader",
    "PostgresCatalogReader",
    "StaticCatalogReader",
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_connection",
    "load_catalog",
    "sync_connection",
]
