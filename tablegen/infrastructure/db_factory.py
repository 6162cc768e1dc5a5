"""
Database connection factory utilities for tablegen.

Provides DSN composition from settings, connection acquisition with retry for
transient failures (tenacity), and per-session statement timeouts. Only
connecting is retried: generated statements are never re-issued.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Optional

import psycopg
from psycopg import Connection, sql
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from tablegen.config import Settings, get_settings
from tablegen.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Parameters
    ----------
    dsn : str, optional
        Connection string override. Defaults to the DSN built from settings.

    Returns
    -------
    Connection
        A new psycopg connection (autocommit off; callers commit explicitly).

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


@contextmanager
def sync_connection(dsn: Optional[str] = None) -> Generator[Connection, None, None]:
    """
    Context manager yielding a connection that is closed on exit.

    Example
    -------
        with sync_connection() as conn:
            generate("public", "t1s", insert_count=10, connection=conn)
    """
    conn = get_sync_connection(dsn)
    try:
        yield conn
    finally:
        conn.close()


def apply_statement_timeout(cursor: psycopg.Cursor, timeout_ms: int) -> None:
    """Set ``statement_timeout`` for the session; 0 leaves the server default."""
    if timeout_ms <= 0:
        return
    cursor.execute(sql.SQL("SET statement_timeout = {}").format(sql.Literal(f"{int(timeout_ms)}ms")))
    log.debug("Statement timeout applied", extra={"timeout_ms": timeout_ms})


__all__ = [
    "build_dsn",
    "get_sync_connection",
    "sync_connection",
    "apply_statement_timeout",
]
