"""
Pytest configuration for tablegen.

Provides fixtures for:
- In-memory column catalogs shared by the unit tests
- A recording fake of a psycopg connection/cursor
- Database connection management and demo schema for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Generator, List, Optional

import psycopg
import pytest

from tablegen.config import Settings
from tablegen.domain.models import ColumnCatalog, ColumnDescriptor


def _make_column(
    name: str,
    position: int,
    type_name: str,
    length: Optional[int] = None,
    scale: Optional[int] = None,
    is_primary_key: bool = False,
) -> ColumnDescriptor:
    return ColumnDescriptor(
        name=name,
        position=position,
        type_name=type_name,
        length=length,
        scale=scale,
        is_primary_key=is_primary_key,
    )


@pytest.fixture
def make_column():
    """Factory for column descriptors with keyword defaults."""
    return _make_column


@pytest.fixture
def t1s_columns() -> List[ColumnDescriptor]:
    """T1S(A INTEGER PK, B NVARCHAR(5), C DATE, D TIMESTAMP)."""
    return [
        _make_column("A", 1, "INTEGER", is_primary_key=True),
        _make_column("B", 2, "NVARCHAR", length=5),
        _make_column("C", 3, "DATE"),
        _make_column("D", 4, "TIMESTAMP"),
    ]


@pytest.fixture
def t1s_catalog(t1s_columns: List[ColumnDescriptor]) -> ColumnCatalog:
    return ColumnCatalog.of("TEST", "T1S", t1s_columns)


@pytest.fixture
def wide_catalog() -> ColumnCatalog:
    """One column of every supported category, key not in first position."""
    return ColumnCatalog.of(
        "TEST",
        "WIDE",
        [
            _make_column("label", 2, "VARCHAR", length=40),
            _make_column("id", 1, "BIGINT", is_primary_key=True),
            _make_column("note", 3, "TEXT"),
            _make_column("qty", 4, "SMALLINT"),
            _make_column("score", 5, "INTEGER"),
            _make_column("amount", 6, "DECIMAL", scale=2),
            _make_column("ratio", 7, "DOUBLE"),
            _make_column("seen_at", 8, "SECONDDATE"),
        ],
    )


class FakeCursor:
    """Records executed statements; optionally fails on the N-th execute."""

    def __init__(self, connection: "FakeConnection") -> None:
        self._connection = connection
        self.rowcount = -1
        self._result: Optional[tuple] = None

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, statement: Any, params: Any = None) -> None:
        conn = self._connection
        conn.executed.append(statement)
        conn.events.append(("execute", statement))
        if conn.fail_on is not None and len(conn.executed) == conn.fail_on:
            raise psycopg.errors.QueryCanceled("canceling statement due to user request")
        self.rowcount = conn.rowcounts.pop(0) if conn.rowcounts else -1
        self._result = conn.fetch_result

    def executemany(self, statement: Any, params_seq: Any) -> None:
        params = list(params_seq)
        self._connection.events.append(("executemany", statement, len(params)))

    def fetchone(self) -> Optional[tuple]:
        return self._result


class FakeConnection:
    def __init__(
        self,
        rowcounts: Optional[List[int]] = None,
        fail_on: Optional[int] = None,
        fetch_result: Optional[tuple] = (0,),
    ) -> None:
        self.executed: List[Any] = []
        self.events: List[tuple] = []
        self.rowcounts = list(rowcounts or [])
        self.fail_on = fail_on
        self.fetch_result = fetch_result
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.commits += 1
        self.events.append(("commit",))

    def rollback(self) -> None:
        self.rollbacks += 1
        self.events.append(("rollback",))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_connection_factory():
    """Build a FakeConnection with scripted rowcounts or a failing statement."""
    return FakeConnection


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "tablegen"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the demo tables from ``db/init.sql`` exist.
    """
    init_sql_path = Path(__file__).parent.parent / "db" / "init.sql"
    with db_connection.cursor() as cur:
        cur.execute(init_sql_path.read_text(encoding="utf-8"))
    db_connection.commit()
    return True


@pytest.fixture(scope="function")
def clean_t1s(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty the T1S table before and after each test function.
    """
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.t1s;")
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.t1s;")
    db_connection.commit()
