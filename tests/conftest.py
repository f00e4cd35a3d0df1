"""
Pytest configuration for the squid log daemon.

Provides fixtures for:
- Fake psycopg connections that record executed statements (unit tests)
- Settings with test-specific overrides
- A real PostgreSQL access_log table for integration tests
"""

from __future__ import annotations

import os
from typing import Any, Dict, Generator, List, Optional, Tuple

import psycopg
import pytest

from squid_log_daemon.config import Settings

ACCESS_LOG_DDL = """
CREATE TABLE {table} (
    id                   BIGSERIAL PRIMARY KEY,
    time_since_epoch     NUMERIC(15,3),
    response_time        INTEGER,
    client_src_ip_addr   VARCHAR(45),
    squid_request_status VARCHAR(30),
    http_status_code     VARCHAR(10),
    reply_size           INTEGER,
    request_method       VARCHAR(20),
    request_url          VARCHAR(1000),
    username             VARCHAR(20),
    squid_hier_status    VARCHAR(30),
    server_ip_addr       VARCHAR(45),
    mime_type            VARCHAR(50)
);
"""

SAMPLE_VALUES: Tuple[str, ...] = (
    "1700000000.123",
    "42",
    "10.0.0.1",
    "TCP_MISS",
    "200",
    "5120",
    "GET",
    "http://example.com/index.html",
    "-",
    "DIRECT",
    "192.0.2.10",
    "text/html",
)


def append_line(values: Tuple[str, ...] = SAMPLE_VALUES) -> str:
    """Render an `L` protocol line the way the proxy writes it."""
    return "L" + " ".join(values)


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, query: Any, params: Optional[Tuple[Any, ...]] = None) -> None:
        text = query if isinstance(query, str) else repr(query)
        self._conn.executed.append((text, params))
        for marker, exc in self._conn.failures.items():
            if marker in text:
                raise exc
        if "SQL('EXECUTE " in text:
            self._conn.rows.append(text)

    def fetchall(self) -> List[Tuple[Any, ...]]:
        return []


class FakeConnection:
    """
    Stand-in for a psycopg Connection.

    `failures` maps a substring of the statement's repr to the exception the
    statement raises, e.g. {"PREPARE": psycopg.errors.SyntaxError("boom")}.
    """

    def __init__(self, failures: Optional[Dict[str, Exception]] = None) -> None:
        self.failures: Dict[str, Exception] = failures or {}
        self.executed: List[Tuple[str, Any]] = []
        self.rows: List[str] = []
        self.closed = False
        self.close_calls = 0

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


@pytest.fixture
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def make_connection():
    """Factory for fake connections with scripted failures."""
    return FakeConnection


@pytest.fixture
def sample_values() -> Tuple[str, ...]:
    return SAMPLE_VALUES


@pytest.fixture(name="append_line")
def append_line_fixture():
    return append_line


@pytest.fixture
def unit_settings() -> Settings:
    return Settings(_env_file=None, log_level="DEBUG", db_statement_timeout_ms=0)


@pytest.fixture
def patch_connect(monkeypatch):
    """
    Route AccessLogStore.open() to a given fake connection.

    Returns a function taking the fake; the resolved configs seen by the
    factory are collected in the returned list.
    """
    seen: List[Any] = []

    def _install(conn: FakeConnection) -> List[Any]:
        def fake_get_sync_connection(config, settings=None):
            del settings
            seen.append(config)
            return conn

        monkeypatch.setattr(
            "squid_log_daemon.infrastructure.access_log_store.get_sync_connection",
            fake_get_sync_connection,
        )
        return seen

    return _install


# Integration fixtures


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        _env_file=None,
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_connect_timeout=5,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_target() -> Dict[str, str]:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "database": os.getenv("DB_NAME", "squid_log"),
        "user": os.getenv("DB_USER", "postgres"),
        "password": os.getenv("DB_PASSWORD", "postgres"),
    }


@pytest.fixture(scope="session")
def test_dsn(test_target: Dict[str, str], test_settings: Settings) -> str:
    """
    Database connection string for fixtures that talk to the database directly.
    """
    return (
        f"postgresql://{test_target['user']}:{test_target['password']}"
        f"@{test_target['host']}:{test_settings.db_port}/{test_target['database']}"
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
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def access_log_table(db_connection: psycopg.Connection) -> Generator[str, None, None]:
    """
    Create a fresh access_log table for one test and drop it afterwards.
    """
    table = "access_log_test"
    with db_connection.cursor() as cur:
        cur.execute(f"DROP TABLE IF EXISTS {table};")
        cur.execute(ACCESS_LOG_DDL.format(table=table))
    yield table
    with db_connection.cursor() as cur:
        cur.execute(f"DROP TABLE IF EXISTS {table};")


@pytest.fixture(scope="function")
def config_string(test_target: Dict[str, str], access_log_table: str) -> str:
    """The daemon's command-line argument pointing at the test table."""
    return (
        f"/{test_target['host']}/{test_target['database']}/{access_log_table}"
        f"/{test_target['user']}/{test_target['password']}"
    )
