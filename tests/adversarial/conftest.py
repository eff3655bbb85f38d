"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition and timing tests.
Database-backed tests are skipped when PostgreSQL is not reachable.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from verigate.adapters.repository.postgres import PostgresUserRepository, run_migrations
from verigate.config.settings import get_settings


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=3):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    run_migrations(pool)
    with pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()
    yield pool
    pool.close()


@pytest.fixture
def pg_repository(pool: ConnectionPool) -> Generator[PostgresUserRepository, None, None]:
    """Repository on a clean users table."""
    yield PostgresUserRepository(pool)
    with pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()
