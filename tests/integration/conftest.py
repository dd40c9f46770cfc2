"""
Shared fixtures for integration tests.

PostgreSQL-backed tests connect to settings.database_url and are skipped
when the database cannot be reached.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from src.adapters.repository.postgres import PostgresDocumentRepository, run_migrations
from src.config.settings import get_settings


@pytest_asyncio.fixture
async def pool() -> AsyncGenerator[AsyncConnectionPool, None]:
    """Connection pool with migrations applied and an empty table."""
    settings = get_settings()
    pool = AsyncConnectionPool(conninfo=settings.database_url, min_size=1, max_size=4, open=False)
    try:
        await pool.open(wait=True, timeout=5)
    except PoolTimeout:
        await pool.close()
        pytest.skip("PostgreSQL not reachable at DATABASE_URL")

    await run_migrations(pool)
    async with pool.connection() as conn:
        await conn.execute("DELETE FROM user_documents")

    yield pool
    await pool.close()


@pytest.fixture
def pg_repository(pool: AsyncConnectionPool) -> PostgresDocumentRepository:
    return PostgresDocumentRepository(pool)
