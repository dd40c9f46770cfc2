"""Unit tests for application startup and shutdown."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from src.api.main import lifespan
from src.api.rate_limit import InMemoryRateLimiter
from src.config.settings import get_settings


@pytest.fixture
def pool() -> MagicMock:
    pool = MagicMock()
    pool.open = AsyncMock()
    pool.close = AsyncMock()
    return pool


class TestLifespan:
    """Tests for the lifespan context manager."""

    @pytest.mark.asyncio
    async def test_startup_and_shutdown(self, pool: MagicMock) -> None:
        app = FastAPI()
        with (
            patch("src.api.main.AsyncConnectionPool", return_value=pool),
            patch("src.api.main.run_migrations", new=AsyncMock()) as migrations,
        ):
            async with lifespan(app):
                assert app.state.pool is pool
                assert isinstance(app.state.rate_limiter, InMemoryRateLimiter)
                assert app.state.trust_proxy_headers is get_settings().trust_proxy_headers
                pool.close.assert_not_awaited()

        migrations.assert_awaited_once_with(pool)
        pool.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_pool_closed_when_migrations_fail(self, pool: MagicMock) -> None:
        app = FastAPI()
        with (
            patch("src.api.main.AsyncConnectionPool", return_value=pool),
            patch("src.api.main.run_migrations", new=AsyncMock(side_effect=RuntimeError("bad sql"))),
        ):
            with pytest.raises(RuntimeError, match="bad sql"):
                async with lifespan(app):
                    pytest.fail("startup should not complete")

        pool.open.assert_awaited_once()
        pool.close.assert_awaited_once()
