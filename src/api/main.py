"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from psycopg_pool import AsyncConnectionPool

from src.adapters.repository.postgres import PostgresDocumentRepository, run_migrations
from src.adapters.smtp import build_email_sender
from src.api.dependencies import get_pool
from src.api.errors import register_exception_handlers
from src.api.rate_limit import InMemoryRateLimiter
from src.api.v1 import router as v1_router
from src.config.settings import get_settings
from src.domain.ledger import CodeLedger
from src.domain.verification import VerificationService

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Document delivery API v1 - Request a code, then redeem it for the stored PDF",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Builds the process-wide ledger, mail sender and verification service
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    pool = AsyncConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=False,
    )
    await pool.open()

    try:
        logger.info("Running database migrations...")
        await run_migrations(pool)

        app.state.pool = pool
        app.state.rate_limiter = InMemoryRateLimiter(
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
        app.state.trust_proxy_headers = settings.trust_proxy_headers
        app.state.verification_service = VerificationService(
            ledger=CodeLedger(),
            repository=PostgresDocumentRepository(pool),
            email_sender=build_email_sender(settings),
        )
        logger.info("Email backend: %s", settings.email_backend)

        logger.info("Application startup complete")

        yield
    finally:
        logger.info("Shutting down application...")
        await pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="docmailer",
    description="Email a one-time code, then email the stored PDF once the code is confirmed",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)

register_exception_handlers(app)

# Include v1 API routes
app.include_router(v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check(pool: AsyncConnectionPool = Depends(get_pool)) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    async with pool.connection() as conn:
        await conn.execute("SELECT 1")

    return {"status": "healthy"}


# Serve the frontend if one is deployed next to the app. Mounted last so
# API routes take precedence.
static_dir = Path(get_settings().static_dir)
if static_dir.is_dir():
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
