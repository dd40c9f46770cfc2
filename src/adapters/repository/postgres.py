"""
PostgreSQL repository adapter - Implements DocumentRepository protocol.

This module provides the PostgreSQL implementation of the domain's
document store port using psycopg3 with raw SQL over an async pool.

Emails are stored already normalized; the table enforces lowercase keys
so a non-normalized write fails loudly instead of creating a second row.
"""

import logging
from pathlib import Path

from psycopg_pool import AsyncConnectionPool

from src.domain.ports import UserRecord

logger = logging.getLogger(__name__)


class PostgresDocumentRepository:
    """
    Implements DocumentRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 AsyncConnectionPool for database connections
        """
        self._pool = pool

    async def get_by_email(self, email: str) -> UserRecord | None:
        """
        Fetch the stored document for an email.

        Args:
            email: Normalized email address

        Returns:
            UserRecord, or None if no row exists
        """
        sql = """
            SELECT email, filename, mime_type, content
            FROM user_documents
            WHERE email = %s
        """

        async with self._pool.connection() as conn:
            cursor = await conn.execute(sql, (email,))
            row = await cursor.fetchone()

        if row is None:
            return None

        content = row[3]
        return UserRecord(
            email=row[0],
            filename=row[1],
            mime_type=row[2],
            content=bytes(content) if content is not None else None,
        )

    async def upsert_by_email(
        self, email: str, filename: str, mime_type: str, content: bytes
    ) -> None:
        """
        Insert or replace the document for an email.

        Uses INSERT ... ON CONFLICT DO UPDATE so there is never more than
        one row per email.

        Args:
            email: Normalized email address
            filename: Attachment filename
            mime_type: Attachment content type
            content: Raw document bytes
        """
        sql = """
            INSERT INTO user_documents (email, filename, mime_type, content)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (email) DO UPDATE
            SET filename = EXCLUDED.filename,
                mime_type = EXCLUDED.mime_type,
                content = EXCLUDED.content,
                updated_at = NOW()
        """

        async with self._pool.connection() as conn:
            await conn.execute(sql, (email, filename, mime_type, content))
        logger.info("Stored %s (%d bytes) for %s", filename, len(content), email)


async def run_migrations(pool: AsyncConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 AsyncConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            async with pool.connection() as conn:
                await conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
