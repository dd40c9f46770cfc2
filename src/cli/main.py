"""CLI commands using Typer."""

import asyncio
from pathlib import Path

import typer
from psycopg_pool import AsyncConnectionPool
from rich.console import Console

from src.adapters.repository.postgres import PostgresDocumentRepository, run_migrations
from src.config.settings import get_settings
from src.domain.exceptions import ValidationError
from src.domain.ports import DEFAULT_MIME_TYPE
from src.domain.verification import normalize_email, validate_email_address

console = Console()
app = typer.Typer(name="docmailer", help="docmailer CLI")


@app.command()
def seed(
    email: str = typer.Argument(..., help="Address the document belongs to"),
    pdf_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Document to store"
    ),
    mime_type: str = typer.Option(DEFAULT_MIME_TYPE, "--mime-type", help="Stored content type"),
):
    """Store (or replace) the document sent to an email address."""
    try:
        validate_email_address(email)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    normalized_email = normalize_email(email)
    path = pdf_path.resolve()
    content = path.read_bytes()

    async def _seed():
        settings = get_settings()
        pool = AsyncConnectionPool(conninfo=settings.database_url, min_size=1, max_size=1, open=False)
        await pool.open()
        try:
            await run_migrations(pool)
            repository = PostgresDocumentRepository(pool)
            await repository.upsert_by_email(normalized_email, path.name, mime_type, content)
        finally:
            await pool.close()

    asyncio.run(_seed())
    console.print(f"[green]Seeded PDF for {normalized_email}:[/green] {path}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind to"),
    port: int = typer.Option(3000, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
