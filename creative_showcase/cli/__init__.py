"""
Command Line Interface for Creative Showcase.
"""

import asyncio
from typing import Optional

import typer
import uvicorn
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from sqlalchemy import desc
from sqlalchemy.orm import selectinload

from ..config import get_settings
from ..db.base import drop_database, get_session_local, init_database
from ..db.models import ArtworkModel

app = typer.Typer(help="Creative Showcase - artwork sharing backend")
console = Console()


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, help="Port to run the API server on"),
    host: Optional[str] = typer.Option(None, help="Host to bind the server to"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Start the API server."""
    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    rprint(Panel.fit(f"🎨 Creative Showcase on http://{host}:{port}", style="bold blue"))
    uvicorn.run(
        "creative_showcase.api:app",
        host=host,
        port=port,
        reload=reload,
        workers=1 if reload else settings.api_workers,
    )


@app.command("init-db")
def init_db():
    """Create all database tables."""
    asyncio.run(init_database())
    console.print("✅ Database tables created")


@app.command("drop-db")
def drop_db(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Drop all database tables."""
    if not yes:
        typer.confirm("This deletes every user and artwork. Continue?", abort=True)
    asyncio.run(drop_database())
    console.print("🗑️  Database tables dropped")


@app.command()
def top(limit: int = typer.Option(10, help="Number of artworks to show")):
    """Show the most viewed public artworks."""
    session = get_session_local()()
    try:
        artworks = (
            session.query(ArtworkModel)
            .options(selectinload(ArtworkModel.artist), selectinload(ArtworkModel.likes))
            .filter(ArtworkModel.is_public.is_(True))
            .order_by(desc(ArtworkModel.views), desc(ArtworkModel.created_at))
            .limit(limit)
            .all()
        )
    finally:
        session.close()

    if not artworks:
        console.print("No public artworks yet")
        return

    table = Table(title="Most Viewed Artworks", show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan")
    table.add_column("Artist")
    table.add_column("Category")
    table.add_column("Views", justify="right", style="green")
    table.add_column("Likes", justify="right")

    for artwork in artworks:
        table.add_row(
            artwork.title,
            artwork.artist.username if artwork.artist else "",
            artwork.category,
            str(artwork.views),
            str(len(artwork.likes)),
        )

    console.print(table)


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
