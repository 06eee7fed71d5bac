"""
Catalog CLI.

Command-line interface for common maintenance operations.

Usage:
    catalog db-init
    catalog db-seed --category Sneakers --brand Adidas
    catalog images-prune --dry-run
"""

import sys

import typer
from rich.console import Console
from rich.table import Table

from catalog_shared.config.settings import settings

app = typer.Typer(
    name="catalog",
    help="Product catalog maintenance CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create database tables that do not exist yet."""
    from catalog_api.models import Base
    from catalog_shared.infrastructure.db import engine

    console.print(f"[blue]Creating tables on: {engine.url.render_as_string(hide_password=True)}[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Tables created/verified[/green]")


@app.command()
def db_seed(
    category: list[str] = typer.Option(None, "--category", "-c", help="Category name (repeatable)"),
    brand: list[str] = typer.Option(None, "--brand", "-b", help="Brand name (repeatable)"),
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed categories and brands. Without options a default set is used."""
    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    from catalog_api.seed import seed
    from catalog_shared.infrastructure.db import get_db_context

    try:
        with get_db_context() as db:
            created = seed(db, categories=category or None, brands=brand or None)
    except Exception as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Seed Results")
    table.add_column("Kind", style="cyan")
    table.add_column("Created", style="green")
    for kind, count in created.items():
        table.add_row(kind, str(count))
    console.print(table)


# =============================================================================
# Image Commands
# =============================================================================

@app.command()
def images_prune(
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show what would be deleted"),
):
    """Delete image files that no product color refers to."""
    import asyncio

    from catalog_api.repositories import get_product_repository
    from catalog_api.services.media import get_image_store
    from catalog_shared.infrastructure.db import get_db_context

    store = get_image_store()
    with get_db_context() as db:
        referenced = get_product_repository(db).referenced_images()
    orphans = sorted(store.filenames() - referenced)

    if not orphans:
        console.print("[green]✓ No orphaned images[/green]")
        return

    table = Table(title=f"Orphaned images in {store.directory}")
    table.add_column("Filename", style="cyan")
    for name in orphans[:50]:  # Show first 50
        table.add_row(name)
    if len(orphans) > 50:
        table.add_row(f"... and {len(orphans) - 50} more")
    console.print(table)

    if dry_run:
        console.print(f"[yellow]Would delete {len(orphans)} images (dry run)[/yellow]")
        return

    removed = asyncio.run(store.remove_many(orphans))
    console.print(f"[green]✓ Deleted {removed} images[/green]")


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option(
        f"http://localhost:{settings.rest_api_port}/api/health", help="Health endpoint URL"
    ),
):
    """Check REST API health."""
    import time

    import httpx

    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    try:
        start = time.time()
        response = httpx.get(url, timeout=5.0)
        elapsed = (time.time() - start) * 1000
        if response.status_code == 200:
            table.add_row("REST API", "✓ Healthy", f"{elapsed:.0f}ms")
        else:
            table.add_row("REST API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    except httpx.HTTPError as e:
        table.add_row("REST API", f"✗ {type(e).__name__}", "-")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from importlib.metadata import PackageNotFoundError, version as dist_version

    try:
        api_version = dist_version("catalog-api")
    except PackageNotFoundError:
        api_version = "unknown"

    table = Table(title="Catalog Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")
    table.add_row("API", api_version)
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
