"""Cache inspection and maintenance commands."""

from typing import Annotated

import typer
from rich.console import Console

from qas.cli.utils.service import build_quote_cache

console = Console()


def cache_info() -> None:
    """Show where quotes are cached and how long entries live."""
    cache = build_quote_cache()
    stats = cache.stats()

    console.print(f"[bold]Location:[/bold] {stats.cache_path or 'in memory'}")
    console.print(f"[bold]Entries:[/bold] {stats.total_entries}")
    console.print(f"[bold]Batch TTL:[/bold] {stats.batch_ttl_seconds / 60:.0f} min")
    console.print(f"[bold]Aggregate TTL:[/bold] {stats.aggregate_ttl_seconds / 60:.0f} min")
    cache.store.close()


def cache_clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")] = False,
) -> None:
    """Remove every cached batch and aggregate."""
    cache = build_quote_cache()
    if not yes and not typer.confirm("Clear the quote cache?", default=False):
        console.print("[yellow]Cache left untouched[/yellow]")
        raise typer.Exit(0)

    cache.clear_cache()
    cache.store.close()
    console.print("[green]✓ Cache cleared[/green]")
