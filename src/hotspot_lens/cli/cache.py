"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer

from ..cache import AnalysisCache
from . import app
from ._common import console, resolve_config


@app.command()
def cache_info(
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
):
    """Show cache information and statistics."""
    settings = resolve_config(config)

    with AnalysisCache(
        cache_dir=settings.cache_dir,
        ttl_hours=settings.cache_ttl_hours,
        enabled=settings.cache_enabled,
    ) as cache:
        stats = cache.stats()

    console.print("[bold cyan]Hotspot Lens Cache Info[/bold cyan]")
    console.print()

    if stats.get("enabled"):
        console.print("Status: [green]Enabled[/green]")
        console.print(f"Directory: [blue]{stats.get('directory', 'N/A')}[/blue]")
        console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
        console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")
        console.print(f"TTL: [yellow]{settings.cache_ttl_hours}h[/yellow]")
    else:
        console.print("Status: [red]Disabled[/red]")


@app.command()
def cache_clear(
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
):
    """Clear the analysis cache."""
    settings = resolve_config(config)

    if not settings.cache_enabled:
        console.print("[yellow]Cache is disabled[/yellow]")
        raise typer.Exit(0)

    with AnalysisCache(cache_dir=settings.cache_dir, ttl_hours=settings.cache_ttl_hours) as cache:
        removed = cache.clear()
    console.print(f"[green]Cache cleared[/green] ({removed} entries)")
