"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import HotspotConfig, load_config
from ..exceptions import AuthenticationRequiredError, HotspotLensError

console = Console()
err_console = Console(stderr=True)

EXIT_ERROR = 1
EXIT_AUTH = 2


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    no_cache: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
) -> HotspotConfig:
    """Build configuration from CLI options."""
    overrides: dict = {"verbose": verbose, "quiet": quiet}
    if log_file is not None:
        overrides["log_file"] = str(log_file)
    if workers is not None:
        overrides["workers"] = workers
    if no_cache:
        overrides["cache_enabled"] = False
    return load_config(config_file=config, **overrides)


def fail(error: HotspotLensError) -> typer.Exit:
    """Print a typed error and build the matching exit."""
    err_console.print(f"[red]Error ({error.kind}):[/red] {error}")
    if isinstance(error, AuthenticationRequiredError):
        err_console.print(
            "[dim]Set GITHUB_TOKEN or HOTSPOT_GITHUB_TOKEN to a token with repo read access.[/dim]"
        )
        return typer.Exit(EXIT_AUTH)
    return typer.Exit(EXIT_ERROR)
