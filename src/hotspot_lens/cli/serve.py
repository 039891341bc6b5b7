"""``hotspot-lens serve``: JSON API over HTTP."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import HotspotLensError
from ..logging_config import setup_logging
from . import app
from ._common import console, fail, resolve_config


@app.command()
def serve(
    port: int = typer.Option(8765, help="Port to listen on"),
    host: str = typer.Option("127.0.0.1", help="Host to bind to"),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Concurrent fetches per analysis"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also append logs to this file"),
) -> None:
    """Serve hotspot analyses as JSON (GET /api/hotspots)."""
    import uvicorn

    from ..server import create_app

    try:
        settings = resolve_config(config=config, workers=workers, verbose=verbose, log_file=log_file)
    except HotspotLensError as e:
        raise fail(e)
    setup_logging(settings.verbosity, settings.log_file)

    url = f"http://{host}:{port}"
    console.print(f"[bold]Hotspot API[/bold] → [link={url}/api/hotspots]{url}/api/hotspots[/link]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    try:
        uvicorn.run(
            create_app(settings),
            host=host,
            port=port,
            log_level="info" if settings.verbosity == "verbose" else "warning",
        )
    except KeyboardInterrupt:
        pass
    finally:
        console.print("\n[dim]Stopped.[/dim]")
