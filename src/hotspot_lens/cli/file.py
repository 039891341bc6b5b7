"""``hotspot-lens file``: hotspot details for a single path."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..analysis.ranking import get_file_hotspot, score_band
from ..api import analyze as run_analysis
from ..exceptions import HotspotLensError
from ..logging_config import setup_logging
from . import app
from ._common import console, fail, resolve_config
from ._display import format_age, format_score


@app.command()
def file(
    repo: str = typer.Argument(..., help="Local repository path or GitHub owner/name"),
    path: str = typer.Argument(..., help="Repository-relative file path"),
    ref: Optional[str] = typer.Option(None, "--ref", "-r", help="Branch, tag or commit"),
    window: Optional[int] = typer.Option(None, "--window", "-w", min=1, help="Lookback in days"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    source: str = typer.Option("auto", "--source", help="auto, local or github"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore and do not write the cache"),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also append logs to this file"),
):
    """Show where one file ranks among the repository's hotspots."""
    if source not in ("auto", "local", "github"):
        raise typer.BadParameter("must be auto, local or github", param_hint="--source")

    try:
        settings = resolve_config(config, no_cache=no_cache, verbose=verbose, log_file=log_file)
        setup_logging(settings.verbosity, settings.log_file)
        result = run_analysis(repo, ref=ref, time_window=window, source_type=source, config=settings)
    except HotspotLensError as e:
        raise fail(e)

    hotspot = get_file_hotspot(result, path)
    if hotspot is None:
        if json_output:
            print(json.dumps(None))
        else:
            console.print(
                f"[yellow]{path}[/yellow] was not changed in the last {result.time_window} days"
            )
        raise typer.Exit(0)

    if json_output:
        print(json.dumps(hotspot.to_dict(), indent=2))
        return

    rank = [f.path for f in result.files].index(path) + 1
    console.print()
    console.print(f"[bold cyan]{hotspot.path}[/bold cyan]  rank {rank} of {len(result.files)}")
    console.print(f"  Score       {format_score(hotspot.hotspot_score)}  ({score_band(hotspot.hotspot_score)})")
    console.print(f"  Changes     {hotspot.change_count}")
    console.print(f"  Churn       {hotspot.churn:,} lines")
    console.print(f"  Authors     {hotspot.author_count}")
    console.print(f"  Recency     {hotspot.recency_score:.2f}")
    console.print(f"  Last change {format_age(hotspot.last_modified, result.analyzed_at)}")
    console.print(f"  Commits     {', '.join(sha[:8] for sha in hotspot.commits[:10])}")
    console.print()
