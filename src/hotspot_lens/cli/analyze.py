"""``hotspot-lens analyze``: rank a repository's files."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from ..analysis.ranking import sort_files
from ..api import analyze as run_analysis
from ..exceptions import HotspotLensError
from ..logging_config import setup_logging
from . import app
from ._common import console, err_console, fail, resolve_config
from ._display import build_hotspot_table, summary_line


def _progress_bar(enabled: bool = True) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(bar_width=40, complete_style="cyan", finished_style="green"),
        TaskProgressColumn(),
        console=err_console,
        transient=True,
        disable=not enabled,
    )


@app.command()
def analyze(
    repo: str = typer.Argument(..., help="Local repository path or GitHub owner/name"),
    ref: Optional[str] = typer.Option(None, "--ref", "-r", help="Branch, tag or commit"),
    window: Optional[int] = typer.Option(
        None, "--window", "-w", min=1, help="Lookback window in days (7, 30, 90, 365 ...)"
    ),
    sort: str = typer.Option("score", "--sort", help="Order by score, changes or churn"),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Rows to show in the table"),
    json_output: bool = typer.Option(False, "--json", help="Output the full result as JSON"),
    source: str = typer.Option("auto", "--source", help="auto, local or github"),
    workers: Optional[int] = typer.Option(
        None, "--workers", min=1, help="Concurrent commit-detail fetches"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore and do not write the cache"),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also append logs to this file"),
):
    """
    Rank files by hotspot score over a lookback window.

    [bold cyan]Examples:[/bold cyan]

      hotspot-lens analyze .

      hotspot-lens analyze octocat/Hello-World --ref main --window 90

      hotspot-lens analyze ~/src/app --json > hotspots.json
    """
    if source not in ("auto", "local", "github"):
        raise typer.BadParameter("must be auto, local or github", param_hint="--source")
    if sort not in ("score", "changes", "churn"):
        raise typer.BadParameter("must be score, changes or churn", param_hint="--sort")

    try:
        settings = resolve_config(
            config, workers=workers, no_cache=no_cache, verbose=verbose, quiet=quiet, log_file=log_file
        )
        setup_logging(settings.verbosity, settings.log_file)
        # Keep stdout/stderr clean for piped JSON
        with _progress_bar(enabled=not (json_output or settings.verbosity == "quiet")) as progress:
            task = progress.add_task("Reading history", total=None)

            def on_progress(done: int, total: int) -> None:
                progress.update(task, completed=done, total=total, description="Analyzing commits")

            result = run_analysis(
                repo,
                ref=ref,
                time_window=window,
                source_type=source,
                config=settings,
                progress=on_progress,
            )
    except HotspotLensError as e:
        raise fail(e)

    if json_output:
        print(json.dumps(result.to_dict(), indent=2))
        return

    console.print()
    console.print(summary_line(result))
    if result.files:
        files = sort_files(result.files, by=sort)[:limit]
        console.print(build_hotspot_table(files, now=result.analyzed_at))
        if len(result.files) > limit:
            console.print(f"[dim]… {len(result.files) - limit} more, use --limit to show them[/dim]")
    console.print()
