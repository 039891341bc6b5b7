"""Rich rendering of hotspot results."""

from __future__ import annotations

from datetime import datetime, timezone

from rich.table import Table

from ..analysis.models import HotspotAnalysis, HotspotFile
from ..analysis.ranking import score_band, summarize

BAND_STYLES = {
    "high": "bold red",
    "elevated": "dark_orange",
    "moderate": "yellow",
    "low": "dim",
}


def format_age(moment: datetime, now: datetime | None = None) -> str:
    """Short relative age: 'today', '3d ago', '5w ago', '2y ago'."""
    now = now or datetime.now(timezone.utc)
    days = int((now - moment).total_seconds() // 86400)
    if days <= 0:
        return "today"
    if days < 14:
        return f"{days}d ago"
    if days < 365:
        return f"{days // 7}w ago"
    return f"{days // 365}y ago"


def format_score(score: float) -> str:
    style = BAND_STYLES[score_band(score)]
    return f"[{style}]{score:6.2f}[/{style}]"


def build_hotspot_table(files: list[HotspotFile], now: datetime | None = None) -> Table:
    table = Table(show_lines=False, pad_edge=True)
    table.add_column("#", style="bold", justify="right")
    table.add_column("File", style="cyan", overflow="fold")
    table.add_column("Score", justify="right")
    table.add_column("Changes", justify="right")
    table.add_column("Churn", justify="right")
    table.add_column("Authors", justify="right")
    table.add_column("Recency", justify="right")
    table.add_column("Last change", style="green")

    for rank, f in enumerate(files, start=1):
        table.add_row(
            str(rank),
            f.path,
            format_score(f.hotspot_score),
            str(f.change_count),
            f"{f.churn:,}",
            str(f.author_count),
            f"{f.recency_score:.2f}",
            format_age(f.last_modified, now),
        )
    return table


def summary_line(analysis: HotspotAnalysis) -> str:
    s = summarize(analysis)
    if not s["total_files"]:
        return (
            f"[yellow]No hotspots found[/yellow] in {analysis.repo}@{analysis.ref} "
            f"over the last {analysis.time_window} days"
        )
    return (
        f"[bold]{s['total_files']}[/bold] files changed in the last "
        f"[bold]{analysis.time_window}[/bold] days of {analysis.repo}@{analysis.ref}: "
        f"[red]{s['high']}[/red] high, [dark_orange]{s['elevated']}[/dark_orange] elevated, "
        f"[yellow]{s['moderate']}[/yellow] moderate"
    )
