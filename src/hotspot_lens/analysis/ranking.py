"""Lookups and alternative orderings over a finished analysis."""

from __future__ import annotations

from typing import Iterable, Literal, Optional

from .models import HotspotAnalysis, HotspotFile

SortKey = Literal["score", "changes", "churn"]

_SORT_FIELDS = {
    "score": "hotspot_score",
    "changes": "change_count",
    "churn": "churn",
}

# (minimum score, band), highest first
SCORE_BANDS = (
    (70.0, "high"),
    (50.0, "elevated"),
    (30.0, "moderate"),
)


def get_file_hotspot(analysis: HotspotAnalysis, path: str) -> Optional[HotspotFile]:
    """Return the entry for *path*, or None if it was not touched in the window."""
    for f in analysis.files:
        if f.path == path:
            return f
    return None


def sort_files(files: Iterable[HotspotFile], by: SortKey = "score") -> list[HotspotFile]:
    """Order files descending by *by*, path ascending on ties."""
    try:
        attr = _SORT_FIELDS[by]
    except KeyError:
        raise ValueError(f"Unknown sort key {by!r}; expected one of {', '.join(_SORT_FIELDS)}")
    return sorted(files, key=lambda f: (-getattr(f, attr), f.path))


def score_band(score: float) -> str:
    for minimum, band in SCORE_BANDS:
        if score >= minimum:
            return band
    return "low"


def summarize(analysis: HotspotAnalysis) -> dict[str, int | float | str]:
    """Band counts plus the top-ranked file.

    Returns dict with:
    - total_files: number of ranked files
    - high / elevated / moderate / low: files per band
    - top_path, top_score: the #1 file ("" and 0.0 when empty)
    """
    summary: dict[str, int | float | str] = {
        "total_files": len(analysis.files),
        "high": 0,
        "elevated": 0,
        "moderate": 0,
        "low": 0,
        "top_path": "",
        "top_score": 0.0,
    }
    for f in analysis.files:
        band = score_band(f.hotspot_score)
        summary[band] = int(summary[band]) + 1
    if analysis.files:
        top = analysis.files[0]
        summary["top_path"] = top.path
        summary["top_score"] = top.hotspot_score
    return summary
