"""Hotspot analysis: aggregation, scoring and ranking over commit history."""

from .engine import HotspotAnalyzer
from .models import MAX_COMMIT_SHAS, FileAggregate, HotspotAnalysis, HotspotFile
from .ranking import get_file_hotspot, score_band, sort_files, summarize
from .scoring import compute_hotspot_score, recency_weight, score_aggregates

__all__ = [
    "HotspotAnalyzer",
    "HotspotAnalysis",
    "HotspotFile",
    "FileAggregate",
    "MAX_COMMIT_SHAS",
    "compute_hotspot_score",
    "recency_weight",
    "score_aggregates",
    "get_file_hotspot",
    "score_band",
    "sort_files",
    "summarize",
]
