"""Turn per-file aggregates into ranked hotspot scores.

The score is a fixed weighted blend of four signals, each in [0, 1]:

    change frequency  40%   changes / max changes across files
    churn             30%   lines added+deleted / max churn across files
    recency           20%   mean step-function weight of each touch
    author spread     10%   distinct authors / 5, saturating at 1

scaled to 0..100 and rounded to two decimals. The weights are part of the
output contract and are not configurable.
"""

from __future__ import annotations

from typing import Iterable

from .models import FileAggregate, HotspotFile

SCORE_WEIGHTS = {
    "change": 0.4,
    "churn": 0.3,
    "recency": 0.2,
    "authors": 0.1,
}

# (max days ago, weight); anything older gets RECENCY_FLOOR
RECENCY_STEPS = (
    (7, 1.0),
    (14, 0.8),
    (30, 0.6),
    (90, 0.4),
)
RECENCY_FLOOR = 0.2

AUTHOR_SATURATION = 5


def recency_weight(days_ago: float) -> float:
    """Coarse step weight for a touch *days_ago* days in the past.

    Future-dated commits (clock skew) count as most recent.
    """
    for max_days, weight in RECENCY_STEPS:
        if days_ago <= max_days:
            return weight
    return RECENCY_FLOOR


def compute_hotspot_score(
    norm_change: float, norm_churn: float, recency: float, norm_authors: float
) -> float:
    raw = (
        norm_change * SCORE_WEIGHTS["change"]
        + norm_churn * SCORE_WEIGHTS["churn"]
        + recency * SCORE_WEIGHTS["recency"]
        + norm_authors * SCORE_WEIGHTS["authors"]
    )
    return round(raw * 100, 2)


def score_aggregates(aggregates: Iterable[FileAggregate]) -> list[HotspotFile]:
    """Normalize, score and rank aggregates.

    Ties on score are broken by path so repeated runs are reproducible.
    """
    aggregates = list(aggregates)
    if not aggregates:
        return []

    max_changes = max(a.change_count for a in aggregates)
    max_churn = max(a.churn for a in aggregates)

    files = []
    for agg in aggregates:
        norm_change = agg.change_count / max_changes if max_changes > 0 else 0.0
        norm_churn = agg.churn / max_churn if max_churn > 0 else 0.0
        norm_authors = min(agg.author_count / AUTHOR_SATURATION, 1.0)
        recency = agg.recency_score

        files.append(
            HotspotFile(
                path=agg.path,
                change_count=agg.change_count,
                churn=agg.churn,
                author_count=agg.author_count,
                recency_score=recency,
                hotspot_score=compute_hotspot_score(norm_change, norm_churn, recency, norm_authors),
                last_modified=agg.last_modified,
                commits=tuple(agg.commit_shas),
            )
        )

    files.sort(key=lambda f: (-f.hotspot_score, f.path))
    return files
