"""Public API for Hotspot Lens.

Users should call analyze() instead of wiring sources, caches and the
engine together by hand.

Example:
    >>> from hotspot_lens import analyze
    >>>
    >>> # Local clone, default ref and 30-day window
    >>> result = analyze("/path/to/repo")
    >>>
    >>> # GitHub repository, last 90 days of main
    >>> result = analyze("octocat/Hello-World", ref="main", time_window=90)
    >>> result.to_dict()["files"][0]["hotspotScore"]
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from .analysis.engine import HotspotAnalyzer, ProgressCallback
from .analysis.models import HotspotAnalysis
from .cache import AnalysisCache
from .config import HotspotConfig, load_config
from .history.factory import SourceType, open_source
from .logging_config import get_logger

logger = get_logger(__name__)


def analyze(
    repo: str,
    ref: Optional[str] = None,
    time_window: Optional[int] = None,
    *,
    source_type: SourceType = "auto",
    config: Optional[HotspotConfig] = None,
    config_file: Optional[Path] = None,
    use_cache: Optional[bool] = None,
    cancel_event: Optional[threading.Event] = None,
    progress: Optional[ProgressCallback] = None,
    **overrides,
) -> HotspotAnalysis:
    """Rank the files of *repo* by hotspot score.

    1. Load configuration (auto-discover TOML + env + overrides), unless
       a ready ``config`` is passed
    2. Pick a history source (local clone or GitHub) for *repo*
    3. Return a cached result if one is fresh
    4. Otherwise run the engine and cache its result

    Args:
        repo: Local path or ``owner/name``; echoed back as ``result.repo``
        ref: Branch, tag or commit (default: config.default_ref)
        time_window: Lookback in days (default: config.default_time_window)
        source_type: ``auto``, ``local`` or ``github``
        config: Pre-built configuration; skips load_config
        config_file: Optional explicit config file path
        use_cache: Force the result cache on/off (default: config.cache_enabled)
        cancel_event: Set from another thread to abort the run
        progress: Called with (commits done, commits total)
        **overrides: Configuration overrides (e.g., workers=4)

    Raises:
        ConfigurationError: If configuration is invalid
        InvalidTimeWindowError: If time_window is not a positive int
        HistorySourceError: If the repository cannot be read at all
        AnalysisCancelledError: If cancel_event was set
    """
    if config is None:
        config = load_config(config_file=config_file, **overrides)

    ref = ref or config.default_ref
    if time_window is None:
        time_window = config.default_time_window

    source = open_source(repo, config, source_type=source_type)
    logger.info(f"Analyzing {repo}@{ref} over {time_window} days via {source.kind} source")

    cache_enabled = config.cache_enabled if use_cache is None else use_cache
    with AnalysisCache(
        cache_dir=config.cache_dir, ttl_hours=config.cache_ttl_hours, enabled=cache_enabled
    ) as cache:
        key = AnalysisCache.make_key(
            source.kind, repo, ref, time_window, config.max_commits, location=source.location
        )
        cached = cache.get(key)
        if cached is not None:
            logger.info(f"Using cached analysis from {cached.analyzed_at.isoformat()}")
            return cached

        analyzer = HotspotAnalyzer(max_commits=config.max_commits, workers=config.workers)
        result = analyzer.analyze(
            source,
            repo=repo,
            ref=ref,
            time_window=time_window,
            cancel_event=cancel_event,
            progress=progress,
        )
        cache.set(key, result)

    logger.info(f"Analysis complete: {len(result.files)} files ranked")
    return result
