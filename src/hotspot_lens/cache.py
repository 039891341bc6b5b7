"""
Result cache for Hotspot Lens.

Uses diskcache for SQLite-based persistent caching of finished analyses.
The engine itself never caches; callers (api, CLI, server) opt in here.
"""

import hashlib
import json
from typing import Any, Optional

from diskcache import Cache

from .analysis.models import HotspotAnalysis
from .logging_config import get_logger

logger = get_logger(__name__)


class AnalysisCache:
    """
    Disk cache of serialized HotspotAnalysis results.

    Features:
    - Keys derived from (source kind, repo, ref, window, commit cap)
    - TTL-based expiration, since "last N days" drifts with the clock
    - Thread-safe operations
    """

    def __init__(self, cache_dir: str = ".hotspot-cache", ttl_hours: int = 1, enabled: bool = True):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache storage
            ttl_hours: Time-to-live in hours
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.ttl_seconds = ttl_hours * 3600

        if self.enabled:
            self.cache: Optional[Cache] = Cache(cache_dir)
            logger.debug(f"Cache initialized at {cache_dir} with TTL={ttl_hours}h")
        else:
            self.cache = None
            logger.debug("Cache disabled")

    @staticmethod
    def make_key(
        source_kind: str,
        repo: str,
        ref: str,
        time_window: int,
        max_commits: int,
        location: str = "",
    ) -> str:
        """Stable key for one analysis request.

        *location* separates histories that share a repo name, such as the
        same owner/name on github.com and on a GitHub Enterprise host.
        """
        key_data = json.dumps(
            {
                "source": source_kind,
                "location": location,
                "repo": repo,
                "ref": ref,
                "window": time_window,
                "max_commits": max_commits,
            },
            sort_keys=True,
        )
        return hashlib.sha256(key_data.encode()).hexdigest()

    def get(self, key: str) -> Optional[HotspotAnalysis]:
        """
        Get a cached analysis.

        Returns:
            Cached analysis or None if not found/expired/unreadable
        """
        if not self.enabled or self.cache is None:
            return None

        try:
            value = self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache get failed: {e}")
            return None

        if value is None:
            return None
        try:
            analysis = HotspotAnalysis.from_dict(value)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable cache entry {key[:16]}: {e}")
            self.cache.delete(key)
            return None
        logger.debug(f"Cache hit: {key[:16]}...")
        return analysis

    def set(self, key: str, analysis: HotspotAnalysis) -> None:
        """Store an analysis under *key*."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.set(key, analysis.to_dict(), expire=self.ttl_seconds)
            logger.debug(f"Cache set: {key[:16]}...")
        except Exception as e:
            logger.warning(f"Cache set failed: {e}")

    def clear(self) -> int:
        """Clear all cache entries. Returns the number removed."""
        if not self.enabled or self.cache is None:
            return 0

        try:
            removed = self.cache.clear()
            logger.info("Cache cleared")
            return removed
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")
            return 0

    def stats(self) -> dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        if not self.enabled or self.cache is None:
            return {"enabled": False}

        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self.cache is not None:
            self.cache.close()

    def __enter__(self) -> "AnalysisCache":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
