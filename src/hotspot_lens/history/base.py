"""The interface every commit history backend implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable

from .models import CommitRecord, FileChangeRecord


class CommitHistorySource(ABC):
    """Supplies commits and per-commit file statistics to the engine.

    Implementations translate backend failures into the typed errors from
    ``hotspot_lens.exceptions``:

    - ``RefNotFoundError`` from ``list_commits_since`` when the ref cannot be
      resolved (the engine turns this into an empty result).
    - ``CommitFetchError`` from ``get_file_changes`` when one commit's details
      are unavailable (the engine skips that commit).
    - Anything else (``RepositoryNotFoundError``, ``AuthenticationRequiredError``,
      ``SourceUnavailableError`` ...) aborts the analysis.
    """

    #: Short backend name, used in cache keys and log lines
    kind: str = "unknown"

    @property
    def location(self) -> str:
        """Where the history lives (checkout path, API host); part of the cache key."""
        return ""

    def validate(self) -> None:
        """Fail fast if the repository cannot be reached. Default: no check."""

    @abstractmethod
    def list_commits_since(self, ref: str, since: datetime) -> Iterable[CommitRecord]:
        """Yield commits reachable from *ref* authored at or after *since*.

        May be a lazy generator; callers stop iterating once they have
        enough commits, and must be able to call this again on retry.
        """

    @abstractmethod
    def get_file_changes(self, sha: str) -> list[FileChangeRecord]:
        """Return the per-file change statistics for one commit."""
