"""Hotspot engine: fold commit history into ranked per-file risk scores."""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from itertools import islice
from typing import Callable, Iterator, Optional

from ..config import MAX_COMMITS_LIMIT
from ..exceptions import (
    AnalysisCancelledError,
    CommitFetchError,
    InvalidConfigError,
    InvalidTimeWindowError,
    RefNotFoundError,
)
from ..history.base import CommitHistorySource
from ..history.models import CommitRecord, FileChangeRecord, FileStatus
from ..logging_config import get_logger
from .models import FileAggregate, HotspotAnalysis
from .scoring import recency_weight, score_aggregates

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]

_SECONDS_PER_DAY = 86400


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HotspotAnalyzer:
    """Rank a repository's files by change frequency, churn, recency and author spread.

    The analyzer holds no state between calls; every ``analyze`` builds its
    aggregates from scratch. Result caching, if wanted, belongs to the caller.

    Args:
        max_commits: Commits inspected per run, at most 1000. Commits past
            the cap, in source order, are ignored.
        workers: Concurrent ``get_file_changes`` calls. With more than one
            worker, fetches overlap but aggregation still happens on the
            calling thread in source order, so results do not change.
        clock: Returns "now" as an aware datetime; injectable for tests.
    """

    def __init__(
        self,
        max_commits: int = MAX_COMMITS_LIMIT,
        workers: int = 1,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not 1 <= max_commits <= MAX_COMMITS_LIMIT:
            raise InvalidConfigError(
                "max_commits", max_commits, f"must be between 1 and {MAX_COMMITS_LIMIT}"
            )
        if workers < 1:
            raise InvalidConfigError("workers", workers, "must be at least 1")
        self.max_commits = max_commits
        self.workers = workers
        self._clock = clock or _utcnow

    def analyze(
        self,
        source: CommitHistorySource,
        repo: str,
        ref: str,
        time_window: int,
        cancel_event: Optional[threading.Event] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> HotspotAnalysis:
        """Analyze *ref* over the last *time_window* days.

        An unresolvable ref yields an empty result rather than an error.
        A commit whose file changes cannot be fetched is skipped.

        Raises:
            InvalidTimeWindowError: time_window is not a positive int
            AnalysisCancelledError: cancel_event was set mid-run
            HistorySourceError: the source failed as a whole (not found,
                not a repository, authentication, unavailable)
        """
        if isinstance(time_window, bool) or not isinstance(time_window, int) or time_window < 1:
            raise InvalidTimeWindowError(time_window)

        now = self._clock()
        since = now - timedelta(days=time_window)

        source.validate()

        try:
            commits = self._collect_commits(source, ref, since)
        except RefNotFoundError as e:
            logger.info("Ref %r not found in %s, returning empty analysis: %s", ref, repo, e)
            return HotspotAnalysis(repo=repo, ref=ref, time_window=time_window, analyzed_at=now)

        aggregates: dict[str, FileAggregate] = {}
        skipped = 0
        total = len(commits)

        for done, (commit, changes) in enumerate(
            self._iter_changes(source, commits, cancel_event), start=1
        ):
            if changes is None:
                skipped += 1
            else:
                self._fold_commit(aggregates, commit, changes, now)
            if progress is not None:
                progress(done, total)

        files = score_aggregates(aggregates.values())
        logger.info(
            "Analyzed %d commits (%d skipped) in %s@%s over %d days: %d files",
            total - skipped,
            skipped,
            repo,
            ref,
            time_window,
            len(files),
        )
        return HotspotAnalysis(
            repo=repo,
            ref=ref,
            time_window=time_window,
            analyzed_at=now,
            files=tuple(files),
        )

    def _collect_commits(
        self, source: CommitHistorySource, ref: str, since: datetime
    ) -> list[CommitRecord]:
        in_window = (c for c in source.list_commits_since(ref, since) if c.author_date >= since)
        # One extra to learn whether the cap truncated anything
        commits = list(islice(in_window, self.max_commits + 1))
        if len(commits) > self.max_commits:
            logger.debug("Commit cap reached, ignoring commits beyond the first %d", self.max_commits)
            commits = commits[: self.max_commits]
        return commits

    def _fold_commit(
        self,
        aggregates: dict[str, FileAggregate],
        commit: CommitRecord,
        changes: list[FileChangeRecord],
        now: datetime,
    ) -> None:
        days_ago = (now - commit.author_date).total_seconds() / _SECONDS_PER_DAY
        weight = recency_weight(days_ago)
        for change in changes:
            if change.status is FileStatus.DELETED:
                continue
            agg = aggregates.get(change.path)
            if agg is None:
                agg = aggregates[change.path] = FileAggregate(path=change.path)
            agg.record(commit.sha, commit.author_name, commit.author_date, change.churn, weight)

    def _iter_changes(
        self,
        source: CommitHistorySource,
        commits: list[CommitRecord],
        cancel_event: Optional[threading.Event],
    ) -> Iterator[tuple[CommitRecord, Optional[list[FileChangeRecord]]]]:
        """Yield (commit, changes or None) in source order."""
        if self.workers == 1 or len(commits) < 2:
            for done, commit in enumerate(commits):
                _check_cancelled(cancel_event, done, len(commits))
                yield commit, _fetch_changes(source, commit)
            return

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures: list[Future] = [
                executor.submit(_fetch_changes, source, commit) for commit in commits
            ]
            try:
                for done, (commit, future) in enumerate(zip(commits, futures)):
                    _check_cancelled(cancel_event, done, len(commits))
                    yield commit, future.result()
            finally:
                for future in futures:
                    future.cancel()


def _fetch_changes(
    source: CommitHistorySource, commit: CommitRecord
) -> Optional[list[FileChangeRecord]]:
    try:
        return list(source.get_file_changes(commit.sha))
    except CommitFetchError as e:
        logger.warning("Skipping commit %s: %s", commit.sha[:12], e)
        return None


def _check_cancelled(cancel_event: Optional[threading.Event], done: int, total: int) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise AnalysisCancelledError(processed=done, total=total)
