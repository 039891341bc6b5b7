"""Shared test fixtures for Hotspot Lens."""

import logging
import os
import threading
from datetime import datetime, timedelta, timezone

import pytest

from hotspot_lens.exceptions import CommitFetchError, RefNotFoundError
from hotspot_lens.history.base import CommitHistorySource
from hotspot_lens.history.models import CommitRecord, FileChangeRecord, FileStatus

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeHistorySource(CommitHistorySource):
    """In-memory history with knobs for failure injection."""

    kind = "fake"

    def __init__(
        self,
        commits,
        changes,
        failing=(),
        missing_refs=(),
        validate_error=None,
        honor_since=True,
    ):
        self.commits = list(commits)
        self.changes = dict(changes)
        # sha -> exception to raise; None means a plain CommitFetchError
        self.failing = dict(failing) if isinstance(failing, dict) else dict.fromkeys(failing)
        self.missing_refs = set(missing_refs)
        self.validate_error = validate_error
        self.honor_since = honor_since
        self.fetched = []
        self.list_calls = []
        self._lock = threading.Lock()

    def validate(self):
        if self.validate_error is not None:
            raise self.validate_error

    def list_commits_since(self, ref, since):
        self.list_calls.append((ref, since))
        if ref in self.missing_refs:
            raise RefNotFoundError(ref)
        if not self.honor_since:
            return list(self.commits)
        return [c for c in self.commits if c.author_date >= since]

    def get_file_changes(self, sha):
        with self._lock:
            self.fetched.append(sha)
        if sha in self.failing:
            error = self.failing[sha]
            raise error if error is not None else CommitFetchError(sha, "simulated failure")
        return list(self.changes.get(sha, []))


def _make_commit(sha, days_ago, author="alice", now=NOW):
    return CommitRecord(sha=sha, author_name=author, author_date=now - timedelta(days=days_ago))


def _make_change(path, additions=0, deletions=0, status=FileStatus.MODIFIED):
    return FileChangeRecord(path=path, status=status, additions=additions, deletions=deletions)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user config, env vars and cache directories out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    for key in list(os.environ):
        if key.startswith("HOTSPOT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handlers and levels a CLI command installed on the package logger."""
    logger = logging.getLogger("hotspot_lens")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def make_commit():
    return _make_commit


@pytest.fixture
def make_change():
    return _make_change


@pytest.fixture
def fake_source():
    """Factory for FakeHistorySource."""
    return FakeHistorySource


@pytest.fixture
def example_source():
    """Three commits: two inside a 30-day window on foo.ts, one older on bar.ts."""
    commits = [
        _make_commit("a" * 40, 3, "alice"),
        _make_commit("b" * 40, 10, "bob"),
        _make_commit("c" * 40, 40, "alice"),
    ]
    changes = {
        "a" * 40: [_make_change("foo.ts", 10, 2)],
        "b" * 40: [_make_change("foo.ts", 5, 5)],
        "c" * 40: [_make_change("bar.ts", 100, 100)],
    }
    return FakeHistorySource(commits, changes)


@pytest.fixture
def live_source():
    """Same history as example_source, dated against the real clock."""
    now = datetime.now(timezone.utc)
    commits = [
        _make_commit("a" * 40, 3, "alice", now=now),
        _make_commit("b" * 40, 10, "bob", now=now),
        _make_commit("c" * 40, 40, "alice", now=now),
    ]
    changes = {
        "a" * 40: [_make_change("foo.ts", 10, 2)],
        "b" * 40: [_make_change("foo.ts", 5, 5)],
        "c" * 40: [_make_change("bar.ts", 100, 100)],
    }
    return FakeHistorySource(commits, changes)


@pytest.fixture
def patch_open_source(monkeypatch):
    """Route hotspot_lens.api.open_source() to a given source; returns the recorded calls."""
    import hotspot_lens.api as api_module

    calls = []

    def install(source):
        def fake_open_source(repo, config, source_type="auto"):
            calls.append((repo, config, source_type))
            return source

        monkeypatch.setattr(api_module, "open_source", fake_open_source)
        return calls

    return install
