"""Read commit history from a local clone via the git CLI."""

from __future__ import annotations

import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from ..exceptions import (
    CommitFetchError,
    NotAGitRepositoryError,
    RefNotFoundError,
    RepositoryNotFoundError,
    SourceUnavailableError,
)
from ..logging_config import get_logger
from .base import CommitHistorySource
from .models import CommitRecord, FileChangeRecord, FileStatus

logger = get_logger(__name__)

# Unit separator: cannot appear in author names or hashes
_FIELD_SEP = "\x1f"
_LOG_FORMAT = "%H%x1f%an%x1f%aI"

_STATUS_LETTERS = {
    "A": FileStatus.ADDED,
    "C": FileStatus.ADDED,
    "M": FileStatus.MODIFIED,
    "T": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
}


class LocalGitSource(CommitHistorySource):
    """Commit history from a working copy on disk."""

    kind = "local"

    def __init__(self, repo_path: str, timeout_seconds: int = 30):
        self.repo_path = str(Path(repo_path).expanduser().resolve())
        self.timeout_seconds = timeout_seconds

    @property
    def location(self) -> str:
        return self.repo_path

    def validate(self) -> None:
        if not Path(self.repo_path).is_dir():
            raise RepositoryNotFoundError(self.repo_path, "path does not exist or is not a directory")
        try:
            result = self._run(["rev-parse", "--git-dir"])
        except subprocess.TimeoutExpired as e:
            raise SourceUnavailableError(f"git timed out after {e.timeout}s") from e
        if result.returncode != 0:
            raise NotAGitRepositoryError(self.repo_path)

    def list_commits_since(self, ref: str, since: datetime) -> Iterator[CommitRecord]:
        self._resolve_ref(ref)

        result = self._run_checked(
            [
                "log",
                ref,
                f"--since={since.astimezone(timezone.utc).isoformat()}",
                f"--format={_LOG_FORMAT}",
                "--",
            ],
            what="git log",
        )
        yield from parse_log(result.stdout)

    def get_file_changes(self, sha: str) -> list[FileChangeRecord]:
        base = ["diff-tree", "-r", "-z", "-M", "--root", "--no-commit-id"]
        try:
            statuses = self._run(base + ["--name-status", sha])
            numstat = self._run(base + ["--numstat", sha])
        except subprocess.TimeoutExpired as e:
            raise CommitFetchError(sha, f"git diff-tree timed out after {e.timeout}s") from e

        for result in (statuses, numstat):
            if result.returncode != 0:
                raise CommitFetchError(sha, result.stderr.strip() or "git diff-tree failed")

        counts = parse_numstat(numstat.stdout)
        changes = []
        for status, path in parse_name_status(statuses.stdout):
            additions, deletions = counts.get(path, (0, 0))
            changes.append(
                FileChangeRecord(path=path, status=status, additions=additions, deletions=deletions)
            )
        return changes

    def _resolve_ref(self, ref: str) -> None:
        result = self._run_checked(
            ["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
            what="git rev-parse",
            allow_failure=True,
        )
        if result.returncode != 0:
            raise RefNotFoundError(ref, repo=self.repo_path)

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                ["git", "-C", self.repo_path, *args],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as e:
            raise SourceUnavailableError("git executable not found") from e

    def _run_checked(
        self, args: list[str], what: str, allow_failure: bool = False
    ) -> subprocess.CompletedProcess:
        try:
            result = self._run(args)
        except subprocess.TimeoutExpired as e:
            raise SourceUnavailableError(f"{what} timed out after {e.timeout}s") from e
        if result.returncode != 0 and not allow_failure:
            logger.warning("%s failed: %s", what, result.stderr.strip())
            raise SourceUnavailableError(f"{what} failed: {result.stderr.strip()}")
        return result


def parse_log(raw: str) -> Iterator[CommitRecord]:
    """Parse ``git log --format=%H%x1f%an%x1f%aI`` output."""
    for line in raw.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = line.split(_FIELD_SEP)
        if len(parts) != 3:
            logger.debug("Skipping unparseable log line: %r", line)
            continue
        sha, author, date = parts
        authored = _parse_git_date(date)
        if authored is None:
            logger.debug("Skipping commit %s with bad date %r", sha, date)
            continue
        yield CommitRecord(sha=sha, author_name=author or "Unknown", author_date=authored)


def parse_name_status(raw: str) -> list[tuple[FileStatus, str]]:
    """Parse ``git diff-tree -z --name-status`` output.

    Renames and copies carry two paths (old, new); the new path is kept.
    """
    tokens = raw.split("\0")
    entries = []
    i = 0
    while i < len(tokens):
        code = tokens[i].strip()
        if not code:
            i += 1
            continue
        letter = code[0]
        if letter in ("R", "C"):
            if i + 2 >= len(tokens):
                break
            path = tokens[i + 2]
            i += 3
        else:
            if i + 1 >= len(tokens):
                break
            path = tokens[i + 1]
            i += 2
        entries.append((_STATUS_LETTERS.get(letter, FileStatus.MODIFIED), path))
    return entries


def parse_numstat(raw: str) -> dict[str, tuple[int, int]]:
    """Parse ``git diff-tree -z --numstat`` output into path -> (added, deleted).

    Binary files report ``-`` and count as zero lines.
    """
    tokens = raw.split("\0")
    counts: dict[str, tuple[int, int]] = {}
    i = 0
    while i < len(tokens):
        token = tokens[i].lstrip("\n")
        if not token:
            i += 1
            continue
        fields = token.split("\t", 2)
        if len(fields) != 3:
            i += 1
            continue
        added, deleted, path = fields
        if path:
            i += 1
        else:
            # rename: "added\tdeleted\t\0old\0new"
            if i + 2 >= len(tokens):
                break
            path = tokens[i + 2]
            i += 3
        counts[path] = (_to_int(added), _to_int(deleted))
    return counts


def _to_int(value: str) -> int:
    return int(value) if value.isdigit() else 0


def _parse_git_date(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
