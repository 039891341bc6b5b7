"""Commit history source exceptions.

Each error carries a short machine-readable ``kind`` so that outer layers
(CLI exit codes, HTTP status mapping) can tell them apart without
``isinstance`` ladders.
"""

from typing import Optional

from .base import HotspotLensError


class HistorySourceError(HotspotLensError):
    """Base class for failures reported by a commit history source."""

    kind = "source_error"


class RepositoryNotFoundError(HistorySourceError):
    """Raised when the repository (path or hosted repo) does not exist."""

    kind = "not_found"

    def __init__(self, repo: str, reason: str = "repository does not exist"):
        super().__init__(f"Repository not found: {repo}", details={"reason": reason})
        self.repo = repo
        self.reason = reason


class NotAGitRepositoryError(HistorySourceError):
    """Raised when a local directory exists but is not under git control."""

    kind = "not_a_repository"

    def __init__(self, path: str):
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class AuthenticationRequiredError(HistorySourceError):
    """Raised when the hosted provider rejects our credentials."""

    kind = "authentication_required"

    def __init__(self, repo: str, reason: str = "missing or invalid token"):
        super().__init__(f"Authentication required for {repo}", details={"reason": reason})
        self.repo = repo
        self.reason = reason


class SourceUnavailableError(HistorySourceError):
    """Raised when the backend cannot be reached at all (network, git binary, rate limit)."""

    kind = "unavailable"

    def __init__(self, reason: str):
        super().__init__(f"History source unavailable: {reason}")
        self.reason = reason


class RefNotFoundError(HistorySourceError):
    """Raised when a branch, tag or commit cannot be resolved."""

    kind = "ref_not_found"

    def __init__(self, ref: str, repo: Optional[str] = None):
        details = {"repo": repo} if repo else None
        super().__init__(f"Unknown ref: {ref}", details=details)
        self.ref = ref
        self.repo = repo


class CommitFetchError(HistorySourceError):
    """Raised when file-change details for a single commit cannot be fetched."""

    kind = "commit_fetch_failed"

    def __init__(self, sha: str, reason: str):
        super().__init__(f"Failed to fetch changes for commit {sha[:12]}", details={"reason": reason})
        self.sha = sha
        self.reason = reason
