"""Commit history backends: the interface and its local-git and GitHub adapters."""

from .base import CommitHistorySource
from .factory import open_source
from .git_source import LocalGitSource
from .github_source import GitHubSource
from .models import CommitRecord, FileChangeRecord, FileStatus

__all__ = [
    "CommitHistorySource",
    "CommitRecord",
    "FileChangeRecord",
    "FileStatus",
    "GitHubSource",
    "LocalGitSource",
    "open_source",
]
