"""Data models for raw commit history consumed by the hotspot engine."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class FileStatus(str, Enum):
    """How a commit touched a file."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    author_name: str  # display name, not a stable identity
    author_date: datetime  # timezone-aware, UTC


@dataclass(frozen=True)
class FileChangeRecord:
    path: str  # repo-relative, as of the owning commit
    status: FileStatus
    additions: int = 0
    deletions: int = 0

    def __post_init__(self) -> None:
        if self.additions < 0 or self.deletions < 0:
            raise ValueError(f"negative line counts for {self.path}")

    @property
    def churn(self) -> int:
        return self.additions + self.deletions
