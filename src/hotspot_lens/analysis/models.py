"""Data models for hotspot analysis results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

# Commit SHAs remembered per file, first-seen order
MAX_COMMIT_SHAS = 50


@dataclass
class FileAggregate:
    """Running totals for one path while commits are folded in."""

    path: str
    change_count: int = 0
    churn: int = 0
    authors: set[str] = field(default_factory=set)
    commit_shas: list[str] = field(default_factory=list)
    last_modified: Optional[datetime] = None
    recency_weights: list[float] = field(default_factory=list)

    def record(
        self, sha: str, author: str, authored_at: datetime, churn: int, recency_weight: float
    ) -> None:
        self.change_count += 1
        self.churn += churn
        self.authors.add(author)
        if len(self.commit_shas) < MAX_COMMIT_SHAS:
            self.commit_shas.append(sha)
        self.recency_weights.append(recency_weight)
        if self.last_modified is None or authored_at > self.last_modified:
            self.last_modified = authored_at

    @property
    def author_count(self) -> int:
        return len(self.authors)

    @property
    def recency_score(self) -> float:
        if not self.recency_weights:
            return 0.0
        return sum(self.recency_weights) / len(self.recency_weights)


@dataclass(frozen=True)
class HotspotFile:
    path: str
    change_count: int
    churn: int
    author_count: int
    recency_score: float  # 0..1
    hotspot_score: float  # 0..100, 2 decimals
    last_modified: datetime
    commits: tuple[str, ...]  # at most MAX_COMMIT_SHAS

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "changeCount": self.change_count,
            "churn": self.churn,
            "recencyScore": self.recency_score,
            "authorCount": self.author_count,
            "hotspotScore": self.hotspot_score,
            "lastModified": format_timestamp(self.last_modified),
            "commits": list(self.commits),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HotspotFile:
        return cls(
            path=data["path"],
            change_count=int(data["changeCount"]),
            churn=int(data["churn"]),
            author_count=int(data["authorCount"]),
            recency_score=float(data["recencyScore"]),
            hotspot_score=float(data["hotspotScore"]),
            last_modified=parse_timestamp(data["lastModified"]),
            commits=tuple(data.get("commits", ())),
        )


@dataclass(frozen=True)
class HotspotAnalysis:
    """Result envelope: ranked files plus the parameters that produced them."""

    repo: str
    ref: str
    time_window: int  # days
    analyzed_at: datetime
    files: tuple[HotspotFile, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.files

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form, field names as the UI expects them."""
        return {
            "repo": self.repo,
            "ref": self.ref,
            "timeWindow": self.time_window,
            "analyzedAt": format_timestamp(self.analyzed_at),
            "files": [f.to_dict() for f in self.files],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HotspotAnalysis:
        return cls(
            repo=data["repo"],
            ref=data["ref"],
            time_window=int(data["timeWindow"]),
            analyzed_at=parse_timestamp(data["analyzedAt"]),
            files=tuple(HotspotFile.from_dict(f) for f in data.get("files", [])),
        )


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with a trailing ``Z``."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
