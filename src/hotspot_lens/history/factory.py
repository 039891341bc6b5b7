"""Pick the right history backend for a repository identifier."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from ..config import HotspotConfig
from ..exceptions import RepositoryNotFoundError
from .base import CommitHistorySource
from .git_source import LocalGitSource
from .github_source import GitHubSource, is_github_repo_name

SourceType = Literal["auto", "local", "github"]


def open_source(
    repo: str, config: HotspotConfig, source_type: SourceType = "auto"
) -> CommitHistorySource:
    """Build a CommitHistorySource for *repo*.

    ``auto`` prefers an existing local directory, then falls back to
    treating ``owner/name`` as a GitHub repository.
    """
    if source_type == "auto":
        if Path(repo).expanduser().is_dir():
            source_type = "local"
        elif is_github_repo_name(repo):
            source_type = "github"
        else:
            raise RepositoryNotFoundError(
                repo, "not a local directory and not an owner/name GitHub repository"
            )

    if source_type == "local":
        return LocalGitSource(repo, timeout_seconds=config.git_timeout_seconds)
    if source_type == "github":
        return GitHubSource(
            repo,
            token=config.github_token,
            api_url=config.github_api_url,
            timeout_seconds=config.request_timeout_seconds,
        )
    raise ValueError(f"Unknown source type: {source_type}")
