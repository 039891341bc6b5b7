"""Read commit history from the GitHub REST API."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

import requests

from ..exceptions import (
    AuthenticationRequiredError,
    CommitFetchError,
    RefNotFoundError,
    RepositoryNotFoundError,
    SourceUnavailableError,
)
from ..logging_config import get_logger
from .base import CommitHistorySource
from .models import CommitRecord, FileChangeRecord, FileStatus

logger = get_logger(__name__)

PAGE_SIZE = 100

_REPO_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

_STATUS_MAP = {
    "added": FileStatus.ADDED,
    "copied": FileStatus.ADDED,
    "modified": FileStatus.MODIFIED,
    "changed": FileStatus.MODIFIED,
    "unchanged": FileStatus.MODIFIED,
    "removed": FileStatus.DELETED,
    "renamed": FileStatus.RENAMED,
}


def is_github_repo_name(value: str) -> bool:
    """True if *value* looks like ``owner/name``."""
    return bool(_REPO_RE.match(value))


class GitHubSource(CommitHistorySource):
    """Commit history for a repository hosted on GitHub."""

    kind = "github"

    def __init__(
        self,
        repo: str,
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        if not is_github_repo_name(repo):
            raise RepositoryNotFoundError(repo, "expected an owner/name repository identifier")
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    @property
    def location(self) -> str:
        return self.api_url

    def validate(self) -> None:
        resp = self._request(f"/repos/{self.repo}")
        if resp.status_code == 404:
            raise RepositoryNotFoundError(self.repo, "repository does not exist or is private")
        self._raise_for_access(resp)
        if resp.status_code >= 400:
            raise SourceUnavailableError(f"GitHub returned HTTP {resp.status_code} for {self.repo}")
        if not isinstance(self._json(resp, "repository lookup"), dict):
            raise SourceUnavailableError(f"unexpected repository payload from GitHub for {self.repo}")

    def list_commits_since(self, ref: str, since: datetime) -> Iterator[CommitRecord]:
        since_iso = since.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        page = 1
        while True:
            resp = self._request(
                f"/repos/{self.repo}/commits",
                params={"sha": ref, "since": since_iso, "per_page": PAGE_SIZE, "page": page},
            )
            if resp.status_code in (404, 409, 422):
                # 409 is an empty repository; it has no resolvable refs either
                raise RefNotFoundError(ref, repo=self.repo)
            self._raise_for_access(resp)
            if resp.status_code >= 400:
                raise SourceUnavailableError(
                    f"GitHub returned HTTP {resp.status_code} listing commits for {self.repo}"
                )

            items = self._json(resp, "commit listing")
            if not isinstance(items, list):
                raise SourceUnavailableError(
                    f"unexpected commit listing from GitHub for {self.repo}: "
                    f"{type(items).__name__} instead of a list"
                )
            for item in items:
                record = _commit_from_payload(item)
                if record is not None:
                    yield record

            if len(items) < PAGE_SIZE:
                return
            page += 1

    def get_file_changes(self, sha: str) -> list[FileChangeRecord]:
        """File changes for one commit.

        Rate limiting, rejected credentials and an unreachable API abort
        the whole analysis; anything wrong with this one commit (missing,
        server error, malformed body) raises CommitFetchError.
        """
        url: Optional[str] = f"{self.api_url}/repos/{self.repo}/commits/{sha}"
        changes: list[FileChangeRecord] = []
        while url:
            try:
                resp = self._get(url)
            except requests.RequestException as e:
                raise CommitFetchError(sha, str(e)) from e
            self._raise_for_access(resp)
            if resp.status_code >= 400:
                raise CommitFetchError(sha, f"HTTP {resp.status_code}")

            try:
                payload = resp.json()
                # Large commits spread their file list over several pages
                changes.extend(_change_from_payload(item) for item in payload.get("files") or [])
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                raise CommitFetchError(sha, f"malformed payload: {e!r}") from e

            url = resp.links.get("next", {}).get("url")
        return changes

    def _get(self, url: str, params: Optional[dict[str, Any]] = None) -> requests.Response:
        """GET with transport-level outages mapped to SourceUnavailableError."""
        try:
            return self.session.get(
                url, params=params, headers=self.headers, timeout=self.timeout_seconds
            )
        except requests.Timeout as e:
            raise SourceUnavailableError(
                f"GitHub request timed out after {self.timeout_seconds}s"
            ) from e
        except requests.ConnectionError as e:
            raise SourceUnavailableError(f"cannot reach GitHub at {self.api_url}: {e}") from e

    def _request(self, path: str, params: Optional[dict[str, Any]] = None) -> requests.Response:
        try:
            return self._get(f"{self.api_url}{path}", params=params)
        except requests.RequestException as e:
            raise SourceUnavailableError(f"GitHub request failed: {e}") from e

    def _json(self, resp: requests.Response, what: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise SourceUnavailableError(
                f"invalid JSON from GitHub in {what} for {self.repo} (HTTP {resp.status_code})"
            ) from e

    def _raise_for_access(self, resp: requests.Response) -> None:
        if resp.status_code == 401:
            raise AuthenticationRequiredError(self.repo, "token missing or rejected")
        if resp.status_code == 403:
            if resp.headers.get("X-RateLimit-Remaining") == "0":
                raise SourceUnavailableError("GitHub API rate limit exceeded")
            raise AuthenticationRequiredError(self.repo, "access forbidden")


def _commit_from_payload(item: Any) -> Optional[CommitRecord]:
    if not isinstance(item, dict):
        logger.debug("Skipping non-object commit payload: %r", item)
        return None
    sha = item.get("sha")
    commit = item.get("commit")
    author = commit.get("author") if isinstance(commit, dict) else None
    if not isinstance(author, dict):
        author = {}
    authored = _parse_timestamp(author.get("date"))
    if not isinstance(sha, str) or not sha or authored is None:
        logger.debug("Skipping commit payload without sha/date: %s", sha)
        return None
    return CommitRecord(sha=sha, author_name=author.get("name") or "Unknown", author_date=authored)


def _change_from_payload(item: dict[str, Any]) -> FileChangeRecord:
    return FileChangeRecord(
        path=item["filename"],
        status=_STATUS_MAP.get(item.get("status", ""), FileStatus.MODIFIED),
        additions=int(item.get("additions") or 0),
        deletions=int(item.get("deletions") or 0),
    )


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
