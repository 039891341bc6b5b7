"""Exception hierarchy for Hotspot Lens."""

from .analysis import AnalysisCancelledError, AnalysisError, InvalidTimeWindowError
from .base import HotspotLensError
from .config import ConfigurationError, InvalidConfigError
from .source import (
    AuthenticationRequiredError,
    CommitFetchError,
    HistorySourceError,
    NotAGitRepositoryError,
    RefNotFoundError,
    RepositoryNotFoundError,
    SourceUnavailableError,
)

__all__ = [
    "HotspotLensError",
    "AnalysisError",
    "InvalidTimeWindowError",
    "AnalysisCancelledError",
    "ConfigurationError",
    "InvalidConfigError",
    "HistorySourceError",
    "RepositoryNotFoundError",
    "NotAGitRepositoryError",
    "AuthenticationRequiredError",
    "SourceUnavailableError",
    "RefNotFoundError",
    "CommitFetchError",
]
