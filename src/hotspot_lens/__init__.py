"""
Hotspot Lens - rank a repository's riskiest files from its commit history

A file is a hotspot when it changes often, churns many lines, was touched
recently and by many people. History comes from a local git clone or the
GitHub REST API.
"""

__version__ = "0.1.0"

from .analysis import HotspotAnalysis, HotspotAnalyzer, HotspotFile
from .api import analyze
from .history import CommitHistorySource

__all__ = [
    "analyze",  # Main entry point
    "HotspotAnalyzer",  # Engine, for custom history sources
    "HotspotAnalysis",
    "HotspotFile",
    "CommitHistorySource",
]
