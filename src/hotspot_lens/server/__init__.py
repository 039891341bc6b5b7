"""HTTP JSON API for Hotspot Lens.

Requires optional ``[serve]`` dependencies::

    pip install hotspot-lens[serve]
"""

from __future__ import annotations

from .app import create_app

__all__ = ["create_app"]
