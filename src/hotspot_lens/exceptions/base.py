"""Root of the Hotspot Lens error hierarchy."""

from typing import Any, Dict, Optional


class HotspotLensError(Exception):
    """Base exception for all Hotspot Lens errors.

    ``kind`` is a stable snake_case identifier that callers switch on (CLI
    output, HTTP error bodies); ``details`` holds the structured context that
    ``str()`` appends in parentheses.
    """

    kind = "error"

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready error body: ``kind`` under ``error``, plus message and details."""
        body: Dict[str, Any] = {"error": self.kind, "message": str(self)}
        if self.details:
            body["details"] = dict(self.details)
        return body
