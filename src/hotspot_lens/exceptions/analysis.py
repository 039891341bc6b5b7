"""Analysis-related exceptions: invalid input, cancellation."""

from typing import Any

from .base import HotspotLensError


class AnalysisError(HotspotLensError):
    """Base class for analysis-related errors."""

    kind = "analysis_error"


class InvalidTimeWindowError(AnalysisError):
    """Raised when the lookback window is not a positive number of days."""

    kind = "invalid_time_window"

    def __init__(self, value: Any):
        super().__init__(
            f"Invalid time window: {value!r}",
            details={"reason": "time window must be a positive integer number of days"},
        )
        self.value = value


class AnalysisCancelledError(AnalysisError):
    """Raised when a caller cancels a running analysis."""

    kind = "cancelled"

    def __init__(self, processed: int, total: int):
        super().__init__(
            "Analysis cancelled",
            details={"processed": str(processed), "total": str(total)},
        )
        self.processed = processed
        self.total = total
