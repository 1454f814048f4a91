"""Central error types used across the package."""

from __future__ import annotations


class ActivityAnalysisError(RuntimeError):
    """Base error for activity analysis failures."""


class SampleSeriesError(ActivityAnalysisError):
    """Raised when a sample series is malformed (e.g. timestamps go backwards)."""


class CapacityModelError(ActivityAnalysisError):
    """Raised when a CP/W' pair is not strictly positive."""


__all__ = [
    "ActivityAnalysisError",
    "SampleSeriesError",
    "CapacityModelError",
]
