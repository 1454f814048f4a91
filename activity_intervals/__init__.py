"""Activity interval analysis package."""

from .discovery import IntervalDiscoveryEngine, Route, RouteOccurrence
from .errors import ActivityAnalysisError, CapacityModelError, SampleSeriesError
from .models import (
    Activity,
    CapacityModel,
    DerivedInterval,
    IntervalKind,
    RawInterval,
    Sample,
    SampleSeries,
    StalenessRecord,
)
from .staleness import FingerprintEvaluator, LiveConfig
from .zones import ZoneConfig, ZoneRange, ZoneTable

__all__ = [
    "Activity",
    "ActivityAnalysisError",
    "CapacityModel",
    "CapacityModelError",
    "DerivedInterval",
    "FingerprintEvaluator",
    "IntervalDiscoveryEngine",
    "IntervalKind",
    "LiveConfig",
    "RawInterval",
    "Route",
    "RouteOccurrence",
    "Sample",
    "SampleSeries",
    "SampleSeriesError",
    "StalenessRecord",
    "ZoneConfig",
    "ZoneRange",
    "ZoneTable",
]
