"""Automatic interval discovery: peaks, maximal efforts, climbs and routes."""

from .admission import AUTOMATIC_KINDS, admit_supplied_intervals
from .climbs import ClimbSegmenter
from .efforts import MaximalEffortSearch, find_maximal_efforts
from .engine import IntervalDiscoveryEngine, resolve_capacity_model
from .integration import WorkSeries, integrated_work
from .peaks import BestWindow, PeakEffortSearch, find_best_window
from .routes import Route, RouteMatcher, RouteOccurrence

__all__ = [
    "AUTOMATIC_KINDS",
    "BestWindow",
    "ClimbSegmenter",
    "IntervalDiscoveryEngine",
    "MaximalEffortSearch",
    "PeakEffortSearch",
    "Route",
    "RouteMatcher",
    "RouteOccurrence",
    "WorkSeries",
    "admit_supplied_intervals",
    "find_best_window",
    "find_maximal_efforts",
    "integrated_work",
    "resolve_capacity_model",
]
