"""Build the ordered set of derived intervals for one activity."""

from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, List

from ..config import CP_OVERRIDE_TAG, LOG_DISCOVERED_INTERVALS
from ..models import Activity, CapacityModel, DerivedInterval, IntervalKind, RawInterval
from ..zones import ZoneConfig
from .admission import AUTOMATIC_KINDS, admit_supplied_intervals
from .climbs import ClimbSegmenter
from .efforts import MaximalEffortSearch
from .integration import integrated_work
from .peaks import PeakEffortSearch, peak_power_applies
from .routes import Route, RouteMatcher

ENTIRE_ACTIVITY_NAME = "Entire Activity"


def resolve_capacity_model(activity: Activity, zones: ZoneConfig) -> CapacityModel:
    """CP/W' for the activity date, with any metadata CP override applied."""

    model = zones.power.capacity_model(activity.start_time.date())
    override = _coerce_int(activity.tag(CP_OVERRIDE_TAG, "0"))
    if override > 0:
        model = model.with_cp(float(override))
    return model


class IntervalDiscoveryEngine:
    """Stateless orchestrator for interval discovery.

    Every call to :meth:`discover` builds a fresh collection; nothing is kept
    between calls, so one engine may serve any number of activities.
    """

    def __init__(
        self,
        *,
        peak_search: PeakEffortSearch | None = None,
        effort_search: MaximalEffortSearch | None = None,
        climb_segmenter: ClimbSegmenter | None = None,
        automatic_kinds: AbstractSet[IntervalKind] = AUTOMATIC_KINDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.peak_search = peak_search or PeakEffortSearch()
        self.effort_search = effort_search or MaximalEffortSearch()
        self.climb_segmenter = climb_segmenter or ClimbSegmenter()
        self.automatic_kinds = frozenset(automatic_kinds)
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def discover(
        self,
        activity: Activity,
        *,
        zones: ZoneConfig | None = None,
        routes: Iterable[Route] = (),
    ) -> List[DerivedInterval]:
        """Return the ordered interval collection for ``activity``.

        An empty series yields no intervals. A single-sample series still
        yields the "Entire Activity" interval, with ``start == stop``.
        """

        series = activity.series
        if series.is_empty:
            return []
        if zones is None:
            zones = ZoneConfig()
        model = resolve_capacity_model(activity, zones)
        begin, end = series.first.time, series.last.time

        candidates: List[RawInterval] = admit_supplied_intervals(
            activity.supplied_intervals,
            (begin, end),
            series.recording_interval,
            self.automatic_kinds,
        )
        if peak_power_applies(activity):
            with integrated_work(series) as work:
                candidates.extend(self.peak_search.search(work))
                candidates.extend(self.effort_search.search(work, model))
        candidates.extend(self.climb_segmenter.search(series))
        candidates.extend(RouteMatcher(routes).search(activity.start_time))

        intervals = [
            DerivedInterval(
                name=ENTIRE_ACTIVITY_NAME,
                start=begin,
                stop=end,
                start_distance=series.distance_at(begin),
                stop_distance=series.distance_at(end),
                sequence=0,
                kind=IntervalKind.ALL,
                metrics=dict(activity.metrics),
                activity_id=activity.activity_id,
            )
        ]
        for candidate in candidates:
            intervals.append(
                DerivedInterval(
                    name=candidate.name,
                    start=candidate.start,
                    stop=candidate.stop,
                    start_distance=series.distance_at(candidate.start),
                    stop_distance=series.distance_at(candidate.stop),
                    sequence=len(intervals),
                    kind=candidate.kind,
                    activity_id=activity.activity_id,
                )
            )
        self._log.debug(
            "Discovered %d intervals for activity %s (cp=%s wprime=%s)",
            len(intervals),
            activity.activity_id,
            model.cp,
            model.wprime,
        )
        if LOG_DISCOVERED_INTERVALS:
            for interval in intervals:
                self._log.debug(
                    "  #%d %s %s [%s, %s]",
                    interval.sequence,
                    interval.kind.value,
                    interval.name,
                    interval.start,
                    interval.stop,
                )
        return intervals


def _coerce_int(value: object) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


__all__ = [
    "ENTIRE_ACTIVITY_NAME",
    "IntervalDiscoveryEngine",
    "resolve_capacity_model",
]
