"""Activity refresh service.

Combines the staleness check with a full rebuild: recompute the metric table
through the injected collaborator, rediscover intervals and rewrite the
activity's staleness record. Discovery itself lives in
``activity_intervals.discovery`` and stays free of I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
import time
from typing import Callable, Dict, Mapping, Sequence

from ..config import COLOR_TAG
from ..models import Activity, MetricTable
from ..discovery import IntervalDiscoveryEngine, Route
from ..staleness import FingerprintEvaluator, LiveConfig, compute_fingerprint

MetricProvider = Callable[[Activity], Mapping[str, float]]


def _existing_metrics(activity: Activity) -> Mapping[str, float]:
    return activity.metrics


@dataclass(slots=True)
class RefreshServiceConfig:
    live: LiveConfig = field(default_factory=LiveConfig)
    metrics: MetricProvider = _existing_metrics
    routes: Sequence[Route] = ()
    engine: IntervalDiscoveryEngine | None = None
    clock: Callable[[], float] = time.time
    logger: logging.Logger | None = None


class ActivityRefreshService:
    def __init__(self, config: RefreshServiceConfig | None = None):
        self.config = config or RefreshServiceConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)
        self._engine = self.config.engine or IntervalDiscoveryEngine()
        self._evaluator = FingerprintEvaluator(self.config.live, logger=self._log)

    def is_stale(self, activity: Activity) -> bool:
        return self._evaluator.is_stale(activity)

    def refresh_if_stale(self, activity: Activity) -> bool:
        """Refresh ``activity`` when its record is stale; return whether it ran."""

        if not self.is_stale(activity):
            return False
        return self.refresh(activity)

    def refresh(self, activity: Activity) -> bool:
        """Rebuild metrics and intervals, then rewrite the staleness record.

        The previous interval collection is always discarded. When the metric
        collaborator fails the activity is left without samples or intervals
        and marked clean so it is not retried on every check.
        """

        live = self.config.live
        record = activity.record
        activity.intervals = []
        try:
            computed = self.config.metrics(activity)
        except Exception as exc:
            self._log.warning(
                "Metric computation failed for activity=%s: %s",
                activity.activity_id,
                exc,
                exc_info=True,
            )
            record.stale = False
            record.has_samples = False
            record.interval_count = 0
            return False

        activity.metrics = clean_metrics(computed)
        record.weight = live.weight_for(activity)
        activity.intervals = self._engine.discover(
            activity,
            zones=live.zones,
            routes=self.config.routes,
        )

        record.stale = False
        record.fingerprint = compute_fingerprint(activity, live.zones)
        record.schema_version = live.schema_version
        record.content_timestamp = self.config.clock()
        record.metadata_checksum = live.metadata_checksum(activity.tags)
        if live.color_for is not None:
            record.color = live.color_for(activity.tag(COLOR_TAG))
        record.has_samples = not activity.series.is_empty
        record.interval_count = len(activity.intervals)
        self._log.info(
            "Refreshed activity=%s intervals=%d",
            activity.activity_id,
            record.interval_count,
        )
        return True


def clean_metrics(computed: Mapping[str, float]) -> MetricTable:
    """Copy a metric table replacing non-numeric and non-finite values with 0."""

    cleaned: Dict[str, float] = {}
    for name, value in computed.items():
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = 0.0
        if math.isinf(number) or math.isnan(number):
            number = 0.0
        cleaned[name] = number
    return cleaned


__all__ = ["ActivityRefreshService", "RefreshServiceConfig", "clean_metrics"]
