"""Climb detection from noisy altitude and distance samples."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from ..config import (
    CLIMB_DESCENT_FRACTION,
    CLIMB_FLAT_GRADIENT_M_PER_KM,
    CLIMB_MILESTONE_COUNT,
    CLIMB_MILESTONE_SPACING_KM,
    CLIMB_THRESHOLDS,
)
from ..models import IntervalKind, RawInterval, Sample, SampleSeries

_LOG = logging.getLogger(__name__)


def _km(sample: Sample) -> float:
    return sample.distance / 1000.0


def _gradient(first: Sample, second: Sample) -> float:
    """Metres gained per km between two samples."""

    rise = second.altitude - first.altitude
    run = _km(second) - _km(first)
    if run == 0:
        return math.copysign(math.inf, rise) if rise else math.nan
    return rise / run


class ClimbSegmenter:
    """Split an activity into candidate climbs and keep the significant ones.

    A candidate runs from the lowest altitude seen since the last cut to the
    highest altitude after it. The candidate is closed when the altitude drops
    back by more than ``descent_fraction`` of its span, when the last
    ``milestone_count`` milestones (spaced ``milestone_spacing_km`` apart) are
    all flatter than ``flat_gradient``, or at the end of the activity.
    """

    def __init__(
        self,
        *,
        milestone_spacing_km: float = CLIMB_MILESTONE_SPACING_KM,
        milestone_count: int = CLIMB_MILESTONE_COUNT,
        flat_gradient: float = CLIMB_FLAT_GRADIENT_M_PER_KM,
        descent_fraction: float = CLIMB_DESCENT_FRACTION,
        thresholds: Sequence[Tuple[float, float]] = CLIMB_THRESHOLDS,
    ) -> None:
        self.milestone_spacing_km = milestone_spacing_km
        self.milestone_count = milestone_count
        self.flat_gradient = flat_gradient
        self.descent_fraction = descent_fraction
        self.thresholds = tuple(thresholds)

    def search(self, series: SampleSeries) -> List[RawInterval]:
        climbs: List[RawInterval] = []
        samples = series.samples
        last_index = len(samples) - 1
        start: Optional[Sample] = None
        peak: Optional[Sample] = None
        milestones: List[Sample] = []

        for index, sample in enumerate(samples):
            point = sample
            flat = False
            if (
                not milestones
                or _km(point) - _km(milestones[-1]) > self.milestone_spacing_km
            ):
                milestones.append(point)
                if len(milestones) > self.milestone_count:
                    milestones.pop(0)
                    if self._is_flat(start or point, milestones):
                        # Cut back to where the flat stretch began.
                        point = milestones[0]
                        flat = True

            if start is None or peak is None or point.altitude < start.altitude:
                start = point
                peak = point
            elif point.altitude > peak.altitude:
                peak = point

            span = peak.altitude - start.altitude
            dropped = peak.altitude - point.altitude > self.descent_fraction * span
            if flat or dropped or index == last_index:
                if self._qualifies(start, peak):
                    climbs.append(
                        RawInterval(
                            name=f"Climb {len(climbs) + 1}",
                            start=start.time,
                            stop=peak.time,
                            kind=IntervalKind.CLIMB,
                        )
                    )
                start = None
                peak = None
                milestones = [point]
        return climbs

    def _is_flat(self, reference: Sample, milestones: Sequence[Sample]) -> bool:
        previous = reference
        flat_run = 0
        for milestone in milestones:
            if _gradient(previous, milestone) < self.flat_gradient:
                flat_run += 1
                if flat_run >= self.milestone_count:
                    return True
            else:
                flat_run = 0
            previous = milestone
        return False

    def _qualifies(self, start: Sample, peak: Sample) -> bool:
        if peak.time <= start.time:
            return False
        distance_km = _km(peak) - _km(start)
        if distance_km <= 0:
            return False
        gain = peak.altitude - start.altitude
        gradient = gain / distance_km
        for min_km, min_gradient in self.thresholds:
            if distance_km >= min_km and gradient >= min_gradient:
                return True
        if distance_km > 0.5:
            _LOG.debug(
                "Rejected climb %.2fkm at %.1f%%", distance_km, gradient / 10.0
            )
        return False


__all__ = ["ClimbSegmenter"]
