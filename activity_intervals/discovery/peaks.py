"""Best average power over fixed durations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from ..config import PEAK_DURATIONS
from ..models import Activity, IntervalKind, RawInterval
from .integration import WORK_PRECISION, WorkSeries

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BestWindow:
    start: int
    stop: int
    average: float


def find_best_window(work: WorkSeries, duration: int) -> Optional[BestWindow]:
    """Return the ``duration``-second window with the highest average power.

    Window sums come from one pass over the prefix series; the earliest
    window wins ties. ``None`` when the activity is shorter than
    ``duration`` or the best average is not positive.
    """

    if duration <= 0 or work.seconds < duration:
        return None
    integrated = work.integrated
    sums = np.round(integrated[duration:] - integrated[:-duration], WORK_PRECISION)
    start = int(np.argmax(sums))
    average = round(float(sums[start]) / duration, WORK_PRECISION)
    if average <= 0:
        return None
    return BestWindow(start=start, stop=start + duration, average=average)


def peak_power_applies(activity: Activity) -> bool:
    """Peak and maximal-effort searches only run for powered, non run/swim data."""

    return not activity.is_run and not activity.is_swim and activity.series.has_power


class PeakEffortSearch:
    """Search a fixed catalog of durations for best efforts."""

    def __init__(self, durations: Sequence[Tuple[int, str]] = PEAK_DURATIONS) -> None:
        self.durations = tuple(durations)

    def search(self, work: WorkSeries) -> Iterator[RawInterval]:
        """Yield one PEAKPOWER candidate per catalog duration that fits."""

        for duration, label in self.durations:
            best = find_best_window(work, duration)
            if best is None:
                _LOG.debug("No %s peak (activity spans %ss)", label, work.seconds)
                continue
            yield RawInterval(
                name=f"{label} ({int(best.average)} watts)",
                start=float(best.start),
                stop=float(best.stop),
                kind=IntervalKind.PEAKPOWER,
            )


__all__ = [
    "BestWindow",
    "PeakEffortSearch",
    "find_best_window",
    "peak_power_applies",
]
