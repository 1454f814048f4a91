"""Maximal efforts under the critical power model.

An effort is maximal when the work done over ``t`` seconds implies a time to
exhaustion of at least ``t``. Rearranging ``joules = (W'/t + CP) * t`` gives
``tte = (joules - W') / CP``.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from ..config import TTE_MAX_DURATION_S, TTE_MIN_DURATION_S
from ..models import CapacityModel, IntervalKind, RawInterval
from ..utils import format_duration
from .integration import WORK_PRECISION, WorkSeries
from .peaks import BestWindow

_LOG = logging.getLogger(__name__)


def find_maximal_efforts(
    work: WorkSeries,
    model: CapacityModel,
    *,
    min_duration: int = TTE_MIN_DURATION_S,
    max_duration: int = TTE_MAX_DURATION_S,
) -> List[BestWindow]:
    """Return non-overlapping maximal efforts in start order.

    From each start second the longest qualifying duration wins, searching
    from ``max_duration`` down to (but excluding) ``min_duration``. Scanning
    resumes one second after an accepted effort ends.
    """

    integrated = work.integrated
    total = work.seconds
    efforts: List[BestWindow] = []
    start = 0
    while start < total:
        longest = min(total - start, max_duration)
        if longest <= min_duration:
            break
        durations = np.arange(longest, min_duration, -1)
        joules = np.round(integrated[start + durations] - integrated[start], WORK_PRECISION)
        tte = np.floor((joules - model.wprime) / model.cp)
        hits = np.flatnonzero(tte >= durations)
        if hits.size == 0:
            start += 1
            continue
        duration = int(durations[hits[0]])
        average = round(float(joules[hits[0]]) / duration, WORK_PRECISION)
        efforts.append(BestWindow(start=start, stop=start + duration, average=average))
        start += duration + 1
    return efforts


class MaximalEffortSearch:
    """Wrap :func:`find_maximal_efforts` and name the results."""

    def __init__(
        self,
        min_duration: int = TTE_MIN_DURATION_S,
        max_duration: int = TTE_MAX_DURATION_S,
    ) -> None:
        self.min_duration = min_duration
        self.max_duration = max_duration

    def search(self, work: WorkSeries, model: CapacityModel) -> List[RawInterval]:
        efforts = find_maximal_efforts(
            work,
            model,
            min_duration=self.min_duration,
            max_duration=self.max_duration,
        )
        results: List[RawInterval] = []
        for effort in efforts:
            duration = effort.stop - effort.start
            joules = int(work.window_work(effort.start, duration))
            _LOG.debug(
                "Maximal effort at %ss for %ss (cp=%s wprime=%s)",
                effort.start,
                duration,
                model.cp,
                model.wprime,
            )
            results.append(
                RawInterval(
                    name=f"TTE of {format_duration(duration)}  ({joules // duration} watts)",
                    start=float(effort.start),
                    stop=float(effort.stop),
                    kind=IntervalKind.TTE,
                )
            )
        return results


__all__ = ["MaximalEffortSearch", "find_maximal_efforts"]
