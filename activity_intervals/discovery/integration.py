"""One-second work buckets and the integrated (prefix-sum) work series."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from ..models import SampleSeries

MetricArray = NDArray[np.float64]

# Joules are kept to the microjoule so sums of fractional steps compare exactly.
WORK_PRECISION = 6


@dataclass(slots=True)
class WorkSeries:
    """Cumulative work per whole second of an activity.

    ``integrated[k]`` holds the joules accumulated over the first ``k``
    seconds, so ``integrated[0]`` is always 0 and the work done in
    ``[i, i + t)`` is ``integrated[i + t] - integrated[i]``.
    """

    integrated: MetricArray

    @classmethod
    def from_series(cls, series: SampleSeries) -> "WorkSeries":
        """Aggregate samples into one-second buckets and integrate them.

        Each sample's power applies to the step ending at that sample, so
        nothing is accrued before the first sample. Steps that straddle a second
        boundary are split proportionally. A trailing partial second is
        dropped. Joules are rounded to ``WORK_PRECISION`` decimals.
        """

        if series.is_empty:
            return cls(np.zeros(1, dtype=float))
        times = series.times()
        powers = series.powers()
        steps = np.diff(times, prepend=times[0])
        energy = np.cumsum(steps * powers)
        seconds = int(np.floor(times[-1]))
        if seconds <= 0:
            return cls(np.zeros(1, dtype=float))
        boundaries = np.arange(seconds + 1, dtype=float)
        integrated = np.interp(boundaries, times, energy, left=0.0)
        integrated = np.round(integrated, WORK_PRECISION)
        integrated[0] = 0.0
        return cls(integrated)

    @property
    def seconds(self) -> int:
        return max(0, self.integrated.shape[0] - 1)

    def bucket_power(self) -> MetricArray:
        """Average power of every whole second."""

        return np.diff(self.integrated)

    def window_work(self, start: int, duration: int) -> float:
        work = self.integrated[start + duration] - self.integrated[start]
        return round(float(work), WORK_PRECISION)

    def release(self) -> None:
        self.integrated = np.empty(0, dtype=float)


@contextmanager
def integrated_work(series: SampleSeries) -> Iterator[WorkSeries]:
    """Provide a call-scoped work series and release it afterwards."""

    work = WorkSeries.from_series(series)
    try:
        yield work
    finally:
        work.release()


__all__ = ["WORK_PRECISION", "WorkSeries", "integrated_work"]
