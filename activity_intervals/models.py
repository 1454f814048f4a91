"""Core data structures shared across the package."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import CapacityModelError, SampleSeriesError
from .utils import standard_color

if TYPE_CHECKING:  # pragma: no cover - type checking only
    import pandas as pd

MetricArray = NDArray[np.float64]
MetricTable = Dict[str, float]

SAMPLE_COLUMNS = ("time", "distance", "power", "altitude")


@dataclass(frozen=True, slots=True)
class Sample:
    time: float
    distance: float = 0.0
    power: float = 0.0
    altitude: float = 0.0


@dataclass(frozen=True)
class SampleSeries:
    """Ordered, time-sorted activity samples.

    An empty series is a valid state ("no samples") and is distinct from a
    stale or failed activity.
    """

    samples: Tuple[Sample, ...] = ()

    def __post_init__(self) -> None:
        samples = tuple(self.samples)
        object.__setattr__(self, "samples", samples)
        previous = -math.inf
        for sample in samples:
            if sample.time < previous:
                raise SampleSeriesError(
                    f"Sample time {sample.time} precedes previous sample {previous}"
                )
            previous = sample.time

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "SampleSeries":
        """Build a series from mappings with time/distance/power/altitude keys."""

        samples = []
        for record in records:
            samples.append(
                Sample(
                    time=_coerce_float(record.get("time")),
                    distance=_coerce_float(record.get("distance")),
                    power=_coerce_float(record.get("power")),
                    altitude=_coerce_float(record.get("altitude")),
                )
            )
        return cls(tuple(samples))

    @classmethod
    def from_frame(cls, frame: "pd.DataFrame") -> "SampleSeries":
        """Build a series from a DataFrame; missing columns/values become 0."""

        if "time" not in frame.columns:
            raise SampleSeriesError("Sample frame requires a 'time' column")
        data = frame.reindex(columns=list(SAMPLE_COLUMNS)).fillna(0.0)
        return cls.from_records(data.to_dict(orient="records"))

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __getitem__(self, index: int) -> Sample:
        return self.samples[index]

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def first(self) -> Sample:
        return self.samples[0]

    @property
    def last(self) -> Sample:
        return self.samples[-1]

    @property
    def start_time(self) -> float:
        return self.samples[0].time if self.samples else 0.0

    @property
    def stop_time(self) -> float:
        return self.samples[-1].time if self.samples else 0.0

    @property
    def duration(self) -> float:
        return self.stop_time - self.start_time

    @property
    def has_power(self) -> bool:
        return any(sample.power > 0 for sample in self.samples)

    @property
    def recording_interval(self) -> float:
        """Median positive step between samples (1 second for tiny series)."""

        if len(self.samples) < 2:
            return 1.0
        steps = np.diff(self.times())
        steps = steps[steps > 0]
        if steps.size == 0:
            return 1.0
        return float(np.median(steps))

    def times(self) -> MetricArray:
        return np.fromiter((s.time for s in self.samples), dtype=float)

    def distances(self) -> MetricArray:
        return np.fromiter((s.distance for s in self.samples), dtype=float)

    def powers(self) -> MetricArray:
        return np.fromiter((s.power for s in self.samples), dtype=float)

    def altitudes(self) -> MetricArray:
        return np.fromiter((s.altitude for s in self.samples), dtype=float)

    def distance_at(self, secs: float) -> float:
        """Return the interpolated cumulative distance (metres) at ``secs``."""

        if not self.samples:
            return 0.0
        return float(np.interp(secs, self.times(), self.distances()))


@dataclass(frozen=True, slots=True)
class CapacityModel:
    """Two-parameter critical power model."""

    cp: float
    wprime: float

    def __post_init__(self) -> None:
        if not self.cp > 0 or not self.wprime > 0:
            raise CapacityModelError(
                f"CP and W' must be positive (cp={self.cp}, wprime={self.wprime})"
            )

    def time_to_exhaustion(self, joules: float) -> float:
        """Invert ``joules = (W'/t + CP) * t`` for ``t``."""

        return (joules - self.wprime) / self.cp

    def with_cp(self, cp: float) -> "CapacityModel":
        return CapacityModel(cp=cp, wprime=self.wprime)


class IntervalKind(str, Enum):
    ALL = "all"
    USER = "user"
    PEAKPOWER = "peakpower"
    TTE = "tte"
    CLIMB = "climb"
    ROUTE = "route"


@dataclass(frozen=True, slots=True)
class RawInterval:
    """Unsequenced interval: recorded in the activity file or freshly found."""

    name: str
    start: float
    stop: float
    kind: IntervalKind = IntervalKind.USER


@dataclass(frozen=True, slots=True)
class DerivedInterval:
    """Sub-interval of an activity produced by interval discovery.

    ``activity_id`` identifies the owning activity; intervals never hold a
    reference to it.
    """

    name: str
    start: float
    stop: float
    start_distance: float
    stop_distance: float
    sequence: int
    kind: IntervalKind
    metrics: Mapping[str, float] = field(default_factory=dict)
    activity_id: int | str | None = None

    @property
    def duration(self) -> float:
        return self.stop - self.start

    @property
    def color(self) -> str:
        return standard_color(self.sequence)


@dataclass(slots=True)
class StalenessRecord:
    """Values captured at the last refresh, compared on every staleness check."""

    fingerprint: int = 0
    weight: float = 0.0
    metadata_checksum: int = 0
    content_checksum: int = 0
    content_timestamp: float = 0.0
    schema_version: int = 0
    color: str | None = None
    has_samples: bool = False
    interval_count: int = 0
    stale: bool = True


@dataclass(slots=True)
class Activity:
    """A single recorded activity and the state cached alongside it."""

    activity_id: int | str
    start_time: datetime
    series: SampleSeries = field(default_factory=SampleSeries)
    tags: Dict[str, str] = field(default_factory=dict)
    metrics: MetricTable = field(default_factory=dict)
    supplied_intervals: List[RawInterval] = field(default_factory=list)
    is_run: bool = False
    is_swim: bool = False
    file_name: str | None = None
    record: StalenessRecord = field(default_factory=StalenessRecord)
    intervals: List[DerivedInterval] = field(default_factory=list)

    def tag(self, key: str, default: str = "") -> str:
        return self.tags.get(key, default)


def _coerce_float(value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result):
        return 0.0
    return result


__all__ = [
    "Activity",
    "CapacityModel",
    "DerivedInterval",
    "IntervalKind",
    "MetricTable",
    "Sample",
    "SampleSeries",
    "StalenessRecord",
    "RawInterval",
]
