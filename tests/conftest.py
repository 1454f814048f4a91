"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable synthetic activities, sample
series and zone tables so tests do not rebuild them by hand.
"""
from __future__ import annotations

import os
import sys
from datetime import date, datetime
from typing import Callable, Sequence, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from activity_intervals.models import Activity, Sample, SampleSeries
from activity_intervals.staleness import LiveConfig
from activity_intervals.zones import ZoneConfig, ZoneRange, ZoneTable

ACTIVITY_START = datetime(2024, 3, 1, 9, 30, 0)


# --- Factory helpers -------------------------------------------------
def make_series(
    seconds: int,
    power: float | Callable[[float], float] = 0.0,
    *,
    speed: float = 10.0,
    altitude: float | Callable[[float], float] = 0.0,
    rate: int = 1,
) -> SampleSeries:
    """``rate`` samples per second from t=0 to t=seconds inclusive."""

    samples = []
    for i in range(seconds * rate + 1):
        t = i / rate
        distance = t * speed
        watts = power(t) if callable(power) else power
        alt = altitude(distance) if callable(altitude) else altitude
        samples.append(Sample(time=float(t), distance=distance, power=watts, altitude=alt))
    return SampleSeries(tuple(samples))


def make_profile_series(
    segments: Sequence[Tuple[float, float]],
    *,
    step_m: float = 10.0,
    start_altitude: float = 0.0,
) -> SampleSeries:
    """Series following piecewise-linear (length m, gain m) segments.

    One sample every ``step_m`` metres, one second apart.
    """

    knots = [(0.0, start_altitude)]
    for length, gain in segments:
        last_distance, last_altitude = knots[-1]
        knots.append((last_distance + length, last_altitude + gain))
    total = knots[-1][0]

    def altitude_at(distance: float) -> float:
        for (d0, a0), (d1, a1) in zip(knots, knots[1:]):
            if distance <= d1:
                return a0 + (a1 - a0) * (distance - d0) / (d1 - d0)
        return knots[-1][1]

    steps = int(round(total / step_m))
    samples = [
        Sample(
            time=float(i),
            distance=i * step_m,
            power=0.0,
            altitude=altitude_at(i * step_m),
        )
        for i in range(steps + 1)
    ]
    return SampleSeries(tuple(samples))


def make_activity(series: SampleSeries | None = None, **kwargs) -> Activity:
    kwargs.setdefault("start_time", ACTIVITY_START)
    return Activity(activity_id=kwargs.pop("activity_id", 1), series=series or SampleSeries(), **kwargs)


def make_zones(power_cp: float = 250.0, later_cp: float = 280.0) -> ZoneConfig:
    """Power ranges split on 2024-06-01; single open HR and pace ranges."""

    power = ZoneTable(
        [
            ZoneRange(start=date(2024, 1, 1), end=date(2024, 6, 1), cp=power_cp, wprime=22000.0),
            ZoneRange(start=date(2024, 6, 1), cp=later_cp, wprime=20000.0),
        ],
        name="power",
    )
    heart_rate = ZoneTable([ZoneRange(start=date(2023, 1, 1), zones=(120, 140, 160, 175))], name="hr")
    pace = ZoneTable([ZoneRange(start=date(2023, 1, 1), zones=(240, 270, 300))], name="pace")
    return ZoneConfig(power=power, heart_rate=heart_rate, pace=pace)


def make_live(zones: ZoneConfig | None = None, **kwargs) -> LiveConfig:
    """Live config with deterministic in-memory collaborators."""

    kwargs.setdefault("weight_for", lambda activity: 70.0)
    kwargs.setdefault("content_timestamp", lambda activity: 100.0)
    kwargs.setdefault("content_checksum", lambda activity: 42)
    return LiveConfig(zones=zones or make_zones(), **kwargs)


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def zones() -> ZoneConfig:
    return make_zones()


@pytest.fixture
def live(zones: ZoneConfig) -> LiveConfig:
    return make_live(zones)


@pytest.fixture
def ride_series() -> SampleSeries:
    """Two-hour ride at a steady 200 W with a 300 W minute at t=600."""

    return make_series(7200, lambda t: 300.0 if 600 < t <= 660 else 200.0)


@pytest.fixture
def ride(ride_series: SampleSeries) -> Activity:
    return make_activity(ride_series, metrics={"total_distance": 72.0, "average_power": 201.0})
