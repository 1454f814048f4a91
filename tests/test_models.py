"""Tests for the core sample and capacity model types."""

from __future__ import annotations

import pandas as pd
import pytest

from activity_intervals.errors import CapacityModelError, SampleSeriesError
from activity_intervals.models import CapacityModel, Sample, SampleSeries

from conftest import make_series


def test_series_rejects_backward_timestamps() -> None:
    with pytest.raises(SampleSeriesError):
        SampleSeries((Sample(time=0.0), Sample(time=2.0), Sample(time=1.0)))


def test_empty_series_state() -> None:
    series = SampleSeries()
    assert series.is_empty
    assert len(series) == 0
    assert series.has_power is False
    assert series.recording_interval == 1.0
    assert series.distance_at(10.0) == 0.0


def test_recording_interval_uses_median_step() -> None:
    series = SampleSeries(
        tuple(Sample(time=t) for t in (0.0, 0.5, 1.0, 1.5, 2.0, 7.0))
    )
    assert series.recording_interval == pytest.approx(0.5)


def test_distance_at_interpolates_and_clamps() -> None:
    series = make_series(10, speed=4.0)
    assert series.distance_at(2.5) == pytest.approx(10.0)
    assert series.distance_at(-5.0) == pytest.approx(0.0)
    assert series.distance_at(99.0) == pytest.approx(40.0)


def test_from_frame_fills_missing_values() -> None:
    frame = pd.DataFrame(
        {"time": [0.0, 1.0, 2.0], "power": [100.0, None, 300.0]}
    )
    series = SampleSeries.from_frame(frame)
    assert [s.power for s in series] == [100.0, 0.0, 300.0]
    assert [s.altitude for s in series] == [0.0, 0.0, 0.0]
    assert series.has_power


def test_from_frame_requires_time_column() -> None:
    with pytest.raises(SampleSeriesError):
        SampleSeries.from_frame(pd.DataFrame({"power": [1.0]}))


def test_capacity_model_rejects_non_positive_values() -> None:
    with pytest.raises(CapacityModelError):
        CapacityModel(cp=0.0, wprime=20000.0)
    with pytest.raises(CapacityModelError):
        CapacityModel(cp=250.0, wprime=-1.0)


def test_time_to_exhaustion_inverts_monod_equation() -> None:
    model = CapacityModel(cp=250.0, wprime=20000.0)
    duration = 300.0
    joules = (model.wprime / duration + model.cp) * duration
    assert model.time_to_exhaustion(joules) == pytest.approx(duration)
    assert model.with_cp(300.0) == CapacityModel(cp=300.0, wprime=20000.0)
