"""Tests for the interval discovery orchestrator."""

from __future__ import annotations

from datetime import timedelta

from activity_intervals.discovery import IntervalDiscoveryEngine, Route, RouteOccurrence
from activity_intervals.discovery.engine import ENTIRE_ACTIVITY_NAME, resolve_capacity_model
from activity_intervals.models import Activity, IntervalKind, RawInterval
from activity_intervals.zones import ZoneConfig

from conftest import ACTIVITY_START, make_activity, make_profile_series, make_series, make_zones


def _kinds(intervals) -> list[IntervalKind]:
    return [i.kind for i in intervals]


def test_empty_series_yields_nothing() -> None:
    assert IntervalDiscoveryEngine().discover(make_activity()) == []


def test_entire_activity_spans_series_and_copies_metrics(ride: Activity) -> None:
    intervals = IntervalDiscoveryEngine().discover(ride, zones=make_zones())
    entire = intervals[0]
    assert entire.kind is IntervalKind.ALL
    assert entire.name == ENTIRE_ACTIVITY_NAME
    assert (entire.start, entire.stop) == (ride.series.first.time, ride.series.last.time)
    assert entire.metrics == ride.metrics
    assert entire.metrics is not ride.metrics
    assert entire.sequence == 0
    assert entire.activity_id == ride.activity_id
    assert [i for i in intervals if i.kind is IntervalKind.ALL] == [entire]


def test_sequence_numbers_are_contiguous(ride: Activity) -> None:
    intervals = IntervalDiscoveryEngine().discover(ride, zones=make_zones())
    assert [i.sequence for i in intervals] == list(range(len(intervals)))
    assert all(i.start < i.stop for i in intervals)


def test_category_order(ride: Activity) -> None:
    ride.supplied_intervals = [RawInterval("Lap 1", 0.0, 3600.0), RawInterval("Lap 2", 3600.0, 7200.0 - 30)]
    routes = [Route("Commute", (RouteOccurrence(ACTIVITY_START, 10.0, 500.0),))]
    intervals = IntervalDiscoveryEngine().discover(ride, zones=make_zones(), routes=routes)
    kinds = _kinds(intervals)
    order = [IntervalKind.ALL, IntervalKind.USER, IntervalKind.PEAKPOWER, IntervalKind.TTE, IntervalKind.CLIMB, IntervalKind.ROUTE]
    ranks = [order.index(kind) for kind in kinds]
    assert ranks == sorted(ranks)
    assert kinds[1:3] == [IntervalKind.USER, IntervalKind.USER]
    assert kinds[-1] is IntervalKind.ROUTE
    assert kinds.count(IntervalKind.PEAKPOWER) == 13


def test_peak_names_on_steady_ride(ride: Activity) -> None:
    intervals = IntervalDiscoveryEngine().discover(ride, zones=make_zones())
    peaks = [i for i in intervals if i.kind is IntervalKind.PEAKPOWER]
    assert peaks[0].name == "1 second (300 watts)"
    assert peaks[6].name == "1 minute (300 watts)"
    assert (peaks[6].start, peaks[6].stop) == (600.0, 660.0)
    assert peaks[-1].name.startswith("1 hour (")


def test_power_searches_skipped_for_runs_and_swims() -> None:
    series = make_series(3700, 260.0)
    for flags in ({"is_run": True}, {"is_swim": True}):
        intervals = IntervalDiscoveryEngine().discover(make_activity(series, **flags), zones=make_zones())
        assert IntervalKind.PEAKPOWER not in _kinds(intervals)
        assert IntervalKind.TTE not in _kinds(intervals)


def test_power_searches_skipped_without_power() -> None:
    intervals = IntervalDiscoveryEngine().discover(make_activity(make_series(3700)), zones=make_zones())
    assert _kinds(intervals) == [IntervalKind.ALL]


def test_climbs_found_for_runs() -> None:
    series = make_profile_series([(2500.0, 150.0)])
    intervals = IntervalDiscoveryEngine().discover(make_activity(series, is_run=True))
    assert _kinds(intervals) == [IntervalKind.ALL, IntervalKind.CLIMB]
    climb = intervals[1]
    assert climb.start_distance == 0.0
    assert climb.stop_distance == 2500.0


def test_tte_uses_zone_capacity_model() -> None:
    series = make_series(3700, 260.0)
    march = make_activity(series)
    # 260W clears CP=250 but not CP=270.
    assert IntervalKind.TTE in _kinds(IntervalDiscoveryEngine().discover(march, zones=make_zones(power_cp=250.0)))
    assert IntervalKind.TTE not in _kinds(IntervalDiscoveryEngine().discover(march, zones=make_zones(power_cp=270.0)))


def test_cp_override_tag_replaces_cp_only() -> None:
    activity = make_activity(make_series(3700, 260.0), tags={"CP": "270"})
    model = resolve_capacity_model(activity, make_zones(power_cp=250.0))
    assert model.cp == 270.0
    assert model.wprime == 22000.0
    intervals = IntervalDiscoveryEngine().discover(activity, zones=make_zones(power_cp=250.0))
    assert IntervalKind.TTE not in _kinds(intervals)


def test_invalid_cp_override_is_ignored() -> None:
    activity = make_activity(make_series(10, 100.0), tags={"CP": "fast"})
    assert resolve_capacity_model(activity, make_zones()).cp == 250.0


def test_missing_zone_range_uses_defaults() -> None:
    activity = make_activity(make_series(10, 100.0), start_time=ACTIVITY_START - timedelta(days=3650))
    model = resolve_capacity_model(activity, make_zones())
    assert (model.cp, model.wprime) == (250.0, 22000.0)
    assert resolve_capacity_model(activity, ZoneConfig()).cp == 250.0


def test_supplied_intervals_filtered(ride: Activity) -> None:
    ride.supplied_intervals = [
        RawInterval("Whole ride", 0.0, 7200.0),
        RawInterval("Device peak", 10.0, 70.0, IntervalKind.PEAKPOWER),
        RawInterval("Lap", 100.0, 200.0),
        RawInterval("Backward", 300.0, 250.0),
    ]
    intervals = IntervalDiscoveryEngine().discover(ride, zones=make_zones())
    users = [i for i in intervals if i.kind is IntervalKind.USER]
    assert [(u.name, u.sequence) for u in users] == [("Lap", 1)]
    assert users[0].start_distance == 1000.0


def test_discovery_is_idempotent(ride: Activity) -> None:
    ride.supplied_intervals = [RawInterval("Lap", 100.0, 200.0)]
    engine = IntervalDiscoveryEngine()
    first = engine.discover(ride, zones=make_zones())
    second = engine.discover(ride, zones=make_zones())
    assert first == second
    assert first is not second


def test_single_sample_yields_zero_length_entire_activity() -> None:
    activity = make_activity(make_series(0, 200.0))
    intervals = IntervalDiscoveryEngine().discover(activity, zones=make_zones())
    assert [(i.kind, i.start, i.stop) for i in intervals] == [(IntervalKind.ALL, 0.0, 0.0)]
