"""Admission rules for user/device intervals recorded in the activity file."""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Tuple

from ..config import ENTIRE_ACTIVITY_EDGE_TOLERANCE
from ..models import IntervalKind, RawInterval

# Kinds rebuilt on every refresh; recorded copies are dropped.
AUTOMATIC_KINDS = frozenset(
    {IntervalKind.ALL, IntervalKind.PEAKPOWER, IntervalKind.CLIMB}
)


def duplicates_entire_activity(
    interval: RawInterval,
    bounds: Tuple[float, float],
    recording_interval: float,
) -> bool:
    """Return ``True`` when ``interval`` spans (nearly) the whole activity.

    Besides an exact cover, two near covers count: a start up to one
    recording interval late with the stop at least one recording interval
    past the end, or a start at the beginning with the stop up to one
    recording interval short. The recording interval is scaled by
    ``ENTIRE_ACTIVITY_EDGE_TOLERANCE``.
    """

    begin, end = bounds
    if interval.start <= begin and interval.stop >= end:
        return True
    tolerance = recording_interval * ENTIRE_ACTIVITY_EDGE_TOLERANCE
    late_start = interval.start - tolerance <= begin and interval.stop - tolerance >= end
    short_stop = interval.start <= begin and interval.stop + tolerance >= end
    return late_start or short_stop


def is_admissible(
    interval: RawInterval,
    bounds: Tuple[float, float],
    recording_interval: float,
    automatic_kinds: AbstractSet[IntervalKind] = AUTOMATIC_KINDS,
) -> bool:
    if interval.kind in automatic_kinds:
        return False
    if interval.start >= interval.stop:
        return False
    return not duplicates_entire_activity(interval, bounds, recording_interval)


def admit_supplied_intervals(
    candidates: Iterable[RawInterval],
    bounds: Tuple[float, float],
    recording_interval: float,
    automatic_kinds: AbstractSet[IntervalKind] = AUTOMATIC_KINDS,
) -> List[RawInterval]:
    """Return the recorded intervals worth keeping, in file order.

    Admitted intervals are re-labelled as USER.
    """

    admitted: List[RawInterval] = []
    for interval in candidates:
        if not is_admissible(interval, bounds, recording_interval, automatic_kinds):
            continue
        if interval.kind is not IntervalKind.USER:
            interval = RawInterval(
                name=interval.name,
                start=interval.start,
                stop=interval.stop,
                kind=IntervalKind.USER,
            )
        admitted.append(interval)
    return admitted


__all__ = [
    "AUTOMATIC_KINDS",
    "admit_supplied_intervals",
    "duplicates_entire_activity",
    "is_admissible",
]
