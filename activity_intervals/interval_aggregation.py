"""Interval aggregation helpers.

Pure function that turns a derived interval collection into a DataFrame
ready for display or export by a caller. Kept apart from discovery so the
tabular layout is testable on its own.
"""

from __future__ import annotations

from typing import Iterable, List

import pandas as pd

from .models import DerivedInterval
from .utils import format_duration

SEQUENCE_COL = "Sequence"
KIND_COL = "Kind"
NAME_COL = "Name"
START_COL = "Start (s)"
STOP_COL = "Stop (s)"
DURATION_SEC_COL = "Duration (s)"
DURATION_FMT_COL = "Duration (h:mm:ss)"
DISTANCE_COL = "Distance (km)"
COLOR_COL = "Color"

INTERVAL_COLUMNS = [
    SEQUENCE_COL,
    KIND_COL,
    NAME_COL,
    START_COL,
    STOP_COL,
    DURATION_SEC_COL,
    DURATION_FMT_COL,
    DISTANCE_COL,
    COLOR_COL,
]

__all__ = ["INTERVAL_COLUMNS", "build_interval_table"]


def _row_for_interval(interval: DerivedInterval) -> dict:
    return {
        SEQUENCE_COL: interval.sequence,
        KIND_COL: interval.kind.value,
        NAME_COL: interval.name,
        START_COL: interval.start,
        STOP_COL: interval.stop,
        DURATION_SEC_COL: interval.duration,
        DURATION_FMT_COL: format_duration(interval.duration),
        DISTANCE_COL: round(
            (interval.stop_distance - interval.start_distance) / 1000.0, 2
        ),
        COLOR_COL: interval.color,
    }


def build_interval_table(intervals: Iterable[DerivedInterval]) -> pd.DataFrame:
    """Return one row per interval ordered by sequence number."""

    rows: List[dict] = [_row_for_interval(interval) for interval in intervals]
    df = pd.DataFrame(rows, columns=INTERVAL_COLUMNS)
    if not df.empty:
        df.sort_values(by=SEQUENCE_COL, inplace=True)
        df.reset_index(drop=True, inplace=True)
    return df
