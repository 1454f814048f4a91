"""General utility helpers shared across modules."""

from __future__ import annotations

import json
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any

# Cycled by sequence index so colours stay stable across refreshes.
_STANDARD_PALETTE = (
    "#00008b",
    "#ff0000",
    "#008000",
    "#0000ff",
    "#ffa500",
    "#800080",
    "#00ced1",
    "#ff00ff",
    "#808000",
    "#8b4513",
    "#2e8b57",
    "#708090",
)


def format_duration(seconds: float) -> str:
    """Format seconds as ``h:mm:ss`` (or ``m:ss`` below an hour)."""

    total_seconds = int(round(abs(seconds)))
    sign = "-" if seconds < 0 and total_seconds else ""
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60
    if hours:
        return f"{sign}{hours}:{minutes:02d}:{secs:02d}"
    return f"{sign}{minutes}:{secs:02d}"


def standard_color(sequence: int) -> str:
    """Return the palette colour for an interval sequence number."""

    return _STANDARD_PALETTE[sequence % len(_STANDARD_PALETTE)]


def _normalise_value(value: Any) -> Any:
    """Convert objects to JSON-friendly representations."""

    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore")
    if isinstance(value, (set, frozenset)):
        return sorted(_normalise_value(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_normalise_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _normalise_value(val) for key, val in value.items()}
    return value


def json_dumps_sorted(value: Any) -> str:
    """Return canonical JSON for hashing / comparisons."""

    normalised = _normalise_value(value)
    return json.dumps(normalised, sort_keys=True, separators=(",", ":"))
