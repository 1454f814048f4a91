"""Default collaborators: checksums, file timestamps and weight resolution."""

from __future__ import annotations

import logging
import math
import zlib
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Mapping, Optional

from .config import DEFAULT_WEIGHT_KG, FALLBACK_WEIGHT_KG, WEIGHT_TAG

_LOG = logging.getLogger(__name__)
_CHUNK_SIZE = 1 << 16

WeightLookup = Callable[[date], Optional[float]]


def metadata_checksum(tags: Mapping[str, str]) -> int:
    """Return a CRC-32 over the key/value pairs in key order."""

    checksum = 0
    for key in sorted(tags):
        checksum = zlib.crc32(str(key).encode("utf-8"), checksum)
        checksum = zlib.crc32(str(tags[key]).encode("utf-8"), checksum)
    return checksum & 0xFFFFFFFF


def file_checksum(path: str | Path) -> int:
    """Return a CRC-32 of the file contents, or 0 when it cannot be read."""

    checksum = 0
    try:
        with open(path, "rb") as handle:
            for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
                checksum = zlib.crc32(chunk, checksum)
    except OSError:
        _LOG.debug("Unable to checksum %s", path, exc_info=True)
        return 0
    return checksum & 0xFFFFFFFF


def file_timestamp(path: str | Path) -> float:
    """Return the last-modified time of ``path`` (0 when missing)."""

    try:
        return Path(path).stat().st_mtime
    except OSError:
        return 0.0


def resolve_weight(
    day: date | datetime,
    tags: Mapping[str, str],
    *,
    measurements: WeightLookup | None = None,
    default_weight: float = DEFAULT_WEIGHT_KG,
) -> float:
    """Resolve athlete weight (kg) for ``day``.

    Sources in order: a dated measurement, the activity's ``Weight`` tag, the
    configured athlete default. A non-positive result falls back to
    ``FALLBACK_WEIGHT_KG``.
    """

    if isinstance(day, datetime):
        day = day.date()
    weight = 0.0
    if measurements is not None:
        weight = _coerce_weight(measurements(day))
    if not weight:
        weight = _coerce_weight(tags.get(WEIGHT_TAG))
    if not weight:
        weight = _coerce_weight(default_weight)
    if weight <= 0.0:
        weight = FALLBACK_WEIGHT_KG
    return weight


def _coerce_weight(value: object) -> float:
    try:
        weight = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(weight) else weight


__all__ = [
    "file_checksum",
    "file_timestamp",
    "metadata_checksum",
    "resolve_weight",
]
