"""Dated zone ranges and the fingerprints derived from them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from hashlib import sha256
from threading import RLock
from typing import Iterable, Optional, Sequence, Tuple

from cachetools import LRUCache

from .config import DEFAULT_CP, DEFAULT_WPRIME, ZONE_FINGERPRINT_CACHE_SIZE
from .models import CapacityModel
from .utils import json_dumps_sorted

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ZoneRange:
    """Zone settings in force from ``start`` (inclusive) to ``end`` (exclusive)."""

    start: date
    end: date | None = None
    cp: float | None = None
    wprime: float | None = None
    zones: Tuple[float, ...] = ()

    def covers(self, day: date) -> bool:
        if day < self.start:
            return False
        return self.end is None or day < self.end


class ZoneTable:
    """Ordered zone ranges for one discipline (power, heart rate or pace).

    Fingerprints are memoised per date; the ranges themselves are never
    mutated after construction.
    """

    def __init__(
        self,
        ranges: Iterable[ZoneRange] = (),
        *,
        name: str = "power",
        cache_size: int = ZONE_FINGERPRINT_CACHE_SIZE,
    ) -> None:
        self.name = name
        self._ranges: Tuple[ZoneRange, ...] = tuple(ranges)
        self._fingerprints: LRUCache[date, int] = LRUCache(maxsize=max(1, cache_size))
        self._lock = RLock()

    @property
    def ranges(self) -> Sequence[ZoneRange]:
        return self._ranges

    def which_range(self, day: date | datetime) -> Optional[int]:
        """Return the index of the range covering ``day`` or ``None``."""

        day = _as_date(day)
        for index, zone_range in enumerate(self._ranges):
            if zone_range.covers(day):
                return index
        return None

    def fingerprint(self, day: date | datetime) -> int:
        """Return an unsigned 32-bit checksum of the range covering ``day``.

        Range boundaries are excluded so that adding a new range (which closes
        the previous one) leaves fingerprints for older dates untouched.
        """

        day = _as_date(day)
        with self._lock:
            cached = self._fingerprints.get(day)
        if cached is not None:
            return cached
        index = self.which_range(day)
        if index is None:
            value = 0
        else:
            zone_range = self._ranges[index]
            payload = {
                "table": self.name,
                "cp": zone_range.cp,
                "wprime": zone_range.wprime,
                "zones": zone_range.zones,
            }
            digest = sha256(json_dumps_sorted(payload).encode("utf-8")).digest()
            value = int.from_bytes(digest[:4], "big")
        with self._lock:
            self._fingerprints[day] = value
        return value

    def capacity_model(self, day: date | datetime) -> CapacityModel:
        """Resolve CP/W' for ``day``, falling back to the configured defaults."""

        index = self.which_range(day)
        if index is None:
            _LOG.debug(
                "No %s zone range for %s; using CP=%s W'=%s",
                self.name,
                _as_date(day),
                DEFAULT_CP,
                DEFAULT_WPRIME,
            )
            return CapacityModel(cp=DEFAULT_CP, wprime=DEFAULT_WPRIME)
        zone_range = self._ranges[index]
        cp = zone_range.cp if zone_range.cp and zone_range.cp > 0 else DEFAULT_CP
        wprime = (
            zone_range.wprime
            if zone_range.wprime and zone_range.wprime > 0
            else DEFAULT_WPRIME
        )
        return CapacityModel(cp=cp, wprime=wprime)


@dataclass(frozen=True)
class ZoneConfig:
    """Read-only snapshot of the power, heart-rate and pace zone tables."""

    power: ZoneTable = field(default_factory=lambda: ZoneTable(name="power"))
    heart_rate: ZoneTable = field(default_factory=lambda: ZoneTable(name="hr"))
    pace: ZoneTable = field(default_factory=lambda: ZoneTable(name="pace"))

    def fingerprint(self, day: date | datetime) -> int:
        """Composite fingerprint: sum of the three per-table checksums."""

        return (
            self.power.fingerprint(day)
            + self.heart_rate.fingerprint(day)
            + self.pace.fingerprint(day)
        )


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


__all__ = ["ZoneConfig", "ZoneRange", "ZoneTable"]
