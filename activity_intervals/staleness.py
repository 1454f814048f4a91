"""Decide whether an activity's cached derived data must be recomputed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from .checksums import file_checksum, file_timestamp, metadata_checksum, resolve_weight
from .config import COLOR_TAG, DB_SCHEMA_VERSION
from .models import Activity, StalenessRecord
from .zones import ZoneConfig

_LOG = logging.getLogger(__name__)


def _default_weight_for(activity: Activity) -> float:
    return resolve_weight(activity.start_time, activity.tags)


def _default_content_timestamp(activity: Activity) -> float:
    if not activity.file_name:
        return 0.0
    return file_timestamp(activity.file_name)


def _default_content_checksum(activity: Activity) -> int:
    if not activity.file_name:
        return 0
    return file_checksum(activity.file_name)


@dataclass(frozen=True)
class LiveConfig:
    """Read-only snapshot of the configuration an activity is evaluated against.

    Every collaborator is a plain callable so callers can substitute their own
    storage, measurement or colour sources.
    """

    schema_version: int = DB_SCHEMA_VERSION
    zones: ZoneConfig = field(default_factory=ZoneConfig)
    weight_for: Callable[[Activity], float] = _default_weight_for
    content_timestamp: Callable[[Activity], float] = _default_content_timestamp
    content_checksum: Callable[[Activity], int] = _default_content_checksum
    metadata_checksum: Callable[[Mapping[str, str]], int] = metadata_checksum
    derived_cache_stale: Optional[Callable[[Activity], bool]] = None
    color_for: Optional[Callable[[str], str]] = None


def compute_fingerprint(activity: Activity, zones: ZoneConfig) -> int:
    """Return the zone fingerprint that applies on the activity's date."""

    return zones.fingerprint(activity.start_time.date())


def quantize_weight(weight: float) -> int:
    """Weights compare at gram precision."""

    return int(1000.0 * weight)


class FingerprintEvaluator:
    """Compare a staleness record with freshly resolved configuration."""

    def __init__(self, live: LiveConfig, logger: logging.Logger | None = None) -> None:
        self.live = live
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def is_stale(self, activity: Activity, record: StalenessRecord | None = None) -> bool:
        """Return ``True`` when derived data for ``activity`` must be rebuilt.

        Checks short-circuit in priority order; the first one to trigger
        decides. ``record`` defaults to the activity's own record and is
        updated in place: colour always, weight and content checksum when they
        are found to differ, and ``stale`` once the verdict is stale.
        """

        if record is None:
            record = activity.record
        self._refresh_color(activity, record)
        reason = self._stale_reason(activity, record)
        if reason is None:
            return False
        self._log.debug("Activity %s is stale: %s", activity.activity_id, reason)
        record.stale = True
        return True

    def _stale_reason(  # noqa: C901 - ordered checks
        self,
        activity: Activity,
        record: StalenessRecord,
    ) -> str | None:
        live = self.live
        if record.stale:
            return "already marked stale"

        if record.schema_version != live.schema_version:
            return (
                f"schema version {record.schema_version} != {live.schema_version}"
            )

        weight = live.weight_for(activity)
        if quantize_weight(record.weight) != quantize_weight(weight):
            previous = record.weight
            record.weight = weight
            return f"weight changed {previous} -> {weight}"

        fingerprint = compute_fingerprint(activity, live.zones)
        if record.fingerprint != fingerprint:
            return f"zone fingerprint changed {record.fingerprint} -> {fingerprint}"

        if record.content_timestamp < live.content_timestamp(activity):
            checksum = live.content_checksum(activity)
            if record.content_checksum == 0 or record.content_checksum != checksum:
                record.content_checksum = checksum
                return "file content changed"

        if record.has_samples and record.interval_count == 0:
            return "samples present but no intervals"

        if live.derived_cache_stale is not None and live.derived_cache_stale(activity):
            return "derived cache is stale"

        if record.metadata_checksum != live.metadata_checksum(activity.tags):
            return "metadata changed"
        return None

    def _refresh_color(self, activity: Activity, record: StalenessRecord) -> None:
        if self.live.color_for is None:
            return
        record.color = self.live.color_for(activity.tag(COLOR_TAG))


__all__ = [
    "FingerprintEvaluator",
    "LiveConfig",
    "compute_fingerprint",
    "quantize_weight",
]
