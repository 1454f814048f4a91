"""Tag activities that match previously recorded route occurrences."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Sequence, Tuple

from ..models import IntervalKind, RawInterval

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RouteOccurrence:
    """One recorded pass over a route, keyed by its activity's start time."""

    start_time: datetime
    start: float
    stop: float
    file_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    name: str
    occurrences: Tuple[RouteOccurrence, ...] = field(default_factory=tuple)


class RouteMatcher:
    """Emit a ROUTE interval for every occurrence recorded by this activity."""

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self.routes: Sequence[Route] = tuple(routes)

    def search(self, start_time: datetime) -> List[RawInterval]:
        matches: List[RawInterval] = []
        for route in self.routes:
            for occurrence in route.occurrences:
                if occurrence.start_time != start_time:
                    continue
                if occurrence.start >= occurrence.stop:
                    _LOG.debug(
                        "Skipping empty occurrence of route %s at %s",
                        route.name,
                        start_time,
                    )
                    continue
                matches.append(
                    RawInterval(
                        name=route.name,
                        start=occurrence.start,
                        stop=occurrence.stop,
                        kind=IntervalKind.ROUTE,
                    )
                )
        return matches


__all__ = ["Route", "RouteMatcher", "RouteOccurrence"]
