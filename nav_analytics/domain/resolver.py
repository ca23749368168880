"""As-of NAV lookup over a sorted series."""
from __future__ import annotations

from bisect import bisect_right
from datetime import date
from typing import Iterable

from .errors import InvalidRequest
from .models import NavObservation, NavSeries, coerce_date

NEAREST = "nearest"
ON_OR_BEFORE = "on-or-before"


class NavResolver:
    """Binary-search lookups against one NAV series.

    ``nearest`` tolerates targets on either side of an observation and is used
    for point returns. ``on_or_before`` never looks into the future and prices
    SIP contributions, period-end valuation and lumpsum purchases.
    """

    def __init__(self, series: NavSeries | Iterable[NavObservation]) -> None:
        self._series = NavSeries.of(series)
        self._dates = self._series.dates()

    @property
    def series(self) -> NavSeries:
        return self._series

    def on_or_before(self, target: date | str) -> NavObservation | None:
        day = coerce_date(target)
        index = bisect_right(self._dates, day) - 1
        if index < 0:
            return None
        return self._series.observations[index]

    def nearest(self, target: date | str) -> NavObservation | None:
        if not self._dates:
            return None
        day = coerce_date(target)
        index = bisect_right(self._dates, day)
        if index == 0:
            return self._series.observations[0]
        if index == len(self._dates):
            return self._series.observations[-1]
        before = self._series.observations[index - 1]
        after = self._series.observations[index]
        # ties go to the newer observation
        if (after.nav_date - day).days <= (day - before.nav_date).days:
            return after
        return before


def resolve(series: NavSeries | Iterable[NavObservation], target: date | str, mode: str) -> NavObservation | None:
    resolver = NavResolver(series)
    if mode == NEAREST:
        return resolver.nearest(target)
    if mode == ON_OR_BEFORE:
        return resolver.on_or_before(target)
    raise InvalidRequest(f"Unknown resolution mode: {mode!r}")
