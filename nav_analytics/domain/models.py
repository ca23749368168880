"""Domain models for NAV analytics.

These dataclasses capture a scheme's NAV history and the investment requests
evaluated against it. Everything here is immutable once built.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Iterator

import pandas as pd

from .errors import InvalidRequest

DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y", "%Y-%m-%d %H:%M:%S")


def coerce_date(value: object) -> date:
    """Return the calendar day of ``value``, dropping any time or zone component."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
    raise InvalidRequest(f"Invalid date: {value!r}. Use YYYY-MM-DD")


def coerce_amount(value: object) -> Decimal:
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidRequest(f"Invalid amount: {value!r}") from None
    if not amount.is_finite() or amount <= 0:
        raise InvalidRequest("Amount must be greater than 0")
    return amount


@dataclass(frozen=True)
class NavObservation:
    """One published NAV. A non-positive ``nav`` marks an invalid data point."""

    nav_date: date
    nav: Decimal

    @property
    def is_valid(self) -> bool:
        return self.nav > 0


@dataclass(frozen=True)
class NavSeries:
    """Date-sorted, duplicate-free NAV history of a single scheme."""

    observations: tuple[NavObservation, ...] = ()

    @classmethod
    def from_observations(cls, observations: Iterable[NavObservation], keep: str = "last") -> "NavSeries":
        """Sort ascending and collapse repeated dates.

        ``keep="last"`` lets the observation seen last in input order win;
        ``keep="first"`` keeps the earliest one.
        """
        if keep not in ("first", "last"):
            raise InvalidRequest(f"Unsupported duplicate policy: {keep!r}")
        by_date: dict[date, NavObservation] = {}
        for observation in observations:
            if keep == "first" and observation.nav_date in by_date:
                continue
            by_date[observation.nav_date] = observation
        return cls(observations=tuple(by_date[key] for key in sorted(by_date)))

    @classmethod
    def of(cls, series: "NavSeries | Iterable[NavObservation]") -> "NavSeries":
        if isinstance(series, NavSeries):
            return series
        return cls.from_observations(series)

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[NavObservation]:
        return iter(self.observations)

    @property
    def is_empty(self) -> bool:
        return not self.observations

    @property
    def first(self) -> NavObservation | None:
        return self.observations[0] if self.observations else None

    @property
    def latest(self) -> NavObservation | None:
        return self.observations[-1] if self.observations else None

    @property
    def first_date(self) -> date | None:
        return self.observations[0].nav_date if self.observations else None

    def dates(self) -> list[date]:
        return [observation.nav_date for observation in self.observations]

    def newest_first(self) -> tuple[NavObservation, ...]:
        return tuple(reversed(self.observations))


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    def step(self, current: date) -> date:
        """Next contribution date after ``current``.

        Months are added to the previous date, so a 31st clamps to a shorter
        month's end and stays there (Jan 31, Feb 28, Mar 28).
        """
        if self is Frequency.DAILY:
            offset = pd.DateOffset(days=1)
        elif self is Frequency.WEEKLY:
            offset = pd.DateOffset(weeks=1)
        else:
            offset = pd.DateOffset(months=1)
        return (pd.Timestamp(current) + offset).date()

    @classmethod
    def parse(cls, value: "Frequency | str") -> "Frequency":
        try:
            return cls(str(value.value if isinstance(value, Frequency) else value).strip().lower())
        except ValueError:
            raise InvalidRequest("Invalid frequency. Must be one of: monthly, weekly, daily") from None


class Period(str, Enum):
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"

    @property
    def offset(self) -> pd.DateOffset:
        if self is Period.ONE_YEAR:
            return pd.DateOffset(years=1)
        return pd.DateOffset(months=int(self.value[:-1]))

    def start_from(self, end: date) -> date:
        return (pd.Timestamp(end) - self.offset).date()

    @classmethod
    def parse(cls, value: "Period | str") -> "Period":
        try:
            return cls(str(value.value if isinstance(value, Period) else value).strip().lower())
        except ValueError:
            raise InvalidRequest("Invalid period. Must be one of: 1m, 3m, 6m, 1y") from None


@dataclass(frozen=True)
class InvestmentSchedule:
    """Recurring fixed-amount purchases between two dates, both inclusive."""

    amount: Decimal
    frequency: Frequency
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite() or self.amount <= 0:
            raise InvalidRequest("Amount must be greater than 0")
        if not isinstance(self.frequency, Frequency):
            raise InvalidRequest("Invalid frequency. Must be one of: monthly, weekly, daily")
        if self.start_date >= self.end_date:
            raise InvalidRequest("From date must be before to date")

    @classmethod
    def create(cls, amount: object, frequency: Frequency | str, start: object, end: object) -> "InvestmentSchedule":
        return cls(
            amount=coerce_amount(amount),
            frequency=Frequency.parse(frequency),
            start_date=coerce_date(start),
            end_date=coerce_date(end),
        )


class EventStatus(str, Enum):
    INVESTED = "invested"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class InvestmentEvent:
    """Outcome of one scheduled contribution."""

    scheduled_date: date
    status: EventStatus
    amount: Decimal
    units: Decimal = Decimal("0")
    nav: Decimal | None = None
    nav_date: date | None = None
    reason: str | None = None


@dataclass(frozen=True)
class SchemeSummary:
    code: str
    name: str


@dataclass(frozen=True)
class SchemeMeta:
    code: str
    name: str
    fund_house: str = ""
    scheme_type: str = ""
    category: str = ""


@dataclass(frozen=True)
class SchemeDetails:
    meta: SchemeMeta
    series: NavSeries = field(default_factory=NavSeries)
