"""Domain services implementing the return and investment calculations."""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator

from nav_analytics.config import SETTINGS

from .errors import (
    InsufficientData,
    InvalidEndNav,
    InvalidNav,
    InvalidRequest,
    NoData,
    NoEndNav,
    NoSuccessfulInvestments,
)
from .models import (
    EventStatus,
    Frequency,
    InvestmentEvent,
    InvestmentSchedule,
    NavObservation,
    NavSeries,
    Period,
    coerce_amount,
    coerce_date,
)
from .resolver import NavResolver
from .results import (
    LumpsumResult,
    PointReturnResult,
    SimulationResult,
    SimulationStatus,
    SimulationSummary,
)

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = Decimal("365.25")
HUNDRED = Decimal("100")
ZERO = Decimal("0")

REASON_NO_NAV = "No NAV data available"
REASON_INVALID_NAV = "Invalid NAV"

SeriesLike = NavSeries | Iterable[NavObservation]


def _percent_change(start: Decimal, end: Decimal) -> Decimal:
    return (end - start) / start * HUNDRED


def _compound_rate(ratio: Decimal, exponent: Decimal) -> Decimal:
    return (ratio ** exponent - 1) * HUNDRED


def _years_between(start: date, end: date) -> Decimal:
    return Decimal((end - start).days) / DAYS_PER_YEAR


class ReturnCalculator:
    """Simple and annualized return between two dates of a NAV series."""

    def __init__(self, annualize_min_days: int | None = None) -> None:
        if annualize_min_days is None:
            annualize_min_days = SETTINGS.annualize_min_days
        self._annualize_min_days = annualize_min_days

    def compute(
        self,
        series: SeriesLike,
        period: Period | str | None = None,
        from_date: date | str | None = None,
        to_date: date | str | None = None,
    ) -> PointReturnResult:
        has_range = from_date is not None or to_date is not None
        if period is None and not has_range:
            raise InvalidRequest("Either period (1m|3m|6m|1y) or both from and to dates (YYYY-MM-DD) must be provided")
        if period is not None and has_range:
            raise InvalidRequest("Provide either a period or a date range, not both")

        series = NavSeries.of(series)
        if series.is_empty:
            raise InsufficientData("No NAV data available")

        if period is not None:
            requested_end = series.latest.nav_date
            requested_start = Period.parse(period).start_from(requested_end)
        else:
            if from_date is None or to_date is None:
                raise InvalidRequest("Both from and to dates (YYYY-MM-DD) must be provided")
            requested_start = coerce_date(from_date)
            requested_end = coerce_date(to_date)
            if requested_start >= requested_end:
                raise InvalidRequest("From date must be before to date")

        resolver = NavResolver(series)
        start = resolver.nearest(requested_start)
        end = resolver.nearest(requested_end)
        if start is None or end is None:
            raise InsufficientData(
                "Unable to calculate returns for the given period",
                first_available_date=series.first_date,
            )
        for observation in (start, end):
            if not observation.is_valid:
                raise InvalidNav(f"Invalid NAV {observation.nav} on {observation.nav_date.isoformat()}")

        annualized = None
        days = (end.nav_date - start.nav_date).days
        if days >= self._annualize_min_days:
            annualized = _compound_rate(end.nav / start.nav, DAYS_PER_YEAR / Decimal(days))

        return PointReturnResult(
            start_date=start.nav_date,
            end_date=end.nav_date,
            start_nav=start.nav,
            end_nav=end.nav,
            simple_return=_percent_change(start.nav, end.nav),
            annualized_return=annualized,
            requested_start=requested_start,
            requested_end=requested_end,
        )


class SipSimulator:
    """Steps a recurring contribution schedule across a NAV series.

    Each contribution is priced at the latest NAV on or before its date.
    Contributions that cannot be priced are skipped and counted; when more than
    ``needs_review_threshold`` of them are lost the result is flagged for review.
    """

    def __init__(
        self,
        needs_review_threshold: Decimal | None = None,
        failure_log_limit: int | None = None,
        sample_size: int | None = None,
    ) -> None:
        if needs_review_threshold is None:
            needs_review_threshold = SETTINGS.needs_review_threshold
        self._threshold = Decimal(needs_review_threshold)
        self._failure_log_limit = SETTINGS.failure_log_limit if failure_log_limit is None else failure_log_limit
        self._sample_size = SETTINGS.event_sample_size if sample_size is None else sample_size

    def simulate(self, series: SeriesLike, schedule: InvestmentSchedule) -> SimulationResult:
        series = NavSeries.of(series)
        if series.is_empty:
            raise NoData("No NAV data available")

        resolver = NavResolver(series)
        effective_start = max(schedule.start_date, series.first_date)

        events: list[InvestmentEvent] = []
        total_invested = ZERO
        total_units = ZERO
        skipped = 0
        invalid = 0
        for scheduled in self._schedule_dates(effective_start, schedule.end_date, schedule.frequency):
            event = self._contribute(resolver, scheduled, schedule.amount)
            events.append(event)
            if event.status is EventStatus.INVESTED:
                total_invested += event.amount
                total_units += event.units
            elif event.reason == REASON_INVALID_NAV:
                invalid += 1
            else:
                skipped += 1

        successful = len(events) - skipped - invalid
        if successful == 0:
            raise NoSuccessfulInvestments(
                "No successful investments - all dates had invalid or missing NAV data",
                events=events[: self._failure_log_limit],
                skipped_investments=skipped,
                invalid_nav_count=invalid,
                first_available_date=series.first_date,
            )

        end_observation = resolver.on_or_before(schedule.end_date)
        if end_observation is None:
            raise NoEndNav(
                "No NAV data available for end date calculation",
                first_available_date=series.first_date,
            )
        if not end_observation.is_valid:
            raise InvalidEndNav(f"Invalid end NAV {end_observation.nav} for value calculation")

        current_value = total_units * end_observation.nav
        absolute_return = _percent_change(total_invested, current_value)

        period_days = (schedule.end_date - schedule.start_date).days
        years = _years_between(schedule.start_date, schedule.end_date)
        annualized = ZERO
        if years > 0:
            annualized = _compound_rate(current_value / total_invested, 1 / years)

        lost = skipped + invalid
        status = SimulationStatus.SUCCESS
        if lost > self._threshold * len(events):
            status = SimulationStatus.NEEDS_REVIEW
            logger.warning(
                "SIP simulation lost %d of %d contributions (%d without NAV, %d invalid NAV)",
                lost,
                len(events),
                skipped,
                invalid,
            )

        summary = SimulationSummary(
            total_investment_dates=len(events),
            successful_investments=successful,
            skipped_investments=skipped,
            invalid_nav_count=invalid,
            start_date=schedule.start_date,
            end_date=schedule.end_date,
            effective_start_date=effective_start,
            end_nav=end_observation.nav,
            end_nav_date=end_observation.nav_date,
            period_days=period_days,
            period_years=years,
        )
        return SimulationResult(
            total_invested=total_invested,
            total_units=total_units,
            current_value=current_value,
            absolute_return=absolute_return,
            annualized_return=annualized,
            status=status,
            summary=summary,
            investment_sample=tuple(events[: self._sample_size]),
        )

    @staticmethod
    def _schedule_dates(start: date, end: date, frequency: Frequency) -> Iterator[date]:
        scheduled = start
        while scheduled <= end:
            yield scheduled
            scheduled = frequency.step(scheduled)

    @staticmethod
    def _contribute(resolver: NavResolver, scheduled: date, amount: Decimal) -> InvestmentEvent:
        observation = resolver.on_or_before(scheduled)
        if observation is None:
            return InvestmentEvent(
                scheduled_date=scheduled,
                status=EventStatus.SKIPPED,
                amount=amount,
                reason=REASON_NO_NAV,
            )
        if not observation.is_valid:
            return InvestmentEvent(
                scheduled_date=scheduled,
                status=EventStatus.SKIPPED,
                amount=amount,
                nav=observation.nav,
                nav_date=observation.nav_date,
                reason=REASON_INVALID_NAV,
            )
        return InvestmentEvent(
            scheduled_date=scheduled,
            status=EventStatus.INVESTED,
            amount=amount,
            units=amount / observation.nav,
            nav=observation.nav,
            nav_date=observation.nav_date,
        )


class LumpsumCalculator:
    """One purchase on ``invest_date`` valued at the latest published NAV."""

    def simulate(self, series: SeriesLike, amount: Decimal | str | int | float, invest_date: date | str) -> LumpsumResult:
        amount = coerce_amount(amount)
        invest_day = coerce_date(invest_date)
        series = NavSeries.of(series)

        purchase = NavResolver(series).on_or_before(invest_day)
        latest = series.latest
        if purchase is None or latest is None:
            raise InsufficientData(
                "Insufficient NAV data for calculation",
                first_available_date=series.first_date,
            )
        if not purchase.is_valid:
            raise InvalidNav(f"Invalid purchase NAV {purchase.nav} on {purchase.nav_date.isoformat()}")
        if not latest.is_valid:
            raise InvalidNav(f"Invalid latest NAV {latest.nav} on {latest.nav_date.isoformat()}")

        units = amount / purchase.nav
        current_value = units * latest.nav
        years = _years_between(purchase.nav_date, latest.nav_date)
        annualized = ZERO
        if years > 0:
            annualized = _compound_rate(current_value / amount, 1 / years)

        return LumpsumResult(
            amount=amount,
            purchase_date=purchase.nav_date,
            valuation_date=latest.nav_date,
            purchase_nav=purchase.nav,
            latest_nav=latest.nav,
            units=units,
            current_value=current_value,
            gain=current_value - amount,
            absolute_return=_percent_change(amount, current_value),
            annualized_return=annualized,
            years=years,
        )


def compute_return(
    series: SeriesLike,
    period: Period | str | None = None,
    from_date: date | str | None = None,
    to_date: date | str | None = None,
) -> PointReturnResult:
    return ReturnCalculator().compute(series, period=period, from_date=from_date, to_date=to_date)


def simulate_sip(series: SeriesLike, schedule: InvestmentSchedule) -> SimulationResult:
    return SipSimulator().simulate(series, schedule)


def simulate_lumpsum(series: SeriesLike, amount: Decimal | str | int | float, invest_date: date | str) -> LumpsumResult:
    return LumpsumCalculator().simulate(series, amount, invest_date)
