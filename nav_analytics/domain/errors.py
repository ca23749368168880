"""Failure taxonomy for NAV calculations and their data boundary."""
from __future__ import annotations

from datetime import date
from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import InvestmentEvent


class NavAnalyticsError(Exception):
    """Base class for every failure raised by the package."""

    def __init__(self, message: str, *, first_available_date: date | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.first_available_date = first_available_date

    def hint(self) -> str | None:
        if self.first_available_date is None:
            return None
        return f"NAV history starts on {self.first_available_date.isoformat()}; try a start date on or after it."


class InvalidRequest(NavAnalyticsError, ValueError):
    """Malformed or missing parameters. Never worth retrying."""


class InsufficientData(NavAnalyticsError):
    """The series cannot answer the request (empty, or the target predates it)."""


class NoData(InsufficientData):
    """The series holds no observations at all."""


class NoEndNav(InsufficientData):
    """No observation exists on or before the valuation date."""


class InvalidNav(NavAnalyticsError):
    """A zero or negative NAV was found where a positive value is required."""


class InvalidEndNav(InvalidNav):
    """The valuation NAV is zero or negative."""


class NoSuccessfulInvestments(NavAnalyticsError):
    """Every scheduled contribution was skipped."""

    def __init__(
        self,
        message: str,
        *,
        events: Sequence["InvestmentEvent"] = (),
        skipped_investments: int = 0,
        invalid_nav_count: int = 0,
        first_available_date: date | None = None,
    ) -> None:
        super().__init__(message, first_available_date=first_available_date)
        self.events = tuple(events)
        self.skipped_investments = skipped_investments
        self.invalid_nav_count = invalid_nav_count


class SchemeNotFound(NavAnalyticsError):
    """The provider does not know the requested scheme."""


class ProviderError(NavAnalyticsError):
    """The NAV provider could not be reached or answered unexpectedly."""
