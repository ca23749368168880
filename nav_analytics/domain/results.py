"""Domain-level results for NAV calculations."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Sequence

from .models import InvestmentEvent


class SimulationStatus(str, Enum):
    SUCCESS = "success"
    NEEDS_REVIEW = "needs_review"


@dataclass(frozen=True)
class PointReturnResult:
    start_date: date
    end_date: date
    start_nav: Decimal
    end_nav: Decimal
    simple_return: Decimal
    annualized_return: Decimal | None
    requested_start: date
    requested_end: date


@dataclass(frozen=True)
class SimulationSummary:
    total_investment_dates: int
    successful_investments: int
    skipped_investments: int
    invalid_nav_count: int
    start_date: date
    end_date: date
    effective_start_date: date
    end_nav: Decimal
    end_nav_date: date
    period_days: int
    period_years: Decimal

    @property
    def lost_investments(self) -> int:
        return self.skipped_investments + self.invalid_nav_count


@dataclass(frozen=True)
class SimulationResult:
    total_invested: Decimal
    total_units: Decimal
    current_value: Decimal
    absolute_return: Decimal
    annualized_return: Decimal
    status: SimulationStatus
    summary: SimulationSummary
    investment_sample: Sequence[InvestmentEvent] = field(default_factory=tuple)

    @property
    def needs_review(self) -> bool:
        return self.status is SimulationStatus.NEEDS_REVIEW


@dataclass(frozen=True)
class LumpsumResult:
    amount: Decimal
    purchase_date: date
    valuation_date: date
    purchase_nav: Decimal
    latest_nav: Decimal
    units: Decimal
    current_value: Decimal
    gain: Decimal
    absolute_return: Decimal
    annualized_return: Decimal
    years: Decimal
