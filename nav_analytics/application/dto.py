"""Application-level DTOs returned by the use cases."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from nav_analytics.domain.models import InvestmentSchedule, SchemeDetails, SchemeSummary
from nav_analytics.domain.results import LumpsumResult, PointReturnResult, SimulationResult


@dataclass(slots=True, frozen=True)
class SchemeResponse:
    details: SchemeDetails
    cached: bool = False


@dataclass(slots=True, frozen=True)
class SchemeListResponse:
    schemes: Sequence[SchemeSummary]
    total: int
    has_more: bool
    cached: bool = False
    stale: bool = False


@dataclass(slots=True, frozen=True)
class ReturnsResponse:
    scheme_code: str
    scheme_name: str
    result: PointReturnResult
    cached: bool = False


@dataclass(slots=True, frozen=True)
class SipResponse:
    scheme_code: str
    scheme_name: str
    schedule: InvestmentSchedule
    result: SimulationResult
    cached: bool = False


@dataclass(slots=True, frozen=True)
class LumpsumResponse:
    scheme_code: str
    scheme_name: str
    result: LumpsumResult
    cached: bool = False
