"""Mutual fund NAV analytics: point returns, SIP and lumpsum simulation."""
from nav_analytics.application.use_cases import (
    ComputeReturnsUseCase,
    GetSchemeUseCase,
    NavAnalyticsContext,
    SearchSchemesUseCase,
    SimulateLumpsumUseCase,
    SimulateSipUseCase,
)
from nav_analytics.domain.models import InvestmentSchedule, NavObservation, NavSeries
from nav_analytics.domain.resolver import NavResolver
from nav_analytics.domain.services import (
    LumpsumCalculator,
    ReturnCalculator,
    SipSimulator,
    compute_return,
    simulate_lumpsum,
    simulate_sip,
)
from nav_analytics.infrastructure.repositories.file_repository import FileNavSeriesRepository
from nav_analytics.infrastructure.repositories.mfapi_repository import MfapiNavRepository
from nav_analytics.infrastructure.storage.ttl_cache import InMemoryTtlCache

__all__ = [
    "ComputeReturnsUseCase",
    "GetSchemeUseCase",
    "NavAnalyticsContext",
    "SearchSchemesUseCase",
    "SimulateLumpsumUseCase",
    "SimulateSipUseCase",
    "InvestmentSchedule",
    "NavObservation",
    "NavSeries",
    "NavResolver",
    "LumpsumCalculator",
    "ReturnCalculator",
    "SipSimulator",
    "compute_return",
    "simulate_lumpsum",
    "simulate_sip",
    "FileNavSeriesRepository",
    "MfapiNavRepository",
    "InMemoryTtlCache",
]
