"""Application services combining NAV providers, the result cache and calculators."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal

from nav_analytics.config import SETTINGS, Settings
from nav_analytics.domain.errors import InvalidRequest, ProviderError
from nav_analytics.domain.models import InvestmentSchedule, Period, SchemeDetails, coerce_amount, coerce_date
from nav_analytics.domain.repositories import NavSeriesRepository, ResultCache
from nav_analytics.domain.services import LumpsumCalculator, ReturnCalculator, SipSimulator

from .dto import LumpsumResponse, ReturnsResponse, SchemeListResponse, SchemeResponse, SipResponse

logger = logging.getLogger(__name__)

ALL_SCHEMES_KEY = "all_schemes"
STALE_LIST_LIMIT = 100


def validate_scheme_code(code: object) -> str:
    text = str(code).strip() if code is not None else ""
    if not text.isdigit():
        raise InvalidRequest("Invalid scheme code")
    return text


@dataclass(slots=True)
class NavAnalyticsContext:
    repository: NavSeriesRepository
    cache: ResultCache | None = None
    settings: Settings = field(default_factory=lambda: SETTINGS)


class _SchemeUseCase:
    def __init__(self, context: NavAnalyticsContext) -> None:
        self._context = context

    def _cache_get(self, key: str):
        if self._context.cache is None:
            return None
        return self._context.cache.get(key)

    def _cache_set(self, key: str, value, ttl: float) -> None:
        if self._context.cache is not None:
            self._context.cache.set(key, value, ttl)

    def _load_scheme(self, code: str) -> tuple[SchemeDetails, bool]:
        key = f"scheme_{code}"
        cached = self._cache_get(key)
        if cached is not None:
            return cached, True
        details = self._context.repository.get_scheme(code)
        self._cache_set(key, details, self._context.settings.scheme_cache_ttl)
        return details, False


class GetSchemeUseCase(_SchemeUseCase):
    def execute(self, code: object) -> SchemeResponse:
        details, cached = self._load_scheme(validate_scheme_code(code))
        return SchemeResponse(details=details, cached=cached)


class SearchSchemesUseCase(_SchemeUseCase):
    def execute(self, search: str = "", limit: int | None = None) -> SchemeListResponse:
        schemes = self._cache_get(ALL_SCHEMES_KEY)
        cached = schemes is not None
        if schemes is None:
            try:
                schemes = list(self._context.repository.list_schemes())
            except ProviderError:
                stale = self._stale_schemes()
                if stale is None:
                    raise
                logger.warning("Returning stale scheme list due to provider error")
                return SchemeListResponse(
                    schemes=tuple(stale[:STALE_LIST_LIMIT]),
                    total=len(stale),
                    has_more=len(stale) > STALE_LIST_LIMIT,
                    cached=True,
                    stale=True,
                )
            self._cache_set(ALL_SCHEMES_KEY, schemes, self._context.settings.scheme_list_cache_ttl)

        matches = schemes
        if search:
            needle = search.lower()
            matches = [scheme for scheme in schemes if needle in scheme.name.lower()]
        has_more = False
        if limit and limit > 0:
            has_more = len(matches) > limit
            matches = matches[:limit]
        return SchemeListResponse(schemes=tuple(matches), total=len(schemes), has_more=has_more, cached=cached)

    def _stale_schemes(self):
        get_stale = getattr(self._context.cache, "get_stale", None)
        if get_stale is None:
            return None
        return get_stale(ALL_SCHEMES_KEY)


class ComputeReturnsUseCase(_SchemeUseCase):
    def execute(
        self,
        code: object,
        period: Period | str | None = None,
        from_date: date | str | None = None,
        to_date: date | str | None = None,
    ) -> ReturnsResponse:
        code = validate_scheme_code(code)
        if period is not None:
            period = Period.parse(period)
            key = f"returns_{code}_{period.value}"
        else:
            if from_date is None or to_date is None:
                raise InvalidRequest(
                    "Either period (1m|3m|6m|1y) or both from and to dates (YYYY-MM-DD) must be provided"
                )
            from_date, to_date = coerce_date(from_date), coerce_date(to_date)
            key = f"returns_{code}_{from_date.isoformat()}_{to_date.isoformat()}"

        cached = self._cache_get(key)
        if cached is not None:
            logger.debug("Serving cached returns for %s", key)
            return replace(cached, cached=True)

        details, _ = self._load_scheme(code)
        result = ReturnCalculator().compute(details.series, period=period, from_date=from_date, to_date=to_date)
        response = ReturnsResponse(scheme_code=code, scheme_name=details.meta.name, result=result)
        self._cache_set(key, response, self._context.settings.result_cache_ttl)
        return response


class SimulateSipUseCase(_SchemeUseCase):
    def execute(self, code: object, schedule: InvestmentSchedule) -> SipResponse:
        code = validate_scheme_code(code)
        key = "sip_{}_{}_{}_{}_{}".format(
            code,
            schedule.amount.normalize(),
            schedule.frequency.value,
            schedule.start_date.isoformat(),
            schedule.end_date.isoformat(),
        )
        cached = self._cache_get(key)
        if cached is not None:
            return replace(cached, cached=True)

        details, _ = self._load_scheme(code)
        simulator = SipSimulator(needs_review_threshold=self._context.settings.needs_review_threshold)
        result = simulator.simulate(details.series, schedule)
        response = SipResponse(scheme_code=code, scheme_name=details.meta.name, schedule=schedule, result=result)
        if result.needs_review:
            logger.info("SIP result for scheme %s needs review; not caching", code)
        else:
            self._cache_set(key, response, self._context.settings.result_cache_ttl)
        return response


class SimulateLumpsumUseCase(_SchemeUseCase):
    def execute(self, code: object, amount: Decimal | str | int | float, invest_date: date | str) -> LumpsumResponse:
        code = validate_scheme_code(code)
        amount = coerce_amount(amount)
        invest_day = coerce_date(invest_date)
        key = f"lumpsum_{code}_{amount.normalize()}_{invest_day.isoformat()}"
        cached = self._cache_get(key)
        if cached is not None:
            return replace(cached, cached=True)

        details, _ = self._load_scheme(code)
        result = LumpsumCalculator().simulate(details.series, amount, invest_day)
        response = LumpsumResponse(scheme_code=code, scheme_name=details.meta.name, result=result)
        self._cache_set(key, response, self._context.settings.result_cache_ttl)
        return response
