"""Central configuration for the NAV analytics package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal

DEFAULT_PROVIDER_BASE_URL = "https://api.mfapi.in/mf"


def _env(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


@dataclass(slots=True, frozen=True)
class Settings:
    provider_base_url: str
    request_timeout: float
    scheme_cache_ttl: float
    scheme_list_cache_ttl: float
    result_cache_ttl: float
    cache_max_size: int
    needs_review_threshold: Decimal
    failure_log_limit: int
    event_sample_size: int
    annualize_min_days: int
    log_level: str


def load_settings() -> Settings:
    return Settings(
        provider_base_url=_env("NAV_PROVIDER_BASE_URL", DEFAULT_PROVIDER_BASE_URL).rstrip("/"),
        request_timeout=float(_env("NAV_REQUEST_TIMEOUT", "15")),
        scheme_cache_ttl=float(_env("NAV_SCHEME_CACHE_TTL", "1800")),
        scheme_list_cache_ttl=float(_env("NAV_SCHEME_LIST_CACHE_TTL", "7200")),
        result_cache_ttl=float(_env("NAV_RESULT_CACHE_TTL", "1800")),
        cache_max_size=int(_env("NAV_CACHE_MAX_SIZE", "512")),
        needs_review_threshold=Decimal(_env("NAV_NEEDS_REVIEW_THRESHOLD", "0.10")),
        failure_log_limit=10,
        event_sample_size=5,
        annualize_min_days=30,
        log_level=_env("NAV_LOG_LEVEL", "INFO").upper(),
    )


SETTINGS = load_settings()
