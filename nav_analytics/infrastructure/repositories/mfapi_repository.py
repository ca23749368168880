"""HTTP repository backed by the public mfapi.in service."""
from __future__ import annotations

import logging
from typing import Any, Sequence

import requests

from nav_analytics.config import SETTINGS
from nav_analytics.domain.errors import ProviderError, SchemeNotFound
from nav_analytics.domain.models import SchemeDetails, SchemeSummary
from nav_analytics.domain.repositories import NavSeriesRepository
from nav_analytics.infrastructure.parsing.mfapi import scheme_from_payload, schemes_from_payload

logger = logging.getLogger(__name__)

USER_AGENT = "nav-analytics/1.0"


class MfapiNavRepository(NavSeriesRepository):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = (base_url or SETTINGS.provider_base_url).rstrip("/")
        self._timeout = SETTINGS.request_timeout if timeout is None else timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})

    def get_scheme(self, code: str) -> SchemeDetails:
        payload = self._get_json(f"{self._base_url}/{code}")
        details = scheme_from_payload(code, payload)
        logger.info("Fetched %d NAV observations for scheme %s", len(details.series), code)
        return details

    def list_schemes(self) -> Sequence[SchemeSummary]:
        schemes = schemes_from_payload(self._get_json(self._base_url))
        logger.info("Fetched %d schemes", len(schemes))
        return schemes

    def _get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("NAV provider request failed: %s", exc)
            raise ProviderError(f"NAV provider request failed: {exc}") from exc
        if response.status_code == 404:
            raise SchemeNotFound("Scheme not found")
        if response.status_code != 200:
            raise ProviderError(f"NAV provider returned status: {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError("NAV provider returned malformed JSON") from exc
