"""Parsers for mfapi.in JSON payloads."""
from __future__ import annotations

from typing import Any, Mapping, Sequence

from nav_analytics.domain.errors import ProviderError, SchemeNotFound
from nav_analytics.domain.models import SchemeDetails, SchemeMeta, SchemeSummary
from nav_analytics.infrastructure.parsing.utils import rows_to_series

SUCCESS_STATUS = "SUCCESS"


def scheme_from_payload(code: str, payload: Mapping[str, Any]) -> SchemeDetails:
    if not isinstance(payload, Mapping):
        raise ProviderError(f"Unexpected payload for scheme {code}: {type(payload).__name__}")
    if payload.get("status") != SUCCESS_STATUS:
        raise SchemeNotFound("Scheme not found or invalid")

    meta = payload.get("meta") or {}
    details = SchemeMeta(
        code=str(meta.get("scheme_code") or code),
        name=str(meta.get("scheme_name") or ""),
        fund_house=str(meta.get("fund_house") or ""),
        scheme_type=str(meta.get("scheme_type") or ""),
        category=str(meta.get("scheme_category") or ""),
    )
    rows = payload.get("data") or []
    return SchemeDetails(meta=details, series=rows_to_series(rows))


def schemes_from_payload(payload: Sequence[Mapping[str, Any]]) -> list[SchemeSummary]:
    if not isinstance(payload, list):
        raise ProviderError(f"Unexpected scheme list payload: {type(payload).__name__}")
    schemes: list[SchemeSummary] = []
    for item in payload:
        code = item.get("schemeCode")
        name = item.get("schemeName")
        if code is None or not name:
            continue
        schemes.append(SchemeSummary(code=str(code), name=str(name)))
    return schemes
