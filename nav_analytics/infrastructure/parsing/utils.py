"""Shared parsing utilities for NAV history ingestion."""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from io import BytesIO
from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd

from nav_analytics.domain.errors import InvalidRequest
from nav_analytics.domain.models import NavObservation, NavSeries, coerce_date

logger = logging.getLogger(__name__)


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def parse_decimal(value: object) -> Decimal:
    """Parse a provider NAV. Blank or garbled values become ``Decimal("0")``, the invalid marker."""
    if value is None:
        return Decimal("0")
    s = str(value).strip()
    if not s:
        return Decimal("0")
    if s.upper() == "NAN":
        return Decimal("0")
    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]
    for ch in [",", "₹", "$", " "]:
        s = s.replace(ch, "")
    try:
        result = Decimal(s)
    except InvalidOperation:
        return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    if negative:
        result = -result
    return result


def parse_nav_date(value: object) -> date | None:
    """Calendar day of a provider date cell, or ``None`` when it cannot be read."""
    if value is None:
        return None
    try:
        return coerce_date(value if isinstance(value, date) else str(value))
    except InvalidRequest:
        return None


def rows_to_series(rows: Iterable[Mapping[str, object]], date_key: str = "date", nav_key: str = "nav") -> NavSeries:
    """Build a series from ``{date, nav}`` rows, dropping rows whose date cannot be read."""
    observations: list[NavObservation] = []
    dropped = 0
    for row in rows:
        nav_date = parse_nav_date(row.get(date_key))
        if nav_date is None:
            dropped += 1
            continue
        observations.append(NavObservation(nav_date=nav_date, nav=parse_decimal(row.get(nav_key))))
    if dropped:
        logger.warning("Dropped %d NAV rows with unreadable dates", dropped)
    return NavSeries.from_observations(observations)


KNOWN_DATE_COLUMNS = [
    "date",
    "nav date",
    "nav_date",
    "valuation date",
]

KNOWN_NAV_COLUMNS = [
    "nav",
    "net asset value",
    "nav value",
    "price",
]


def _find_column(df: pd.DataFrame, candidates: list[str]) -> str | None:
    lower_map = {str(column).strip().lower(): column for column in df.columns}
    for candidate in candidates:
        if candidate in lower_map:
            return lower_map[candidate]
    return None


def dataframe_to_series(df: pd.DataFrame) -> NavSeries:
    date_column = _find_column(df, KNOWN_DATE_COLUMNS)
    nav_column = _find_column(df, KNOWN_NAV_COLUMNS)
    if date_column is None or nav_column is None:
        raise ValueError(f"NAV table needs date and nav columns, found {list(df.columns)!r}")
    rows = df[[date_column, nav_column]].rename(columns={date_column: "date", nav_column: "nav"})
    return rows_to_series(rows.to_dict(orient="records"))
