"""Collaborator interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Any, Protocol, Sequence

from .models import SchemeDetails, SchemeSummary


class NavSeriesRepository(Protocol):
    """Provides scheme metadata and NAV history.

    Raises ``SchemeNotFound`` for unknown schemes; a known scheme without
    history comes back with an empty series.
    """

    def get_scheme(self, code: str) -> SchemeDetails:
        ...

    def list_schemes(self) -> Sequence[SchemeSummary]:
        ...


class ResultCache(Protocol):
    """Keyed store with per-entry time-to-live, in seconds."""

    def get(self, key: str) -> Any | None:
        ...

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ...
