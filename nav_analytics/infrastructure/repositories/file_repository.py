"""CSV / Excel backed repository for offline NAV history."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Sequence

import pandas as pd

from nav_analytics.domain.errors import SchemeNotFound
from nav_analytics.domain.models import SchemeDetails, SchemeMeta, SchemeSummary
from nav_analytics.domain.repositories import NavSeriesRepository
from nav_analytics.infrastructure.parsing.utils import dataframe_to_series, ensure_bytes

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
ZIP_MAGIC = b"PK\x03\x04"


def _is_excel(source: BytesIO | Path | bytes, raw: bytes) -> bool:
    if isinstance(source, Path):
        return source.suffix.lower() in EXCEL_SUFFIXES
    return raw.startswith(ZIP_MAGIC)


def read_nav_table(source: BytesIO | Path | bytes) -> pd.DataFrame:
    raw = ensure_bytes(source)
    if _is_excel(source, raw):
        return pd.read_excel(BytesIO(raw), engine="openpyxl", dtype=str)
    return pd.read_csv(BytesIO(raw), dtype=str)


class FileNavSeriesRepository(NavSeriesRepository):
    """Serves a single scheme whose history lives in one CSV or Excel file."""

    def __init__(self, source: BytesIO | Path | bytes, code: str = "0", name: str = "") -> None:
        self._source = source
        self._code = str(code)
        if not name and isinstance(source, Path):
            name = source.stem
        self._name = name or f"Scheme {self._code}"
        self._details: SchemeDetails | None = None

    def get_scheme(self, code: str) -> SchemeDetails:
        if str(code) != self._code:
            raise SchemeNotFound(f"Scheme {code} is not in this file")
        if self._details is None:
            series = dataframe_to_series(read_nav_table(self._source))
            self._details = SchemeDetails(meta=SchemeMeta(code=self._code, name=self._name), series=series)
        return self._details

    def list_schemes(self) -> Sequence[SchemeSummary]:
        return [SchemeSummary(code=self._code, name=self._name)]
