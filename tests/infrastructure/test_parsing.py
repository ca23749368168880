from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from nav_analytics.domain.errors import ProviderError, SchemeNotFound
from nav_analytics.infrastructure.parsing.mfapi import scheme_from_payload, schemes_from_payload
from nav_analytics.infrastructure.parsing.utils import (
    dataframe_to_series,
    parse_decimal,
    parse_nav_date,
    rows_to_series,
)


def test_parse_decimal_handles_provider_values():
    assert parse_decimal("102.3456") == Decimal("102.3456")
    assert parse_decimal("1,234.50") == Decimal("1234.50")
    assert parse_decimal("0.00000") == 0
    assert parse_decimal("N.A.") == 0
    assert parse_decimal(None) == 0
    assert parse_decimal("(5)") == Decimal("-5")


def test_parse_nav_date_formats():
    assert parse_nav_date("01-02-2023") == date(2023, 2, 1)
    assert parse_nav_date("2023-02-01") == date(2023, 2, 1)
    assert parse_nav_date("2023-02-01 00:00:00") == date(2023, 2, 1)
    assert parse_nav_date("yesterday") is None


def test_parse_nav_date_accepts_cells_and_rejects_blanks():
    assert parse_nav_date(pd.Timestamp("2023-02-01 09:30")) == date(2023, 2, 1)
    assert parse_nav_date(date(2023, 2, 1)) == date(2023, 2, 1)
    assert parse_nav_date(float("nan")) is None
    assert parse_nav_date(None) is None


def test_rows_to_series_drops_bad_dates_and_keeps_last_duplicate():
    series = rows_to_series(
        [
            {"date": "02-01-2023", "nav": "101"},
            {"date": "garbage", "nav": "99"},
            {"date": "01-01-2023", "nav": "100"},
            {"date": "02-01-2023", "nav": "101.5"},
        ]
    )
    assert series.dates() == [date(2023, 1, 1), date(2023, 1, 2)]
    assert series.latest.nav == Decimal("101.5")


def test_dataframe_to_series_finds_columns_case_insensitively():
    df = pd.DataFrame({"NAV Date": ["01-01-2023", "02-01-2023"], "Net Asset Value": ["10", "11"]})
    series = dataframe_to_series(df)
    assert len(series) == 2
    assert series.latest.nav == Decimal("11")


def test_dataframe_without_nav_column_is_rejected():
    with pytest.raises(ValueError):
        dataframe_to_series(pd.DataFrame({"date": ["01-01-2023"]}))


def test_scheme_payload_is_mapped():
    payload = {
        "status": "SUCCESS",
        "meta": {
            "scheme_code": 119551,
            "scheme_name": "Sample Bond Fund - Direct Growth",
            "fund_house": "Sample AMC",
            "scheme_type": "Open Ended Schemes",
            "scheme_category": "Debt Scheme - Banking and PSU Fund",
        },
        "data": [
            {"date": "03-01-2023", "nav": "25.1000"},
            {"date": "02-01-2023", "nav": "25.0000"},
        ],
    }

    details = scheme_from_payload("119551", payload)

    assert details.meta.code == "119551"
    assert details.meta.category == "Debt Scheme - Banking and PSU Fund"
    assert details.series.first.nav_date == date(2023, 1, 2)
    assert details.series.latest.nav == Decimal("25.1000")


def test_unsuccessful_payload_is_scheme_not_found():
    with pytest.raises(SchemeNotFound):
        scheme_from_payload("1", {"status": "FAIL", "data": []})


def test_scheme_list_payload():
    schemes = schemes_from_payload(
        [{"schemeCode": 1, "schemeName": "Alpha"}, {"schemeCode": 2, "schemeName": ""}]
    )
    assert [s.code for s in schemes] == ["1"]
    with pytest.raises(ProviderError):
        schemes_from_payload({"unexpected": True})
