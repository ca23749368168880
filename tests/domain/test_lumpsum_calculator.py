from datetime import date
from decimal import Decimal

import pytest

from nav_analytics.domain.errors import InsufficientData, InvalidNav, InvalidRequest
from nav_analytics.domain.models import NavObservation, NavSeries
from nav_analytics.domain.services import simulate_lumpsum


def make_series(*points: tuple[str, str]) -> NavSeries:
    return NavSeries.from_observations(
        NavObservation(nav_date=date.fromisoformat(d), nav=Decimal(v)) for d, v in points
    )


@pytest.fixture
def series() -> NavSeries:
    return make_series(("2022-01-01", "100"), ("2022-06-01", "110"), ("2023-01-01", "120"))


def test_lumpsum_uses_previous_nav_and_latest_valuation(series: NavSeries):
    result = simulate_lumpsum(series, 10000, "2022-01-03")

    assert result.purchase_date == date(2022, 1, 1)
    assert result.valuation_date == date(2023, 1, 1)
    assert result.units == Decimal("100")
    assert result.current_value == Decimal("12000")
    assert result.gain == Decimal("2000")
    assert result.absolute_return == Decimal("20")
    assert float(result.annualized_return) == pytest.approx(20.0, abs=0.05)


def test_lumpsum_on_latest_date_has_zero_annualized_return(series: NavSeries):
    result = simulate_lumpsum(series, 6000, "2023-02-01")

    assert result.years == 0
    assert result.annualized_return == 0
    assert result.gain == 0


def test_invest_date_before_series_is_insufficient(series: NavSeries):
    with pytest.raises(InsufficientData) as excinfo:
        simulate_lumpsum(series, 5000, "2021-06-01")
    assert excinfo.value.first_available_date == date(2022, 1, 1)
    assert "2022-01-01" in excinfo.value.hint()


def test_bad_inputs_are_rejected(series: NavSeries):
    with pytest.raises(InvalidRequest):
        simulate_lumpsum(series, 0, "2022-03-01")
    with pytest.raises(InvalidRequest):
        simulate_lumpsum(series, 1000, "not-a-date")


def test_zero_purchase_nav_is_rejected():
    series = make_series(("2022-01-01", "0"), ("2023-01-01", "120"))
    with pytest.raises(InvalidNav):
        simulate_lumpsum(series, 1000, "2022-01-01")
