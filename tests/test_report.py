from dataclasses import replace
from datetime import date
from decimal import Decimal

from nav_analytics.domain.models import InvestmentSchedule, NavObservation, NavSeries
from nav_analytics.domain.services import simulate_lumpsum, simulate_sip
from nav_analytics.presentation.report import lumpsum_rows, render_csv, render_html, review_warning, sip_rows


def make_series(*points: tuple[str, str]) -> NavSeries:
    return NavSeries.from_observations(
        NavObservation(nav_date=date.fromisoformat(d), nav=Decimal(v)) for d, v in points
    )


def test_clean_result_has_no_warning():
    series = make_series(("2023-01-01", "100"), ("2023-02-01", "102"), ("2023-03-01", "105"))
    result = simulate_sip(series, InvestmentSchedule.create(5000, "monthly", "2023-01-01", "2023-03-01"))

    assert review_warning(result) is None
    assert dict(sip_rows(result))["Total invested"] == "15000.00"
    assert "warning" not in render_html(result)


def test_degraded_result_shows_warning_and_counts():
    series = make_series(("2023-01-01", "100"), ("2023-02-01", "0"), ("2023-03-01", "105"))
    result = simulate_sip(series, InvestmentSchedule.create(5000, "monthly", "2023-01-01", "2023-03-01"))

    warning = review_warning(result)
    assert "1 of 3" in warning
    assert warning in render_html(result)
    assert dict(sip_rows(result))["Current value"] != ""


def test_csv_lists_sample_events():
    series = make_series(("2023-01-01", "100"), ("2023-02-01", "0"), ("2023-03-01", "105"))
    result = simulate_sip(series, InvestmentSchedule.create(5000, "monthly", "2023-01-01", "2023-03-01"))

    lines = render_csv(result.investment_sample).decode("utf-8").strip().splitlines()

    assert lines[0] == "date,status,nav_date,nav,amount,units,reason"
    assert lines[2].startswith("2023-02-01,skipped")
    assert lines[2].endswith("Invalid NAV")


def test_one_day_sip_prints_full_annualized_figure():
    series = make_series(("2023-01-01", "100"), ("2023-01-02", "200"))
    result = simulate_sip(series, InvestmentSchedule.create(100, "daily", "2023-01-01", "2023-01-02"))

    rows = dict(sip_rows(result))

    annualized = rows["Annualized return %"]
    assert "E" not in annualized
    assert annualized.endswith(".00")
    assert int(annualized.split(".")[0]) > 10**60
    assert rows["Absolute return %"] == "50.00"
    assert annualized in render_html(result)


def test_one_day_lumpsum_prints_full_annualized_figure():
    series = make_series(("2023-01-01", "100"), ("2023-01-02", "125"))
    result = simulate_lumpsum(series, 1000, "2023-01-01")

    rows = dict(lumpsum_rows(result))

    annualized = rows["Annualized return %"]
    assert "E" not in annualized
    assert int(annualized.split(".")[0]) > 10**30
    assert rows["Current value"] == "1250.00"
    assert rows["Units"] == "10.0000"


def test_html_escapes_event_text():
    series = make_series(("2023-01-01", "100"), ("2023-02-01", "0"), ("2023-03-01", "105"))
    result = simulate_sip(series, InvestmentSchedule.create(5000, "monthly", "2023-01-01", "2023-03-01"))
    skipped = replace(result.investment_sample[1], reason="NAV <0> & stale")
    result = replace(result, investment_sample=(skipped,))

    html = render_html(result)

    assert "<td>NAV &lt;0&gt; &amp; stale</td>" in html
    assert "<0>" not in html
