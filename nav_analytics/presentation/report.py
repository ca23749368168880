"""Tabular, CSV and HTML renderings of calculation results."""
from __future__ import annotations

import csv
import io
from decimal import Decimal
from html import escape
from typing import Sequence

from nav_analytics.domain.models import InvestmentEvent
from nav_analytics.domain.results import LumpsumResult, PointReturnResult, SimulationResult

def fmt(value: Decimal | None, places: int = 2) -> str:
    # Short spans annualize to values far wider than the decimal context.
    if value is None:
        return ""
    return f"{value:.{places}f}"


def review_warning(result: SimulationResult) -> str | None:
    if not result.needs_review:
        return None
    summary = result.summary
    return (
        f"Needs review: {summary.lost_investments} of {summary.total_investment_dates} contributions were not invested "
        f"({summary.skipped_investments} without NAV data, {summary.invalid_nav_count} with invalid NAV)."
    )


def events_to_rows(events: Sequence[InvestmentEvent]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for event in events:
        rows.append(
            {
                "date": event.scheduled_date.isoformat(),
                "status": event.status.value,
                "nav_date": event.nav_date.isoformat() if event.nav_date else "",
                "nav": fmt(event.nav, 4),
                "amount": fmt(event.amount),
                "units": fmt(event.units, 4),
                "reason": event.reason or "",
            }
        )
    return rows


def sip_rows(result: SimulationResult) -> list[tuple[str, str]]:
    summary = result.summary
    return [
        ("Status", result.status.value),
        ("Total invested", fmt(result.total_invested)),
        ("Total units", fmt(result.total_units, 4)),
        ("Current value", fmt(result.current_value)),
        ("Absolute return %", fmt(result.absolute_return)),
        ("Annualized return %", fmt(result.annualized_return)),
        ("Investment dates", str(summary.total_investment_dates)),
        ("Successful", str(summary.successful_investments)),
        ("Skipped (no NAV)", str(summary.skipped_investments)),
        ("Skipped (invalid NAV)", str(summary.invalid_nav_count)),
        ("Period", f"{summary.start_date.isoformat()} to {summary.end_date.isoformat()}"),
        ("First contribution on or after", summary.effective_start_date.isoformat()),
        ("End NAV", f"{fmt(summary.end_nav, 4)} ({summary.end_nav_date.isoformat()})"),
        ("Period years", fmt(summary.period_years)),
    ]


def returns_rows(result: PointReturnResult) -> list[tuple[str, str]]:
    return [
        ("Start", f"{result.start_date.isoformat()} @ {fmt(result.start_nav, 4)}"),
        ("End", f"{result.end_date.isoformat()} @ {fmt(result.end_nav, 4)}"),
        ("Simple return %", fmt(result.simple_return)),
        ("Annualized return %", fmt(result.annualized_return) or "n/a"),
    ]


def lumpsum_rows(result: LumpsumResult) -> list[tuple[str, str]]:
    return [
        ("Amount", fmt(result.amount)),
        ("Purchase", f"{result.purchase_date.isoformat()} @ {fmt(result.purchase_nav, 4)}"),
        ("Valuation", f"{result.valuation_date.isoformat()} @ {fmt(result.latest_nav, 4)}"),
        ("Units", fmt(result.units, 4)),
        ("Current value", fmt(result.current_value)),
        ("Gain", fmt(result.gain)),
        ("Absolute return %", fmt(result.absolute_return)),
        ("Annualized return %", fmt(result.annualized_return)),
        ("Years", fmt(result.years)),
    ]


def render_csv(events: Sequence[InvestmentEvent]) -> bytes:
    rows = events_to_rows(events)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def render_html(result: SimulationResult) -> str:
    parts = []
    warning = review_warning(result)
    if warning:
        parts.append(f"<p class=\"warning\">{escape(warning)}</p>")
    summary_body = "".join(
        f"<tr><th>{escape(label)}</th><td>{escape(value)}</td></tr>" for label, value in sip_rows(result)
    )
    parts.append(f"<table><tbody>{summary_body}</tbody></table>")
    rows = events_to_rows(result.investment_sample)
    if rows:
        header = "".join(f"<th>{escape(col)}</th>" for col in rows[0].keys())
        body = "".join(
            "<tr>" + "".join(f"<td>{escape(value)}</td>" for value in row.values()) + "</tr>" for row in rows
        )
        parts.append(f"<table><thead><tr>{header}</tr></thead><tbody>{body}</tbody></table>")
    return "".join(parts)
