"""Streamlit front-end for mutual fund NAV analytics."""
from __future__ import annotations

from datetime import date, timedelta

import pandas as pd
import streamlit as st

from nav_analytics import (
    ComputeReturnsUseCase,
    GetSchemeUseCase,
    InMemoryTtlCache,
    InvestmentSchedule,
    MfapiNavRepository,
    NavAnalyticsContext,
    SearchSchemesUseCase,
    SimulateLumpsumUseCase,
    SimulateSipUseCase,
)
from nav_analytics.domain.errors import NavAnalyticsError, NoSuccessfulInvestments
from nav_analytics.domain.models import NavSeries
from nav_analytics.log import setup_logging
from nav_analytics.presentation.report import (
    events_to_rows,
    lumpsum_rows,
    render_csv,
    render_html,
    returns_rows,
    review_warning,
    sip_rows,
)


st.set_page_config(page_title="Mutual Fund Explorer", layout="wide")
st.title("Mutual Fund NAV Explorer")


@st.cache_resource
def get_context() -> NavAnalyticsContext:
    setup_logging()
    return NavAnalyticsContext(repository=MfapiNavRepository(), cache=InMemoryTtlCache())


def series_to_dataframe(series: NavSeries) -> pd.DataFrame:
    return pd.DataFrame(
        [{"date": pd.Timestamp(o.nav_date), "nav": float(o.nav)} for o in series if o.is_valid],
        columns=["date", "nav"],
    )


def show_rows(rows: list[tuple[str, str]]) -> None:
    st.table(pd.DataFrame(rows, columns=["metric", "value"]).set_index("metric"))


def show_error(exc: NavAnalyticsError) -> None:
    st.error(exc.message)
    if exc.hint():
        st.info(exc.hint())
    if isinstance(exc, NoSuccessfulInvestments) and exc.events:
        st.dataframe(pd.DataFrame(events_to_rows(exc.events)))


context = get_context()

search = st.sidebar.text_input("Search schemes", value="")
try:
    listing = SearchSchemesUseCase(context).execute(search=search, limit=50)
except NavAnalyticsError as exc:
    show_error(exc)
    st.stop()
if listing.stale:
    st.sidebar.warning("Provider unavailable, showing a cached scheme list.")
if not listing.schemes:
    st.info("No schemes match the search.")
    st.stop()

labels = {f"{s.name} ({s.code})": s.code for s in listing.schemes}
code = labels[st.sidebar.selectbox("Scheme", list(labels))]

try:
    details = GetSchemeUseCase(context).execute(code).details
except NavAnalyticsError as exc:
    show_error(exc)
    st.stop()

st.subheader(details.meta.name)
st.caption(" | ".join(filter(None, [details.meta.fund_house, details.meta.scheme_type, details.meta.category])))
nav_df = series_to_dataframe(details.series)
if nav_df.empty:
    st.warning("This scheme has no NAV history.")
    st.stop()
st.line_chart(nav_df.set_index("date")["nav"])

first_day = details.series.first_date
last_day = details.series.latest.nav_date
returns_tab, sip_tab, lumpsum_tab = st.tabs(["Returns", "SIP", "Lumpsum"])

with returns_tab:
    cols = st.columns(4)
    for col, period in zip(cols, ["1m", "3m", "6m", "1y"]):
        with col:
            try:
                result = ComputeReturnsUseCase(context).execute(code, period=period).result
            except NavAnalyticsError as exc:
                st.metric(period, "n/a", help=exc.message)
                continue
            st.metric(period, f"{result.simple_return:.2f}%")

    with st.expander("Custom date range return"):
        range_from = st.date_input("Range start", value=max(first_day, last_day - timedelta(days=180)), key="rf")
        range_to = st.date_input("Range end", value=last_day, key="rt")
        if st.button("Compute range return"):
            try:
                response = ComputeReturnsUseCase(context).execute(code, from_date=range_from, to_date=range_to)
            except NavAnalyticsError as exc:
                show_error(exc)
            else:
                show_rows(returns_rows(response.result))

with sip_tab:
    col1, col2 = st.columns(2)
    with col1:
        amount = st.number_input("Amount per instalment", min_value=100, value=5000, step=500)
        frequency = st.selectbox("Frequency", ["monthly", "weekly", "daily"])
    with col2:
        sip_from = st.date_input("From", value=max(first_day, last_day - timedelta(days=3 * 365)))
        sip_to = st.date_input("To", value=last_day)
    if st.button("Simulate SIP"):
        try:
            schedule = InvestmentSchedule.create(amount, frequency, sip_from, sip_to)
            response = SimulateSipUseCase(context).execute(code, schedule)
        except NavAnalyticsError as exc:
            show_error(exc)
        else:
            warning = review_warning(response.result)
            if warning:
                st.warning(warning)
            show_rows(sip_rows(response.result))
            st.dataframe(pd.DataFrame(events_to_rows(response.result.investment_sample)))
            st.download_button(
                "Download sample CSV",
                data=render_csv(response.result.investment_sample),
                file_name=f"sip_{code}.csv",
                mime="text/csv",
            )
            st.download_button(
                "Download HTML report",
                data=render_html(response.result).encode("utf-8"),
                file_name=f"sip_{code}.html",
                mime="text/html",
            )

with lumpsum_tab:
    lump_amount = st.number_input("Investment amount", min_value=100, value=10000, step=1000)
    lump_date: date = st.date_input("Investment date", value=max(first_day, last_day - timedelta(days=365)))
    if st.button("Calculate lumpsum"):
        try:
            response = SimulateLumpsumUseCase(context).execute(code, lump_amount, lump_date)
        except NavAnalyticsError as exc:
            show_error(exc)
        else:
            show_rows(lumpsum_rows(response.result))
