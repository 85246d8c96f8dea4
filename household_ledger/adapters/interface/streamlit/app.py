"""Streamlit dashboard entry point."""

from datetime import date
from decimal import Decimal
import os

import streamlit as st
import altair as alt

from household_ledger.domain.exceptions import NotFoundError
from household_ledger.domain.models import (
    AccountRow,
    AccountTotalsView,
    NetWorthSeries,
    NetWorthSummary,
    Period,
    ReconciliationResult,
)
from household_ledger.infrastructure.container import (
    build_account_totals_use_case,
    build_create_valuation_use_case,
    build_database_adapter,
    build_net_worth_series_use_case,
)
from household_ledger.infrastructure.logging.logger import get_usage_logger


PERIODS = {
    "30 days": Period.last_30_days,
    "90 days": Period.last_90_days,
    "365 days": Period.last_365_days,
    "MTD": Period.current_month,
    "YTD": Period.year_to_date,
}


def _fetch_net_worth_series(family_id: str, period: Period) -> NetWorthSeries:
    """Fetch the net worth series from the ledger database."""
    use_case = build_net_worth_series_use_case(build_database_adapter())
    return use_case.execute(family_id, period)


@st.cache_data(show_spinner=False, ttl=300)
def _load_net_worth_series(family_id: str, period: Period) -> NetWorthSeries:
    """Cached wrapper around _fetch_net_worth_series."""
    return _fetch_net_worth_series(family_id, period)


def _fetch_account_totals(
    family_id: str,
) -> tuple[AccountTotalsView, NetWorthSummary]:
    """Fetch grouped accounts and the net worth summary."""
    use_case = build_account_totals_use_case(build_database_adapter())
    totals = use_case.build(family_id)
    return totals.view(), totals.net_worth_summary()


@st.cache_data(show_spinner=False, ttl=300)
def _load_account_totals(
    family_id: str,
) -> tuple[AccountTotalsView, NetWorthSummary]:
    """Cached wrapper around _fetch_account_totals."""
    return _fetch_account_totals(family_id)


def _format_currency(value: Decimal, currency_code: str) -> str:
    """Format currency values for display."""
    symbol = "€" if currency_code == "EUR" else currency_code
    return f"{value:,.2f} {symbol}"


def _format_trend(series: NetWorthSeries) -> str | None:
    trend = series.trend
    if trend is None:
        return None
    sign = "+" if trend.value.amount >= 0 else ""
    delta = f"{sign}{trend.value.amount:,.2f}"
    if trend.percent is None:
        return delta
    return f"{delta} ({sign}{trend.percent}%)"


def _series_chart_data(series: NetWorthSeries) -> list[dict]:
    """Return Altair-ready records for the net worth line."""
    return [
        {
            "date": point.date.isoformat(),
            "net_worth": float(point.balance.amount),
            "label": _format_currency(point.balance.amount, series.currency),
        }
        for point in series.points
    ]


def _render_net_worth_chart(series: NetWorthSeries) -> None:
    """Render the net worth line chart."""
    data = _series_chart_data(series)
    if not data:
        st.info("No net worth data for this period.")
        return
    chart = (
        alt.Chart(alt.Data(values=data))
        .mark_line(point=True)
        .encode(
            x=alt.X("date:T", title=None),
            y=alt.Y("net_worth:Q", title=f"Net worth ({series.currency})"),
            tooltip=[alt.Tooltip("date:T"), alt.Tooltip("label:N")],
        )
        .properties(height=320)
    )
    st.subheader("Net Worth")
    st.altair_chart(chart, width="stretch")


def _account_table(rows: list[AccountRow]) -> list[dict]:
    return [
        {
            "Name": row.name,
            "Type": row.accountable_type,
            "Balance": (
                _format_currency(row.balance.amount, row.currency)
                if row.balance is not None
                else "-"
            ),
            "Converted": _format_currency(
                row.converted_balance.amount,
                row.converted_balance.currency,
            ),
            "Syncing": "yes" if row.is_syncing else "",
        }
        for row in rows
    ]


def _render_accounts(view: AccountTotalsView) -> None:
    """Render asset and liability tables."""
    assets_col, liabilities_col = st.columns(2)
    with assets_col:
        st.subheader("Assets")
        st.dataframe(
            _account_table(view.asset_accounts),
            width="stretch",
            hide_index=True,
        )
    with liabilities_col:
        st.subheader("Liabilities")
        st.dataframe(
            _account_table(view.liability_accounts),
            width="stretch",
            hide_index=True,
        )


def _render_preview(result: ReconciliationResult) -> None:
    preview = result.preview
    if preview is None:
        return
    st.write(
        f"Balance on {preview.date}: "
        f"{_format_currency(preview.balance.amount, preview.balance.currency)}"
    )
    converted = preview.converted_balance
    st.write(
        f"Converted: {_format_currency(converted.amount, converted.currency)}"
    )
    if preview.change is not None:
        st.write(
            f"Change: {_format_currency(preview.change.amount, preview.change.currency)}"
        )


def _render_valuation_form(view: AccountTotalsView) -> None:
    """Render the valuation form with a dry-run confirmation step."""
    accounts = view.asset_accounts + view.liability_accounts
    if not accounts:
        st.warning("No accounts available.")
        return
    labels = {f"{row.name} ({row.currency})": row for row in accounts}
    with st.form("valuation"):
        label = st.selectbox("Account", options=list(labels))
        balance = st.text_input("Balance")
        valuation_date = st.date_input("Date", value=date.today())
        currency = st.text_input("Currency", placeholder="Account currency")
        exchange_rate = st.text_input(
            "Exchange rate",
            placeholder="Required for another currency",
        )
        submitted = st.form_submit_button("Preview")

    if submitted:
        row = labels[label]
        request = {
            "account_id": row.account_id,
            "balance": balance,
            "date": valuation_date,
            "currency": currency or None,
            "exchange_rate": exchange_rate or None,
        }
        use_case = build_create_valuation_use_case(build_database_adapter())
        result = use_case.execute(dry_run=True, **request)
        st.session_state["valuation_request"] = request if result.success else None
        st.session_state["valuation_preview"] = result

    preview_result = st.session_state.get("valuation_preview")
    if preview_result is None:
        return
    if not preview_result.success:
        st.error(preview_result.error_message)
        return
    _render_preview(preview_result)
    if st.button("Confirm"):
        request = st.session_state["valuation_request"]
        use_case = build_create_valuation_use_case(build_database_adapter())
        result = use_case.execute(**request)
        st.session_state["valuation_preview"] = None
        if result.success:
            get_usage_logger().info(
                f"Valuation recorded from dashboard for {request['account_id']}"
            )
            st.cache_data.clear()
            st.success("Valuation saved. Balances will refresh after the resync.")
        else:
            st.error(result.error_message)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Household Ledger", layout="wide")
    st.title("Household Ledger")

    family_id = st.sidebar.text_input(
        "Family",
        value=os.getenv("LEDGER_FAMILY_ID", ""),
    ).strip()
    page = st.sidebar.selectbox("Page", ["Dashboard", "Record valuation"])
    if not family_id:
        st.info("Enter a family id to load its accounts.")
        return

    try:
        view, summary = _load_account_totals(family_id)
    except NotFoundError as exc:
        st.error(str(exc))
        return

    if page == "Dashboard":
        period_label = st.sidebar.selectbox("Period", list(PERIODS))
        period = PERIODS[period_label](date.today())
        series = _load_net_worth_series(family_id, period)

        assets_col, liabilities_col, net_worth_col = st.columns(3)
        currency_code = summary.currency_code
        assets_col.metric(
            "Assets",
            _format_currency(summary.asset_total, currency_code),
        )
        liabilities_col.metric(
            "Liabilities",
            _format_currency(summary.liability_total, currency_code),
        )
        net_worth_col.metric(
            "Net Worth",
            _format_currency(summary.net_worth, currency_code),
            _format_trend(series),
        )
        _render_net_worth_chart(series)
        _render_accounts(view)
    else:
        _render_valuation_form(view)


if __name__ == "__main__":  # pragma: no cover
    main()
