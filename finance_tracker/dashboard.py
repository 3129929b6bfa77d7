"""Streamlit app for the finance tracker.

Renders the dashboard, budgets, income, reports and transaction views
for one owner of a JSON-seeded store.  All numbers come from
:class:`~finance_tracker.service.FinanceTracker`; this module only lays
them out.

To run the app from the command line::

    streamlit run finance_tracker/dashboard.py
"""

from __future__ import annotations

import os
import sys
from datetime import date

import streamlit as st

# Support both ``streamlit run finance_tracker/dashboard.py`` and package execution
if __package__:
    from . import config
    from . import visualization as viz
    from .errors import FinanceTrackerError
    from .income_analytics import filter_income_transactions, income_category_names
    from .logging_setup import configure_logging
    from .service import FinanceTracker
    from .store import load_store
    from .time_windows import PRESET_DAYS
    from .transaction_view import TransactionFilters, export_frame, format_amount
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from finance_tracker import config  # type: ignore
    from finance_tracker import visualization as viz  # type: ignore
    from finance_tracker.errors import FinanceTrackerError  # type: ignore
    from finance_tracker.income_analytics import filter_income_transactions, income_category_names  # type: ignore
    from finance_tracker.logging_setup import configure_logging  # type: ignore
    from finance_tracker.service import FinanceTracker  # type: ignore
    from finance_tracker.store import load_store  # type: ignore
    from finance_tracker.time_windows import PRESET_DAYS  # type: ignore
    from finance_tracker.transaction_view import TransactionFilters, export_frame, format_amount  # type: ignore


@st.cache_resource
def _load_store(path: str):
    return load_store(path)


def render_dashboard(tracker: FinanceTracker) -> None:
    snapshot = tracker.dashboard()
    stats = snapshot.stats
    cols = st.columns(4)
    cols[0].metric("Income", format_amount(stats.total_income))
    cols[1].metric("Expenses", format_amount(stats.total_expenses))
    cols[2].metric("Balance", format_amount(stats.balance))
    cols[3].metric("Budget used", f"{stats.budget_used:.1f}%")

    left, right = st.columns(2)
    left.plotly_chart(viz.create_daily_flow_chart(snapshot.daily, "Last 7 days"), use_container_width=True)
    right.plotly_chart(
        viz.create_category_pie_chart(snapshot.expenses_by_category, "Expenses by category"),
        use_container_width=True,
    )
    st.subheader("Recent transactions")
    st.dataframe(export_frame(snapshot.recent_transactions, include_type=True), hide_index=True)


def render_budgets(tracker: FinanceTracker) -> None:
    month = st.date_input("Month", value=tracker.today)
    overview = tracker.budgets(month)
    cols = st.columns(3)
    cols[0].metric("Total budget", format_amount(overview.total_budget))
    cols[1].metric("Spent", format_amount(overview.total_spent))
    cols[2].metric("Remaining", format_amount(overview.remaining))
    st.progress(min(overview.overall_percentage, 100.0) / 100.0, text=overview.overall_status.label)
    st.plotly_chart(viz.create_budget_utilisation_chart(overview.evaluations), use_container_width=True)


def render_income(tracker: FinanceTracker) -> None:
    analytics = tracker.income()
    stats = analytics.stats
    cols = st.columns(4)
    cols[0].metric("Total income", format_amount(stats.total_income))
    cols[1].metric("This month", format_amount(stats.monthly_income), f"{stats.monthly_growth:+.1f}%")
    cols[2].metric("Average", format_amount(stats.avg_transaction))
    cols[3].metric("Transactions", stats.transaction_count)
    st.plotly_chart(viz.create_daily_flow_chart(analytics.daily, "Income, last 30 days"), use_container_width=True)
    st.plotly_chart(viz.create_category_bar_chart(analytics.by_category, "Income by category"), use_container_width=True)

    search = st.text_input("Search income")
    names = ['all'] + income_category_names(analytics.transactions)
    category = st.selectbox("Category", names)
    selected = filter_income_transactions(analytics.transactions, search, category)
    st.dataframe(export_frame(selected), use_container_width=True, hide_index=True)
    filename, text = tracker.export_income(search, category)
    st.download_button("Export CSV", text, file_name=filename, mime='text/csv')


def render_reports(tracker: FinanceTracker) -> None:
    preset = st.selectbox("Period", sorted(PRESET_DAYS), index=sorted(PRESET_DAYS).index('30d'))
    report = tracker.report_for_preset(preset)
    summary = report.summary
    cols = st.columns(4)
    cols[0].metric("Income", format_amount(summary.total_income))
    cols[1].metric("Expenses", format_amount(summary.total_expenses))
    cols[2].metric("Net", format_amount(summary.net_income))
    cols[3].metric("Avg daily spending", format_amount(summary.avg_daily_spending))
    st.plotly_chart(viz.create_monthly_trend_chart(report.monthly_trend), use_container_width=True)
    left, right = st.columns(2)
    left.plotly_chart(viz.create_category_pie_chart(report.category_breakdown), use_container_width=True)
    right.plotly_chart(viz.create_income_vs_expense_chart(report.income_vs_expense), use_container_width=True)
    st.plotly_chart(viz.create_daily_flow_chart(report.daily_spending, "Daily activity"), use_container_width=True)
    filename, text = tracker.export_report(report)
    st.download_button("Export report", text, file_name=filename, mime='text/csv')


def render_transactions(tracker: FinanceTracker) -> None:
    cols = st.columns(4)
    search = cols[0].text_input("Search")
    kind = cols[1].selectbox("Type", ['all', 'expense', 'income'])
    date_from = cols[2].date_input("From", value=None)
    date_to = cols[3].date_input("To", value=None)
    filters = TransactionFilters(search=search, type=kind, date_from=date_from, date_to=date_to)

    previous = st.session_state.get('transaction_filters')
    page = st.session_state.get('transaction_page', 1)
    view = tracker.transactions(filters, page=page, previous_filters=previous)
    st.session_state['transaction_filters'] = filters

    st.dataframe(export_frame(view.page.items, include_type=True), hide_index=True)
    st.caption(f"Showing {view.page.first_index} to {view.page.last_index} of {view.page.total}")
    prev_col, next_col = st.columns(2)
    if prev_col.button("Previous", disabled=not view.page.has_previous):
        st.session_state['transaction_page'] = view.page.page - 1
        st.rerun()
    if next_col.button("Next", disabled=not view.page.has_next):
        st.session_state['transaction_page'] = view.page.page + 1
        st.rerun()
    st.session_state['transaction_page'] = view.page.page

    filename, text = tracker.export_transactions(filters)
    st.download_button("Export CSV", text, file_name=filename, mime='text/csv')


PAGES = {
    "Dashboard": render_dashboard,
    "Budgets": render_budgets,
    "Income": render_income,
    "Reports": render_reports,
    "Transactions": render_transactions,
}


def main() -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    st.set_page_config(page_title="Finance Tracker", layout="wide")
    st.title("Finance Tracker")

    seed_path = st.sidebar.text_input("Seed file", value=str(config.get_seed_path()))
    try:
        store = _load_store(seed_path)
    except FinanceTrackerError as exc:  # pragma: no cover - UI display only
        st.error(str(exc))
        return

    owners = store.owners()
    if not owners:
        st.info("The seed file has no records yet.")
        return
    owner = st.sidebar.selectbox("Owner", owners)
    today = st.sidebar.date_input("Reference date", value=date.today())
    page = st.sidebar.radio("View", list(PAGES))

    tracker = FinanceTracker(store, owner, today=today)
    try:
        PAGES[page](tracker)
    except FinanceTrackerError as exc:  # pragma: no cover - UI display only
        st.error(f"Failed to load data: {exc}")


if __name__ == "__main__":
    main()
