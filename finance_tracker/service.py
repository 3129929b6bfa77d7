"""Facade tying a store to the reporting builders.

:class:`FinanceTracker` is what the CLI and the Streamlit app talk to.
It fetches exactly the records each view needs for one owner and hands
them to the pure builders.  Store failures surface as
:class:`~finance_tracker.errors.StoreError`; nothing is computed when a
fetch fails.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, List, Optional, Tuple, TypeVar

from . import config
from .budgets import BudgetOverview, budget_overview
from .dashboard_stats import DashboardSnapshot, build_dashboard
from .errors import StoreError
from .income_analytics import (
    ALL_CATEGORIES,
    IncomeAnalytics,
    build_income_analytics,
    filter_income_transactions,
)
from .logging_setup import get_logger
from .models import EXPENSE, INCOME, MONTHLY, Category
from .reports import Report, export_report_csv, generate_report, report_filename
from .store import TransactionStore
from .time_windows import DateLike, as_date, month_window, offset_month_window, preset_window
from .transaction_view import (
    TransactionFilters,
    TransactionView,
    apply_filters,
    derive_view,
    export_filename,
    export_transactions_csv,
    sort_newest_first,
)

logger = get_logger(__name__)

T = TypeVar('T')


class FinanceTracker:
    """Per-owner entry point for dashboards, budgets, income, reports and exports."""

    def __init__(self, store: TransactionStore, owner_id: str, today: Optional[DateLike] = None):
        self.store = store
        self.owner_id = owner_id
        self.today = as_date(today) if today is not None else date.today()

    def _fetch(self, what: str, call: Callable[..., T], *args, **kwargs) -> T:
        try:
            return call(self.owner_id, *args, **kwargs)
        except StoreError:
            logger.exception("Failed to fetch %s for %s", what, self.owner_id)
            raise
        except Exception as exc:
            logger.exception("Failed to fetch %s for %s", what, self.owner_id)
            raise StoreError(f"Failed to fetch {what}: {exc}") from exc

    def _ref(self, ref: Optional[DateLike]) -> date:
        return as_date(ref) if ref is not None else self.today

    def categories(self, type: Optional[str] = None) -> List[Category]:
        return self._fetch('categories', self.store.fetch_categories, type=type)

    def dashboard(self, ref: Optional[DateLike] = None) -> DashboardSnapshot:
        ref = self._ref(ref)
        month = month_window(ref)
        trend_start = ref - timedelta(days=config.DASHBOARD_TREND_DAYS - 1)
        transactions = self._fetch(
            'transactions', self.store.fetch_transactions,
            date_from=min(month.start, trend_start), date_to=max(month.end, ref),
        )
        budgets = self._fetch('budgets', self.store.fetch_budgets, period=MONTHLY)
        logger.info("Building dashboard for %s (%s)", self.owner_id, month)
        return build_dashboard(transactions, budgets, ref)

    def budgets(self, ref: Optional[DateLike] = None) -> BudgetOverview:
        """Budgets starting in the month of ``ref`` with their spend."""
        month = month_window(self._ref(ref))
        budgets = self._fetch(
            'budgets', self.store.fetch_budgets,
            period=MONTHLY, window_start=month.start, window_end=month.end,
        )
        if not budgets:
            return budget_overview([], [])
        transactions = self._fetch(
            'transactions', self.store.fetch_transactions,
            date_from=min(b.start_date for b in budgets),
            date_to=max(b.end_date for b in budgets),
            type=EXPENSE,
        )
        logger.info("Evaluating %d budgets for %s (%s)", len(budgets), self.owner_id, month)
        return budget_overview(budgets, transactions, month)

    def income(self, ref: Optional[DateLike] = None) -> IncomeAnalytics:
        transactions = self._fetch('transactions', self.store.fetch_transactions, type=INCOME)
        return build_income_analytics(transactions, self._ref(ref))

    def report(self, start: DateLike, end: DateLike, ref: Optional[DateLike] = None) -> Report:
        """Report over ``[start, end]``; also fetches the months the trend needs."""
        ref = self._ref(ref)
        start, end = as_date(start), as_date(end)
        trend_start = offset_month_window(ref, 1 - config.REPORT_TREND_MONTHS).start
        transactions = self._fetch(
            'transactions', self.store.fetch_transactions,
            date_from=min(start, trend_start), date_to=max(end, month_window(ref).end),
        )
        logger.info("Generating report for %s from %s to %s", self.owner_id, start, end)
        return generate_report(transactions, start, end, ref)

    def report_for_preset(self, preset: str, ref: Optional[DateLike] = None) -> Report:
        window = preset_window(self._ref(ref), preset)
        return self.report(window.start, window.end, ref)

    def transactions(
        self,
        filters: Optional[TransactionFilters] = None,
        page: int = 1,
        previous_filters: Optional[TransactionFilters] = None,
    ) -> TransactionView:
        filters = filters or TransactionFilters()
        transactions = self._fetch('transactions', self.store.fetch_transactions)
        return derive_view(filters, transactions, page, previous_filters)

    def export_transactions(self, filters: Optional[TransactionFilters] = None) -> Tuple[str, str]:
        """``(filename, csv_text)`` for every transaction matching ``filters``."""
        transactions = self._fetch('transactions', self.store.fetch_transactions)
        selected = sort_newest_first(apply_filters(transactions, filters or TransactionFilters()))
        logger.info("Exporting %d transactions for %s", len(selected), self.owner_id)
        return (
            export_filename('transactions', self.today),
            export_transactions_csv(selected, include_type=True),
        )

    def export_income(self, search: str = '', category: str = ALL_CATEGORIES) -> Tuple[str, str]:
        transactions = self._fetch('transactions', self.store.fetch_transactions, type=INCOME)
        selected = filter_income_transactions(transactions, search, category)
        logger.info("Exporting %d income transactions for %s", len(selected), self.owner_id)
        return export_filename('income-report', self.today), export_transactions_csv(selected)

    def export_report(self, report: Report) -> Tuple[str, str]:
        return report_filename(self.today), export_report_csv(report)
