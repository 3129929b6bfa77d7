"""Current-month dashboard snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

import pandas as pd

from . import config
from .aggregation import (
    daily_series,
    group_sum_by_category,
    percentage,
    sum_amounts,
    transactions_frame,
    type_mask,
    window_mask,
)
from .logging_setup import get_logger
from .models import EXPENSE, INCOME, MONTHLY, Budget, Transaction
from .time_windows import DateLike, as_date, month_window

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0
    monthly_budget: float = 0.0
    budget_used: float = 0.0


@dataclass(frozen=True, eq=False)
class DashboardSnapshot:
    stats: DashboardStats
    recent_transactions: List[Transaction] = field(default_factory=list)
    daily: pd.DataFrame = field(default_factory=pd.DataFrame)
    expenses_by_category: pd.DataFrame = field(default_factory=pd.DataFrame)


def most_recent(transactions: Iterable[Transaction], count: int) -> List[Transaction]:
    """The ``count`` latest transactions by date.

    Transactions sharing a date keep their input order (the sort is stable).
    """
    return sorted(transactions, key=lambda t: t.date, reverse=True)[:count]


def build_dashboard(
    transactions: Sequence[Transaction],
    budgets: Iterable[Budget],
    ref: DateLike,
) -> DashboardSnapshot:
    """Build the dashboard for the calendar month containing ``ref``.

    ``monthly_budget`` is the budgeted capacity: the sum of every monthly
    budget passed in, regardless of how much of it has been spent.
    """
    ref = as_date(ref)
    month = month_window(ref)
    frame = transactions_frame(transactions)
    in_month = window_mask(frame, month)
    month_frame = frame[in_month]

    total_income = sum_amounts(month_frame, lambda f: type_mask(f, INCOME))
    total_expenses = sum_amounts(month_frame, lambda f: type_mask(f, EXPENSE))
    monthly_budget = float(sum(b.amount for b in budgets if b.period == MONTHLY))

    stats = DashboardStats(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=total_income - total_expenses,
        monthly_budget=monthly_budget,
        budget_used=percentage(total_expenses, monthly_budget),
    )
    month_transactions = [t for t in transactions if month.contains(t.date)]
    logger.debug(
        "Dashboard for %s: %d transactions in month, income=%.2f expenses=%.2f",
        month, len(month_transactions), total_income, total_expenses,
    )
    return DashboardSnapshot(
        stats=stats,
        recent_transactions=most_recent(month_transactions, config.DASHBOARD_RECENT_COUNT),
        daily=daily_series(frame, config.DASHBOARD_TREND_DAYS, ref),
        expenses_by_category=group_sum_by_category(month_frame, EXPENSE),
    )
