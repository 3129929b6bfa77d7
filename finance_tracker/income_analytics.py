"""Income-specific totals, growth and trends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

import pandas as pd

from . import config
from .aggregation import (
    daily_series,
    group_sum_by_category,
    growth_rate,
    sum_amounts,
    transactions_frame,
    window_mask,
)
from .logging_setup import get_logger
from .models import INCOME, Transaction
from .time_windows import DateLike, as_date, month_window, previous_month_window
from .transaction_view import matches_search

logger = get_logger(__name__)

ALL_CATEGORIES = 'all'


@dataclass(frozen=True)
class IncomeStats:
    total_income: float = 0.0
    monthly_income: float = 0.0
    last_month_income: float = 0.0
    monthly_growth: float = 0.0
    avg_transaction: float = 0.0
    transaction_count: int = 0


@dataclass(frozen=True, eq=False)
class IncomeAnalytics:
    stats: IncomeStats
    transactions: List[Transaction] = field(default_factory=list)
    daily: pd.DataFrame = field(default_factory=pd.DataFrame)
    by_category: pd.DataFrame = field(default_factory=pd.DataFrame)


def build_income_analytics(transactions: Sequence[Transaction], ref: DateLike) -> IncomeAnalytics:
    """Income totals for all time, the month of ``ref`` and the month before it.

    Non-income transactions in the input are ignored.
    """
    ref = as_date(ref)
    income = [t for t in transactions if t.type == INCOME]
    frame = transactions_frame(income)

    total_income = sum_amounts(frame)
    monthly_income = sum_amounts(frame, lambda f: window_mask(f, month_window(ref)))
    last_month_income = sum_amounts(frame, lambda f: window_mask(f, previous_month_window(ref)))
    count = len(frame)

    stats = IncomeStats(
        total_income=total_income,
        monthly_income=monthly_income,
        last_month_income=last_month_income,
        monthly_growth=growth_rate(monthly_income, last_month_income),
        avg_transaction=total_income / count if count > 0 else 0.0,
        transaction_count=count,
    )
    logger.debug("Income analytics over %d transactions: %s", count, stats)

    daily = daily_series(frame, config.INCOME_TREND_DAYS, ref)[['day', 'label', 'income']]
    return IncomeAnalytics(
        stats=stats,
        transactions=income,
        daily=daily,
        by_category=group_sum_by_category(frame, INCOME),
    )


def income_category_names(transactions: Iterable[Transaction]) -> List[str]:
    """Distinct category names of income transactions, sorted, for the category picker."""
    return sorted({t.category_name for t in transactions if t.type == INCOME and t.category_name})


def filter_income_transactions(
    transactions: Iterable[Transaction],
    search: str = '',
    category: str = ALL_CATEGORIES,
) -> List[Transaction]:
    """Filter the displayed income list.

    ``search`` is a case-insensitive substring matched against the
    description or the category name; ``category`` must equal the category
    name exactly unless it is ``'all'``.  Both filters apply together.
    """
    needle = (search or '').strip().lower()
    selected = []
    for txn in transactions:
        if needle and not matches_search(txn, needle):
            continue
        if category != ALL_CATEGORIES and txn.category_name != category:
            continue
        selected.append(txn)
    return selected
