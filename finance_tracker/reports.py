"""Multi-metric reports over an arbitrary date range.

A report summarises the transactions inside an inclusive ``[start, end]``
range.  The monthly trend is the exception: it always covers the six
calendar months ending at the reference date, whatever range was picked,
and is computed from every transaction handed in.  Callers that want a
complete trend pass transactions for both the range and those months.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Sequence

import pandas as pd

from . import config
from .aggregation import (
    daily_totals_present,
    group_sum_by_category,
    monthly_series,
    percentage,
    sum_amounts,
    transactions_frame,
    type_mask,
    window_mask,
)
from .logging_setup import get_logger
from .models import EXPENSE, INCOME, Transaction
from .time_windows import DateLike, DateWindow, as_date, preset_window
from .transaction_view import export_filename, format_amount

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReportSummary:
    total_income: float = 0.0
    total_expenses: float = 0.0
    net_income: float = 0.0
    avg_daily_spending: float = 0.0
    transaction_count: int = 0


def _empty_frame(columns) -> pd.DataFrame:
    return pd.DataFrame({name: pd.Series(dtype=dtype) for name, dtype in columns})


_CATEGORY_COLUMNS = [('category', object), ('color', object), ('total', float)]


@dataclass(frozen=True, eq=False)
class Report:
    window: DateWindow
    summary: ReportSummary = field(default_factory=ReportSummary)
    monthly_trend: pd.DataFrame = field(default_factory=pd.DataFrame)
    category_breakdown: pd.DataFrame = field(default_factory=lambda: _empty_frame(_CATEGORY_COLUMNS))
    daily_spending: pd.DataFrame = field(default_factory=pd.DataFrame)
    income_vs_expense: pd.DataFrame = field(default_factory=pd.DataFrame)
    top_categories: pd.DataFrame = field(default_factory=lambda: _empty_frame(_CATEGORY_COLUMNS + [('share', float)]))

    @property
    def is_empty(self) -> bool:
        return self.summary.transaction_count == 0


def generate_report(
    transactions: Sequence[Transaction],
    start: DateLike,
    end: DateLike,
    ref: DateLike,
) -> Report:
    """Build the report for ``[start, end]`` with the trend anchored at ``ref``.

    With no transactions in range every series is empty and every number
    is zero.
    """
    window = DateWindow(as_date(start), as_date(end))
    frame = transactions_frame(transactions)
    in_range = frame[window_mask(frame, window)]

    if in_range.empty:
        logger.debug("No transactions between %s", window)
        return Report(window=window)

    total_income = sum_amounts(in_range, lambda f: type_mask(f, INCOME))
    total_expenses = sum_amounts(in_range, lambda f: type_mask(f, EXPENSE))
    summary = ReportSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_income=total_income - total_expenses,
        avg_daily_spending=total_expenses / max(1, window.span_days),
        transaction_count=len(in_range),
    )

    breakdown = group_sum_by_category(in_range, EXPENSE).head(config.REPORT_CATEGORY_LIMIT)
    top = breakdown.head(config.REPORT_TOP_CATEGORY_LIMIT).copy()
    top['share'] = top['total'].map(lambda v: percentage(v, total_expenses)).astype(float)

    logger.debug(
        "Report %s: %d transactions, income=%.2f expenses=%.2f",
        window, summary.transaction_count, total_income, total_expenses,
    )
    return Report(
        window=window,
        summary=summary,
        monthly_trend=monthly_series(frame, config.REPORT_TREND_MONTHS, ref),
        category_breakdown=breakdown.reset_index(drop=True),
        daily_spending=daily_totals_present(in_range).tail(config.REPORT_DAILY_BUCKETS).reset_index(drop=True),
        income_vs_expense=pd.DataFrame([
            {'name': 'Income', 'value': total_income, 'color': config.INCOME_COLOR},
            {'name': 'Expenses', 'value': total_expenses, 'color': config.EXPENSE_COLOR},
        ]),
        top_categories=top.reset_index(drop=True),
    )


def report_for_preset(transactions: Sequence[Transaction], preset: str, ref: DateLike) -> Report:
    """Report over a trailing preset window (``7d``, ``30d``, ``90d`` or ``1y``) ending at ``ref``."""
    window = preset_window(ref, preset)
    return generate_report(transactions, window.start, window.end, ref)


def export_report_csv(report: Report) -> str:
    """Summary block followed by the top categories, one comma-separated row per line."""
    summary = report.summary
    rows = [
        ['Report Summary'],
        ['Period', str(report.window)],
        ['Total Income', format_amount(summary.total_income)],
        ['Total Expenses', format_amount(summary.total_expenses)],
        ['Net Income', format_amount(summary.net_income)],
        ['Average Daily Spending', format_amount(summary.avg_daily_spending)],
        ['Total Transactions', str(summary.transaction_count)],
        [],
        ['Top Categories'],
        ['Category', 'Amount'],
    ]
    for _, row in report.top_categories.iterrows():
        rows.append([row['category'], format_amount(row['total'])])

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerows(rows)
    return buffer.getvalue()


def report_filename(today: DateLike) -> str:
    return export_filename('expense-report', today)
