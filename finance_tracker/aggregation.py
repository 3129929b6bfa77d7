"""Shared aggregation primitives.

Every view (dashboard, income, budgets, reports) reduces transactions
through the helpers in this module so that sums, category groupings and
time series behave identically everywhere.  Transactions are first turned
into a typed :class:`pandas.DataFrame` by :func:`transactions_frame`; that
is also the single place where a missing category is replaced by the
``"Other"`` fallback.

Functions accept either a sequence of :class:`~finance_tracker.models.Transaction`
or a frame previously built by :func:`transactions_frame`.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, Optional, Union

import numpy as np
import pandas as pd

from . import config
from .models import EXPENSE, INCOME, Transaction
from .time_windows import DateLike, DateWindow, trailing_days, trailing_months

FRAME_COLUMNS = [
    'id',
    'date',
    'type',
    'amount',
    'signed_amount',
    'category_id',
    'category',
    'color',
    'description',
    'payment_method',
    'is_recurring',
]

TransactionsLike = Union[pd.DataFrame, Iterable[Transaction]]
Predicate = Callable[[pd.DataFrame], pd.Series]


# ---------------------------------------------------------------------------
# Frame construction
# ---------------------------------------------------------------------------


def transactions_frame(transactions: TransactionsLike) -> pd.DataFrame:
    """Build the typed transaction frame used by all aggregations.

    Rows keep the input order.  ``category``/``color`` hold the joined
    category, or the configured fallback when the relation is missing.
    """
    if isinstance(transactions, pd.DataFrame):
        return transactions

    rows = []
    for txn in transactions:
        ref = txn.category
        rows.append({
            'id': txn.id,
            'date': txn.date,
            'type': txn.type,
            'amount': txn.amount,
            'category_id': txn.category_id,
            'category': ref.name if ref and ref.name else config.FALLBACK_CATEGORY_NAME,
            'color': ref.color if ref and ref.color else config.FALLBACK_CATEGORY_COLOR,
            'description': txn.description,
            'payment_method': txn.payment_method,
            'is_recurring': txn.is_recurring,
        })

    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    frame['date'] = pd.to_datetime(frame['date']).dt.normalize()
    frame['amount'] = pd.to_numeric(frame['amount']).astype(float)
    frame['signed_amount'] = np.where(frame['type'] == EXPENSE, -frame['amount'], frame['amount'])
    frame['is_recurring'] = frame['is_recurring'].astype(bool)
    return frame


# ---------------------------------------------------------------------------
# Masks
# ---------------------------------------------------------------------------


def type_mask(frame: pd.DataFrame, kind: Optional[str]) -> pd.Series:
    """Rows of the given transaction type (all rows for ``None``/``'all'``)."""
    if kind in (None, 'all'):
        return pd.Series(True, index=frame.index)
    return frame['type'] == kind


def window_mask(frame: pd.DataFrame, window: Optional[DateWindow]) -> pd.Series:
    """Rows whose date falls inside the inclusive window."""
    if window is None:
        return pd.Series(True, index=frame.index)
    return frame['date'].between(pd.Timestamp(window.start), pd.Timestamp(window.end))


def category_mask(frame: pd.DataFrame, category_id: Optional[str]) -> pd.Series:
    return frame['category_id'] == category_id


# ---------------------------------------------------------------------------
# Reductions
# ---------------------------------------------------------------------------


def percentage(numerator: float, denominator: float) -> float:
    """``numerator`` as a percentage of ``denominator``; ``0.0`` when the denominator is not positive."""
    if denominator > 0:
        return float(numerator) * 100.0 / float(denominator)
    return 0.0


def growth_rate(current: float, previous: float) -> float:
    """Percent change from ``previous`` to ``current``; ``0.0`` without a positive baseline."""
    if previous > 0:
        return (float(current) - float(previous)) * 100.0 / float(previous)
    return 0.0


def sum_amounts(transactions: TransactionsLike, predicate: Optional[Predicate] = None) -> float:
    """Total ``amount`` of the rows selected by ``predicate`` (all rows when omitted)."""
    frame = transactions_frame(transactions)
    selected = frame if predicate is None else frame[predicate(frame)]
    return float(selected['amount'].sum())


def total_by_type(
    transactions: TransactionsLike,
    kind: str,
    window: Optional[DateWindow] = None,
) -> float:
    """Convenience wrapper: sum of one transaction type inside an optional window."""
    return sum_amounts(
        transactions,
        lambda f: type_mask(f, kind) & window_mask(f, window),
    )


def select(transactions: TransactionsLike, predicate: Predicate) -> pd.DataFrame:
    frame = transactions_frame(transactions)
    return frame[predicate(frame)]


def group_sum_by_category(
    transactions: TransactionsLike,
    type_filter: Optional[str] = None,
) -> pd.DataFrame:
    """Totals per category name, highest first.

    Returns a DataFrame with columns ``category``, ``color`` and ``total``.
    Categories with equal totals keep the order in which they first appear.
    The totals add up to the sum of the filtered type.
    """
    frame = transactions_frame(transactions)
    scoped = frame[type_mask(frame, type_filter)]
    if scoped.empty:
        return pd.DataFrame({
            'category': pd.Series(dtype=object),
            'color': pd.Series(dtype=object),
            'total': pd.Series(dtype=float),
        })

    grouped = (
        scoped.groupby('category', sort=False)
        .agg(color=('color', 'first'), total=('amount', 'sum'))
        .reset_index()
    )
    return grouped.sort_values('total', ascending=False, kind='mergesort').reset_index(drop=True)


def _flow_totals(scoped: pd.DataFrame, key: str, index: pd.Index) -> pd.DataFrame:
    income = scoped.loc[scoped['type'] == INCOME].groupby(key)['amount'].sum()
    expenses = scoped.loc[scoped['type'] == EXPENSE].groupby(key)['amount'].sum()
    return pd.DataFrame(
        {
            'income': income.reindex(index, fill_value=0.0).astype(float),
            'expenses': expenses.reindex(index, fill_value=0.0).astype(float),
        },
        index=index,
    )


def daily_series(transactions: TransactionsLike, days: int, ref: DateLike) -> pd.DataFrame:
    """Income and expense totals for ``days`` consecutive days ending at ``ref``.

    Always returns exactly ``days`` rows in ascending order, zero-filled,
    with columns ``day`` (``datetime.date``), ``label`` (``"Jan 05"``),
    ``income`` and ``expenses``.
    """
    frame = transactions_frame(transactions)
    buckets = trailing_days(ref, days)
    index = pd.DatetimeIndex(pd.to_datetime(buckets), name='day')

    totals = _flow_totals(frame, 'date', index).reset_index()
    totals['day'] = list(buckets)
    totals.insert(1, 'label', [_day_label(day) for day in buckets])
    return totals


def monthly_series(transactions: TransactionsLike, months: int, ref: DateLike) -> pd.DataFrame:
    """Income, expense and net totals for ``months`` calendar months ending at ``ref``'s month.

    Always returns exactly ``months`` rows, oldest first, with columns
    ``month`` (``"2024-03"``), ``label`` (``"Mar 2024"``), ``income``,
    ``expenses`` and ``net``.
    """
    frame = transactions_frame(transactions)
    periods = trailing_months(ref, months)
    index = pd.PeriodIndex(periods, freq='M', name='month')

    scoped = frame.assign(month=frame['date'].dt.to_period('M'))
    totals = _flow_totals(scoped, 'month', index)
    totals['net'] = totals['income'] - totals['expenses']
    totals = totals.reset_index()
    totals['month'] = [str(period) for period in periods]
    totals.insert(1, 'label', [period.strftime('%b %Y') for period in periods])
    return totals


def _day_label(day: date) -> str:
    return day.strftime('%b %d')


def daily_totals_present(transactions: TransactionsLike) -> pd.DataFrame:
    """Income and expense totals for each day that has at least one transaction.

    Unlike :func:`daily_series` nothing is zero-filled; rows are in
    ascending date order with the same columns.
    """
    frame = transactions_frame(transactions)
    days = sorted(frame['date'].unique())
    index = pd.DatetimeIndex(days, name='day')

    totals = _flow_totals(frame, 'date', index).reset_index()
    totals['day'] = [stamp.date() for stamp in index]
    totals.insert(1, 'label', [_day_label(day) for day in totals['day']])
    return totals
