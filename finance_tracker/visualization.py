"""Plotly visualisation helpers for the finance tracker.

Each function accepts one of the structures produced by the builders
(daily/monthly series, category groupings, budget evaluations) and
returns a :class:`plotly.graph_objects.Figure` that Streamlit renders via
``st.plotly_chart``.  Empty inputs produce an empty figure titled
"No data to display" rather than an error.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from . import config
from .budgets import BudgetEvaluation, BudgetStatus

STATUS_COLORS = {
    BudgetStatus.ON_TRACK: '#16a34a',
    BudgetStatus.NEAR_LIMIT: '#ca8a04',
    BudgetStatus.OVER_BUDGET: '#dc2626',
}


def _empty_figure(message: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=message)
    return fig


def create_daily_flow_chart(daily: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Line chart of daily income and expenses.

    Parameters
    ----------
    daily : pandas.DataFrame
        Output of :func:`~finance_tracker.aggregation.daily_series` (an
        ``expenses`` column is optional, so the income-only 30-day series
        works too).
    title : str, optional
        Chart title.
    """
    if daily.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=daily['label'], y=daily['income'], mode='lines+markers',
        name='Income', line={'color': config.INCOME_COLOR},
    ))
    if 'expenses' in daily.columns:
        fig.add_trace(go.Scatter(
            x=daily['label'], y=daily['expenses'], mode='lines+markers',
            name='Expenses', line={'color': config.EXPENSE_COLOR},
        ))
    fig.update_layout(title=title or "Daily cash flow", xaxis_title="Day", yaxis_title="Amount")
    return fig


def create_monthly_trend_chart(monthly: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped bars of monthly income and expenses with the net as a line."""
    if monthly.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(x=monthly['label'], y=monthly['income'], name='Income',
                         marker_color=config.INCOME_COLOR))
    fig.add_trace(go.Bar(x=monthly['label'], y=monthly['expenses'], name='Expenses',
                         marker_color=config.EXPENSE_COLOR))
    fig.add_trace(go.Scatter(x=monthly['label'], y=monthly['net'], name='Net', mode='lines+markers'))
    fig.update_layout(title=title or "Monthly trend", barmode='group',
                      xaxis_title="Month", yaxis_title="Amount")
    return fig


def create_category_pie_chart(grouped: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Pie chart of a category grouping, coloured with each category's own colour."""
    if grouped.empty:
        return _empty_figure()
    fig = px.pie(grouped, names='category', values='total')
    fig.update_traces(marker={'colors': list(grouped['color'])})
    fig.update_layout(title=title or "Category breakdown")
    return fig


def create_category_bar_chart(grouped: pd.DataFrame, title: str | None = None) -> go.Figure:
    if grouped.empty:
        return _empty_figure()
    fig = px.bar(grouped, x='category', y='total')
    fig.update_traces(marker_color=list(grouped['color']))
    fig.update_layout(title=title or "Spending by category", xaxis_title="Category", yaxis_title="Total")
    return fig


def create_income_vs_expense_chart(summary: pd.DataFrame, title: str | None = None) -> go.Figure:
    if summary.empty or not np.any(summary['value'].to_numpy() > 0):
        return _empty_figure()
    fig = go.Figure(go.Pie(
        labels=summary['name'], values=summary['value'],
        marker={'colors': list(summary['color'])}, hole=0.4,
    ))
    fig.update_layout(title=title or "Income vs expenses")
    return fig


def create_budget_utilisation_chart(
    evaluations: Sequence[BudgetEvaluation],
    title: str | None = None,
) -> go.Figure:
    """Horizontal bars of percent used per budget, capped at 100 for display, coloured by status."""
    if not evaluations:
        return _empty_figure("No budgets to display")
    names = [e.category_name for e in evaluations]
    used = np.minimum([e.percentage for e in evaluations], 100.0)
    colors = [STATUS_COLORS[e.status] for e in evaluations]
    fig = go.Figure(go.Bar(
        x=used, y=names, orientation='h', marker_color=colors,
        text=[f"{e.percentage:.1f}%" for e in evaluations], textposition='auto',
    ))
    fig.update_layout(title=title or "Budget utilisation", xaxis_title="% used",
                      xaxis_range=[0, 100])
    return fig
