from datetime import date

import pytest

from finance_tracker.budgets import BudgetStatus
from finance_tracker.errors import StoreError
from finance_tracker.service import FinanceTracker
from finance_tracker.store import InMemoryStore
from finance_tracker.transaction_view import TransactionFilters


def build_store():
    store = InMemoryStore()
    store.add_category({'id': 'a', 'user_id': 'u1', 'name': 'Groceries', 'type': 'expense', 'color': '#ef4444'})
    store.add_category({'id': 'b', 'user_id': 'u1', 'name': 'Salary', 'type': 'income', 'color': '#10b981'})
    for row in [
        {'id': '1', 'category_id': 'a', 'amount': 50, 'date': '2024-03-01', 'type': 'expense', 'description': 'Market'},
        {'id': '2', 'category_id': 'a', 'amount': 150, 'date': '2024-03-15', 'type': 'expense', 'description': 'Bulk'},
        {'id': '3', 'category_id': 'b', 'amount': 1000, 'date': '2024-03-01', 'type': 'income', 'description': 'Pay'},
        {'id': '4', 'category_id': 'b', 'amount': 800, 'date': '2024-02-01', 'type': 'income', 'description': 'Pay'},
        {'id': '5', 'category_id': 'a', 'amount': 60, 'date': '2023-12-05', 'type': 'expense', 'description': 'Holiday'},
    ]:
        store.add_transaction(dict(row, user_id='u1'))
    store.add_budget({'id': 'b1', 'user_id': 'u1', 'category_id': 'a', 'amount': 100, 'period': 'monthly',
                      'start_date': '2024-03-01', 'end_date': '2024-03-31'})
    return store


@pytest.fixture
def tracker():
    return FinanceTracker(build_store(), 'u1', today=date(2024, 3, 20))


def test_end_to_end_dashboard_and_budget(tracker):
    stats = tracker.dashboard().stats
    assert (stats.total_expenses, stats.total_income, stats.balance) == (200.0, 1000.0, 800.0)

    overview = tracker.budgets()
    evaluation = overview.evaluations[0]
    assert evaluation.category_name == 'Groceries'
    assert evaluation.spent == 200.0
    assert evaluation.percentage == 200.0
    assert evaluation.status is BudgetStatus.OVER_BUDGET


def test_budgets_for_month_without_budgets(tracker):
    overview = tracker.budgets(date(2024, 5, 1))
    assert overview.evaluations == []
    assert overview.total_budget == 0


def test_income_growth(tracker):
    stats = tracker.income().stats
    assert stats.monthly_income == 1000.0
    assert stats.last_month_income == 800.0
    assert stats.monthly_growth == 25.0


def test_report_trend_reaches_outside_range(tracker):
    report = tracker.report('2024-03-01', '2024-03-31')
    assert report.summary.transaction_count == 3
    trend = report.monthly_trend
    assert trend.loc[trend['month'] == '2023-12', 'expenses'].item() == 60.0
    assert trend.loc[trend['month'] == '2024-02', 'income'].item() == 800.0


def test_transaction_view_and_exports(tracker):
    view = tracker.transactions(TransactionFilters(type='expense'))
    assert [t.id for t in view.page.items] == ['2', '1', '5']

    filename, text = tracker.export_transactions(TransactionFilters(search='pay'))
    assert filename == 'transactions-2024-03-20.csv'
    assert len(text.splitlines()) == 3

    filename, text = tracker.export_income(category='Salary')
    assert filename == 'income-report-2024-03-20.csv'
    assert text.splitlines()[0].endswith('Recurring')

    filename, text = tracker.export_report(tracker.report_for_preset('30d'))
    assert filename == 'expense-report-2024-03-20.csv'
    assert text.startswith('Report Summary')


class FailingStore(InMemoryStore):
    def fetch_transactions(self, owner_id, date_from=None, date_to=None, type=None):
        raise ConnectionError('store offline')


def test_store_failures_surface_as_store_error():
    tracker = FinanceTracker(FailingStore(), 'u1', today=date(2024, 3, 20))
    with pytest.raises(StoreError):
        tracker.dashboard()
