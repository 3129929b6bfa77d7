from datetime import date

import pytest

from finance_tracker.budgets import (
    BudgetStatus,
    budget_overview,
    budgets_for_month,
    classify_status,
    evaluate_budget,
)
from finance_tracker.models import Budget, CategoryRef, Transaction

CAT_A = CategoryRef('Groceries', '#ef4444')


def _txn(tid, kind, amount, day, category_id='a'):
    return Transaction(
        id=tid, user_id='u1', category_id=category_id, amount=amount,
        date=day, type=kind, category=CAT_A if category_id == 'a' else None,
    )


def _budget(bid='b1', amount=100.0, category_id='a', period='monthly',
            start=date(2024, 3, 1), end=date(2024, 3, 31), category=CAT_A):
    return Budget(
        id=bid, user_id='u1', category_id=category_id, amount=amount,
        period=period, start_date=start, end_date=end, category=category,
    )


def scenario():
    return [
        _txn('1', 'expense', 50.0, date(2024, 3, 1)),
        _txn('2', 'expense', 150.0, date(2024, 3, 15)),
        _txn('3', 'income', 1000.0, date(2024, 3, 1), category_id='b'),
    ]


@pytest.mark.parametrize(
    'percent, expected',
    [
        (0.0, BudgetStatus.ON_TRACK),
        (79.99, BudgetStatus.ON_TRACK),
        (80.0, BudgetStatus.NEAR_LIMIT),
        (99.99, BudgetStatus.NEAR_LIMIT),
        (100.0, BudgetStatus.OVER_BUDGET),
        (250.0, BudgetStatus.OVER_BUDGET),
    ],
)
def test_classify_status_thresholds(percent, expected):
    assert classify_status(percent) is expected


def test_over_budget_scenario():
    evaluation = evaluate_budget(_budget(), scenario())
    assert evaluation.spent == 200.0
    assert evaluation.percentage == 200.0
    assert evaluation.status is BudgetStatus.OVER_BUDGET
    assert evaluation.status.label == 'Over Budget'
    assert evaluation.remaining == -100.0


def test_spend_limited_to_window_category_and_expenses():
    txns = scenario() + [
        _txn('4', 'expense', 30.0, date(2024, 2, 29)),
        _txn('5', 'expense', 30.0, date(2024, 4, 1)),
        _txn('6', 'expense', 30.0, date(2024, 3, 31), category_id='other'),
        _txn('7', 'income', 30.0, date(2024, 3, 10)),
        _txn('8', 'expense', 5.0, date(2024, 3, 31)),
    ]
    assert evaluate_budget(_budget(amount=1000.0), txns).spent == 205.0


def test_exactly_eighty_percent_is_near_limit():
    txns = [_txn('1', 'expense', 80.0, date(2024, 3, 3))]
    evaluation = evaluate_budget(_budget(), txns)
    assert evaluation.percentage == 80.0
    assert evaluation.status is BudgetStatus.NEAR_LIMIT


def test_zero_amount_budget_reports_zero_percent():
    evaluation = evaluate_budget(_budget(amount=0.0), scenario())
    assert evaluation.percentage == 0
    assert evaluation.status is BudgetStatus.ON_TRACK


def test_no_spend_reports_zero_percent():
    evaluation = evaluate_budget(_budget(), [])
    assert evaluation.spent == 0
    assert evaluation.percentage == 0


def test_missing_category_uses_fallback():
    evaluation = evaluate_budget(_budget(category=None), [])
    assert evaluation.category_name == 'Other'
    assert evaluation.color == '#6b7280'


def test_overview_totals():
    budgets = [
        _budget('b1', amount=100.0),
        _budget('b2', amount=300.0, category_id='c', category=None),
        _budget('b3', amount=999.0, period='weekly'),
    ]
    txns = scenario() + [_txn('9', 'expense', 100.0, date(2024, 3, 20), category_id='c')]
    overview = budget_overview(budgets, txns)
    assert [e.budget.id for e in overview.evaluations] == ['b1', 'b2']
    assert overview.total_budget == 400.0
    assert overview.total_spent == 300.0
    assert overview.overall_percentage == 75.0
    assert overview.overall_status is BudgetStatus.ON_TRACK
    assert overview.remaining == 100.0


def test_overview_window_selects_budgets_by_start_date():
    budgets = [
        _budget('march'),
        _budget('april', start=date(2024, 4, 1), end=date(2024, 4, 30)),
    ]
    selected = budgets_for_month(budgets, date(2024, 4, 15))
    assert [b.id for b in selected] == ['april']


def test_empty_overview():
    overview = budget_overview([], [])
    assert overview.total_budget == 0
    assert overview.overall_percentage == 0
    assert overview.evaluations == []
