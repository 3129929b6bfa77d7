from datetime import date

import pytest

from finance_tracker.models import CategoryRef, Transaction
from finance_tracker.transaction_view import (
    TransactionFilters,
    apply_filters,
    derive_view,
    export_filename,
    export_transactions_csv,
    paginate,
)

GROCERIES = CategoryRef('Groceries', '#ef4444')
SALARY = CategoryRef('Salary', '#10b981')


def _txn(tid, kind='expense', amount=10.0, day=date(2024, 3, 1), category=GROCERIES,
         description='', payment_method='cash', is_recurring=False):
    return Transaction(
        id=tid, user_id='u1', category_id='c', amount=amount, date=day, type=kind,
        description=description, payment_method=payment_method,
        is_recurring=is_recurring, category=category,
    )


def many(count):
    return [_txn(str(i), day=date(2024, 1, 1)) for i in range(count)]


def test_pagination_of_twenty_three_items():
    items = many(23)
    page = paginate(items, 3)
    assert page.page_count == 3
    assert len(page.items) == 3
    assert [t.id for t in page.items] == ['20', '21', '22']
    assert page.has_previous and not page.has_next
    assert (page.first_index, page.last_index) == (21, 23)


@pytest.mark.parametrize('requested, expected', [(0, 1), (-4, 1), (99, 3), (2, 2)])
def test_page_is_clamped(requested, expected):
    assert paginate(many(23), requested).page == expected


def test_empty_collection_is_page_one():
    page = paginate([], 5)
    assert page.page == 1
    assert page.page_count == 0
    assert page.items == []
    assert not page.has_next


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        paginate(many(3), 1, page_size=-1)


def test_filters_are_and_combined():
    txns = [
        _txn('1', description='Coffee beans', day=date(2024, 3, 1)),
        _txn('2', description='Coffee shop', day=date(2024, 3, 10)),
        _txn('3', kind='income', description='Coffee refund', day=date(2024, 3, 10), category=SALARY),
        _txn('4', description='Bus', day=date(2024, 3, 10)),
    ]
    filters = TransactionFilters(search='COFFEE', type='expense', date_from='2024-03-05')
    assert [t.id for t in apply_filters(txns, filters)] == ['2']


def test_search_matches_category_name_and_date_bounds_inclusive():
    txns = [
        _txn('1', description='Weekly shop', day=date(2024, 3, 1)),
        _txn('2', description='Pay', day=date(2024, 3, 31), kind='income', category=SALARY),
        _txn('3', description='No category', day=date(2024, 4, 1), category=None),
    ]
    assert [t.id for t in apply_filters(txns, TransactionFilters(search='grocer'))] == ['1']
    bounded = TransactionFilters(date_from=date(2024, 3, 1), date_to=date(2024, 3, 31))
    assert [t.id for t in apply_filters(txns, bounded)] == ['1', '2']
    assert [t.id for t in apply_filters(txns, TransactionFilters(date_to='2024-03-01'))] == ['1']


def test_unknown_type_filter_rejected():
    with pytest.raises(ValueError):
        TransactionFilters(type='transfer')


def test_derive_view_orders_newest_first():
    txns = [
        _txn('old', day=date(2024, 1, 1)),
        _txn('new', day=date(2024, 3, 1)),
        _txn('mid-a', day=date(2024, 2, 1)),
        _txn('mid-b', day=date(2024, 2, 1)),
    ]
    view = derive_view(TransactionFilters(), txns)
    assert [t.id for t in view.page.items] == ['new', 'mid-a', 'mid-b', 'old']


def test_changing_filters_resets_to_first_page():
    txns = many(23)
    same = derive_view(TransactionFilters(), txns, page=3, previous_filters=TransactionFilters())
    assert same.page.page == 3
    changed = derive_view(
        TransactionFilters(type='expense'), txns, page=3, previous_filters=TransactionFilters(),
    )
    assert changed.page.page == 1
    assert len(changed.filtered) == 23


def test_export_has_header_plus_one_line_per_row():
    txns = [
        _txn('1', amount=50.0, day=date(2024, 3, 1), description='Market'),
        _txn('2', amount=150.0, day=date(2024, 3, 15), description='Bulk buy', is_recurring=True),
        _txn('3', kind='income', amount=1000.0, day=date(2024, 3, 1), category=SALARY,
             description='Salary', payment_method='bank_transfer'),
    ]
    lines = export_transactions_csv(txns).splitlines()
    assert len(lines) == 4
    assert lines[0] == 'Date,Description,Category,Amount,Payment Method,Recurring'
    assert lines[1] == '2024-03-01,Market,Groceries,50.00,cash,No'
    assert lines[2] == '2024-03-15,Bulk buy,Groceries,150.00,cash,Yes'
    assert lines[3] == '2024-03-01,Salary,Salary,1000.00,bank_transfer,No'


def test_export_with_type_and_missing_category():
    text = export_transactions_csv([_txn('1', category=None, description='Lunch, team')], include_type=True)
    lines = text.splitlines()
    assert lines[0] == 'Date,Description,Category,Type,Amount,Payment Method,Recurring'
    assert lines[1] == '2024-03-01,"Lunch, team",N/A,expense,10.00,cash,No'


def test_export_of_nothing_is_header_only():
    assert export_transactions_csv([]).splitlines() == [
        'Date,Description,Category,Amount,Payment Method,Recurring'
    ]


def test_export_filename_includes_date():
    assert export_filename('transactions', date(2024, 3, 5)) == 'transactions-2024-03-05.csv'
    assert export_filename('income report!', '2024-03-05') == 'income-report-2024-03-05.csv'


def test_zero_page_size_is_rejected():
    with pytest.raises(ValueError):
        paginate(many(3), 1, page_size=0)
