import json
from datetime import date

import pytest

from finance_tracker.aggregation import transactions_frame
from finance_tracker.errors import RecordError, SeedFileError
from finance_tracker.store import InMemoryStore, load_store


def _seed(path, **overrides):
    data = {
        'categories': [
            {'id': 'c-food', 'user_id': 'u1', 'name': 'Food', 'type': 'expense', 'color': '#ef4444'},
            {'id': 'c-pay', 'user_id': 'u1', 'name': 'Salary', 'type': 'income', 'color': '#10b981'},
            {'id': 'c-x', 'user_id': 'u2', 'name': 'Hobby', 'type': 'expense'},
        ],
        'transactions': [
            {'id': 't1', 'user_id': 'u1', 'category_id': 'c-food', 'amount': 20, 'date': '2024-03-01', 'type': 'expense'},
            {'id': 't2', 'user_id': 'u1', 'category_id': 'c-pay', 'amount': 900, 'date': '2024-03-03', 'type': 'income'},
            {'id': 't3', 'user_id': 'u1', 'category_id': 'c-deleted', 'amount': 5, 'date': '2024-02-10', 'type': 'expense'},
            {'id': 't4', 'user_id': 'u2', 'category_id': 'c-x', 'amount': 70, 'date': '2024-03-02', 'type': 'expense'},
        ],
        'budgets': [
            {'id': 'b1', 'user_id': 'u1', 'category_id': 'c-food', 'amount': 100, 'period': 'monthly',
             'start_date': '2024-03-01', 'end_date': '2024-03-31'},
            {'id': 'b2', 'user_id': 'u1', 'category_id': 'c-food', 'amount': 100, 'period': 'monthly',
             'start_date': '2024-02-01', 'end_date': '2024-02-29'},
            {'id': 'b3', 'user_id': 'u1', 'category_id': 'c-food', 'amount': 25, 'period': 'weekly',
             'start_date': '2024-03-04', 'end_date': '2024-03-10'},
        ],
    }
    data.update(overrides)
    path.write_text(json.dumps(data), encoding='utf-8')
    return path


def test_load_store_and_join_categories(tmp_path):
    store = load_store(_seed(tmp_path / 'seed.json'))
    txns = store.fetch_transactions('u1')
    assert [t.id for t in txns] == ['t2', 't1', 't3']
    assert txns[0].category_name == 'Salary'
    assert txns[2].category is None
    frame = transactions_frame(txns)
    assert frame.loc[frame['id'] == 't3', 'category'].item() == 'Other'


def test_fetch_transactions_filters(tmp_path):
    store = load_store(_seed(tmp_path / 'seed.json'))
    assert [t.id for t in store.fetch_transactions('u1', type='income')] == ['t2']
    ranged = store.fetch_transactions('u1', date_from='2024-03-01', date_to=date(2024, 3, 2))
    assert [t.id for t in ranged] == ['t1']
    assert [t.id for t in store.fetch_transactions('u2')] == ['t4']


def test_fetch_budgets_by_period_and_start_window(tmp_path):
    store = load_store(_seed(tmp_path / 'seed.json'))
    march = store.fetch_budgets('u1', 'monthly', '2024-03-01', '2024-03-31')
    assert [b.id for b in march] == ['b1']
    assert march[0].category.name == 'Food'
    assert [b.id for b in store.fetch_budgets('u1')] == ['b1', 'b2']
    assert [b.id for b in store.fetch_budgets('u1', 'weekly')] == ['b3']


def test_fetch_categories_sorted_by_type_then_name(tmp_path):
    store = load_store(_seed(tmp_path / 'seed.json'))
    assert [c.name for c in store.fetch_categories('u1')] == ['Food', 'Salary']
    assert [c.name for c in store.fetch_categories('u1', type='income')] == ['Salary']


def test_missing_seed_file(tmp_path):
    with pytest.raises(SeedFileError):
        load_store(tmp_path / 'missing.json')


def test_invalid_json(tmp_path):
    target = tmp_path / 'seed.json'
    target.write_text('{not json', encoding='utf-8')
    with pytest.raises(SeedFileError):
        load_store(target)


def test_malformed_record(tmp_path):
    target = _seed(tmp_path / 'seed.json', transactions=[
        {'id': 'bad', 'user_id': 'u1', 'amount': -3, 'date': '2024-03-01', 'type': 'expense'},
    ])
    with pytest.raises(RecordError):
        load_store(target)


def test_add_helpers_accept_dicts():
    store = InMemoryStore()
    store.add_category({'id': 'c1', 'user_id': 'u1', 'name': 'Food', 'type': 'expense'})
    store.add_transaction({'id': 't1', 'user_id': 'u1', 'category_id': 'c1', 'amount': 3,
                           'date': '2024-03-01', 'type': 'expense'})
    assert store.fetch_transactions('u1')[0].category_name == 'Food'
    assert store.owners() == ['u1']
    assert store.latest_transaction_date('u1') == date(2024, 3, 1)
