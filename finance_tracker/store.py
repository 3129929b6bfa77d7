"""Read access to transactions, categories and budgets.

:class:`TransactionStore` is the interface the reporting engine expects
from whatever persistence layer backs it.  :class:`InMemoryStore` is a
reference implementation over plain record lists, loadable from a JSON
seed file with :func:`load_store`::

    {
        "categories": [{"id": "c1", "user_id": "u1", "name": "Food", "type": "expense"}],
        "transactions": [{"id": "t1", "user_id": "u1", "category_id": "c1",
                          "amount": 12.5, "date": "2024-03-02", "type": "expense"}],
        "budgets": [{"id": "b1", "user_id": "u1", "category_id": "c1", "amount": 300,
                     "period": "monthly", "start_date": "2024-03-01", "end_date": "2024-03-31"}]
    }
"""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union

from .errors import SeedFileError
from .logging_setup import get_logger
from .models import Budget, Category, Transaction
from .time_windows import DateLike, as_date

logger = get_logger(__name__)


class TransactionStore(Protocol):
    def fetch_transactions(
        self,
        owner_id: str,
        date_from: Optional[DateLike] = None,
        date_to: Optional[DateLike] = None,
        type: Optional[str] = None,
    ) -> List[Transaction]:
        ...

    def fetch_categories(self, owner_id: str, type: Optional[str] = None) -> List[Category]:
        ...

    def fetch_budgets(
        self,
        owner_id: str,
        period: str = 'monthly',
        window_start: Optional[DateLike] = None,
        window_end: Optional[DateLike] = None,
    ) -> List[Budget]:
        ...


class InMemoryStore:
    """List-backed store that joins categories onto transactions and budgets."""

    def __init__(
        self,
        categories: Iterable[Category] = (),
        transactions: Iterable[Transaction] = (),
        budgets: Iterable[Budget] = (),
    ):
        self._categories: List[Category] = list(categories)
        self._transactions: List[Transaction] = list(transactions)
        self._budgets: List[Budget] = list(budgets)

    def add_category(self, category: Union[Category, Dict[str, Any]]) -> Category:
        record = category if isinstance(category, Category) else Category.from_dict(category)
        self._categories.append(record)
        return record

    def add_transaction(self, transaction: Union[Transaction, Dict[str, Any]]) -> Transaction:
        record = transaction if isinstance(transaction, Transaction) else Transaction.from_dict(transaction)
        self._transactions.append(record)
        return record

    def add_budget(self, budget: Union[Budget, Dict[str, Any]]) -> Budget:
        record = budget if isinstance(budget, Budget) else Budget.from_dict(budget)
        self._budgets.append(record)
        return record

    def _category_index(self, owner_id: str) -> Dict[str, Category]:
        return {c.id: c for c in self._categories if c.user_id == owner_id}

    def fetch_transactions(
        self,
        owner_id: str,
        date_from: Optional[DateLike] = None,
        date_to: Optional[DateLike] = None,
        type: Optional[str] = None,
    ) -> List[Transaction]:
        """Owner's transactions, newest first, with their category joined when it still exists."""
        lower = as_date(date_from) if date_from is not None else None
        upper = as_date(date_to) if date_to is not None else None
        categories = self._category_index(owner_id)

        selected = []
        for txn in self._transactions:
            if txn.user_id != owner_id:
                continue
            if type is not None and txn.type != type:
                continue
            if lower is not None and txn.date < lower:
                continue
            if upper is not None and txn.date > upper:
                continue
            category = categories.get(txn.category_id or '')
            selected.append(replace(txn, category=category.ref()) if category else txn)
        return sorted(selected, key=lambda t: t.date, reverse=True)

    def fetch_categories(self, owner_id: str, type: Optional[str] = None) -> List[Category]:
        """Owner's categories ordered by type, then name."""
        selected = [
            c for c in self._categories
            if c.user_id == owner_id and (type is None or c.type == type)
        ]
        return sorted(selected, key=lambda c: (c.type, c.name))

    def fetch_budgets(
        self,
        owner_id: str,
        period: str = 'monthly',
        window_start: Optional[DateLike] = None,
        window_end: Optional[DateLike] = None,
    ) -> List[Budget]:
        """Owner's budgets of ``period`` whose start date lies in the optional window."""
        lower = as_date(window_start) if window_start is not None else None
        upper = as_date(window_end) if window_end is not None else None
        categories = self._category_index(owner_id)

        selected = []
        for budget in self._budgets:
            if budget.user_id != owner_id or budget.period != period:
                continue
            if lower is not None and budget.start_date < lower:
                continue
            if upper is not None and budget.start_date > upper:
                continue
            category = categories.get(budget.category_id)
            selected.append(replace(budget, category=category.ref()) if category else budget)
        return selected

    def owners(self) -> List[str]:
        return sorted({t.user_id for t in self._transactions} | {c.user_id for c in self._categories})

    def latest_transaction_date(self, owner_id: str) -> Optional[date]:
        dates = [t.date for t in self._transactions if t.user_id == owner_id]
        return max(dates) if dates else None


def load_store(path: Union[str, Path]) -> InMemoryStore:
    """Build an :class:`InMemoryStore` from a JSON seed file.

    Raises :class:`~finance_tracker.errors.SeedFileError` when the file is
    missing or unreadable and
    :class:`~finance_tracker.errors.RecordError` for malformed records.
    """
    target = Path(path)
    if not target.exists():
        raise SeedFileError(target, 'file does not exist')
    try:
        with target.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise SeedFileError(target, f'invalid JSON ({exc})') from exc
    except OSError as exc:
        raise SeedFileError(target, str(exc)) from exc
    if not isinstance(data, dict):
        raise SeedFileError(target, 'top-level value must be an object')

    categories = [Category.from_dict(row) for row in data.get('categories') or []]
    transactions = [Transaction.from_dict(row) for row in data.get('transactions') or []]
    budgets = [Budget.from_dict(row) for row in data.get('budgets') or []]
    logger.info(
        "Loaded %d categories, %d transactions, %d budgets from %s",
        len(categories), len(transactions), len(budgets), target,
    )
    return InMemoryStore(categories, transactions, budgets)
