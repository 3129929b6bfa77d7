"""Record types for transactions, categories and budgets.

Records are immutable dataclasses.  Store rows (plain dictionaries with
ISO date strings and an optional nested ``categories`` join) are turned
into records with the ``from_dict`` constructors; anything malformed is
reported as :class:`~finance_tracker.errors.RecordError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from .errors import RecordError
from .time_windows import as_date

EXPENSE = 'expense'
INCOME = 'income'
TRANSACTION_TYPES = (EXPENSE, INCOME)

MONTHLY = 'monthly'
WEEKLY = 'weekly'
YEARLY = 'yearly'
BUDGET_PERIODS = (MONTHLY, WEEKLY, YEARLY)


@dataclass(frozen=True)
class CategoryRef:
    """Display fields of a category as joined onto a transaction or budget."""

    name: str
    color: str = ''
    icon: str = ''

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['CategoryRef']:
        if not data or not data.get('name'):
            return None
        return cls(
            name=str(data['name']),
            color=str(data.get('color') or ''),
            icon=str(data.get('icon') or ''),
        )


@dataclass(frozen=True)
class Category:
    id: str
    user_id: str
    name: str
    type: str
    color: str = ''
    icon: str = 'circle'

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        _require(data, 'category', ('id', 'name', 'type'))
        kind = _check_type(data, 'category')
        return cls(
            id=str(data['id']),
            user_id=str(data.get('user_id', '')),
            name=str(data['name']),
            type=kind,
            color=str(data.get('color') or ''),
            icon=str(data.get('icon') or 'circle'),
        )

    def ref(self) -> CategoryRef:
        return CategoryRef(name=self.name, color=self.color, icon=self.icon)


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    category_id: Optional[str]
    amount: float
    date: date
    type: str
    description: str = ''
    payment_method: str = 'cash'
    is_recurring: bool = False
    category: Optional[CategoryRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        _require(data, 'transaction', ('id', 'amount', 'date', 'type'))
        kind = _check_type(data, 'transaction')
        amount = _amount(data, 'transaction')
        try:
            day = as_date(data['date'])
        except ValueError as exc:
            raise RecordError('transaction', data, str(exc)) from exc
        return cls(
            id=str(data['id']),
            user_id=str(data.get('user_id', '')),
            category_id=_optional_str(data.get('category_id')),
            amount=amount,
            date=day,
            type=kind,
            description=str(data.get('description') or ''),
            payment_method=str(data.get('payment_method') or 'cash'),
            is_recurring=bool(data.get('is_recurring', False)),
            category=CategoryRef.from_dict(data.get('categories')),
            created_at=_timestamp(data.get('created_at')),
            updated_at=_timestamp(data.get('updated_at')),
        )

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None


@dataclass(frozen=True)
class Budget:
    id: str
    user_id: str
    category_id: str
    amount: float
    period: str
    start_date: date
    end_date: date
    category: Optional[CategoryRef] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Budget':
        _require(data, 'budget', ('id', 'category_id', 'amount', 'start_date', 'end_date'))
        period = str(data.get('period') or MONTHLY)
        if period not in BUDGET_PERIODS:
            raise RecordError('budget', data, f"unknown period {period!r}")
        amount = _amount(data, 'budget')
        try:
            start = as_date(data['start_date'])
            end = as_date(data['end_date'])
        except ValueError as exc:
            raise RecordError('budget', data, str(exc)) from exc
        if end < start:
            raise RecordError('budget', data, 'end_date precedes start_date')
        return cls(
            id=str(data['id']),
            user_id=str(data.get('user_id', '')),
            category_id=str(data['category_id']),
            amount=amount,
            period=period,
            start_date=start,
            end_date=end,
            category=CategoryRef.from_dict(data.get('categories')),
        )


def _require(data: Dict[str, Any], kind: str, fields) -> None:
    missing = [name for name in fields if data.get(name) in (None, '')]
    if missing:
        raise RecordError(kind, data, 'missing ' + ', '.join(missing))


def _check_type(data: Dict[str, Any], kind: str) -> str:
    value = str(data['type']).strip().lower()
    if value not in TRANSACTION_TYPES:
        raise RecordError(kind, data, f"type must be 'expense' or 'income', got {value!r}")
    return value


def _amount(data: Dict[str, Any], kind: str) -> float:
    try:
        amount = float(data['amount'])
    except (TypeError, ValueError) as exc:
        raise RecordError(kind, data, f"amount is not numeric: {data['amount']!r}") from exc
    if amount < 0:
        raise RecordError(kind, data, 'amount must not be negative')
    return amount


def _optional_str(value: Any) -> Optional[str]:
    return None if value in (None, '') else str(value)


def _timestamp(value: Any) -> Optional[datetime]:
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None
