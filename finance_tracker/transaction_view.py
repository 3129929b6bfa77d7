"""Transaction list filtering, pagination and CSV export.

The transaction list is a pure function of the source collection and the
current filters: :func:`derive_view` applies the filters, orders the
result newest first and slices out the requested page.  Whenever the
filters change the view starts again at page 1.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from . import config
from .models import TRANSACTION_TYPES, Transaction
from .time_windows import DateLike, as_date

ALL_TYPES = 'all'

EXPORT_COLUMNS = ['Date', 'Description', 'Category', 'Amount', 'Payment Method', 'Recurring']
MISSING_CATEGORY_LABEL = 'N/A'


@dataclass(frozen=True)
class TransactionFilters:
    search: str = ''
    type: str = ALL_TYPES
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def __post_init__(self):
        if self.type != ALL_TYPES and self.type not in TRANSACTION_TYPES:
            raise ValueError(f"Unknown transaction type filter {self.type!r}")
        # Accept ISO strings for the bounds
        if self.date_from is not None:
            object.__setattr__(self, 'date_from', as_date(self.date_from))
        if self.date_to is not None:
            object.__setattr__(self, 'date_to', as_date(self.date_to))

    def matches(self, txn: Transaction) -> bool:
        needle = self.search.strip().lower()
        if needle and not matches_search(txn, needle):
            return False
        if self.type != ALL_TYPES and txn.type != self.type:
            return False
        if self.date_from is not None and txn.date < self.date_from:
            return False
        if self.date_to is not None and txn.date > self.date_to:
            return False
        return True


@dataclass(frozen=True)
class Page:
    items: List[Transaction]
    page: int
    page_count: int
    total: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @property
    def first_index(self) -> int:
        """1-based position of the first item on the page (0 when empty)."""
        return (self.page - 1) * self.page_size + 1 if self.items else 0

    @property
    def last_index(self) -> int:
        return self.first_index + len(self.items) - 1 if self.items else 0


@dataclass(frozen=True)
class TransactionView:
    filters: TransactionFilters
    filtered: List[Transaction] = field(default_factory=list)
    page: Optional[Page] = None


def matches_search(txn: Transaction, needle: str) -> bool:
    """Case-insensitive substring match against description or category name.

    ``needle`` must already be lower-cased.
    """
    if needle in txn.description.lower():
        return True
    name = txn.category_name
    return bool(name) and needle in name.lower()


def apply_filters(transactions: Iterable[Transaction], filters: TransactionFilters) -> List[Transaction]:
    return [t for t in transactions if filters.matches(t)]


def sort_newest_first(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Order by date descending; same-day transactions keep their input order."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def count_pages(total: int, page_size: int) -> int:
    return -(-total // page_size) if total > 0 else 0


def clamp_page(page: int, page_count: int) -> int:
    if page_count <= 0:
        return 1
    return min(max(page, 1), page_count)


def paginate(items: Sequence[Transaction], page: int = 1, page_size: Optional[int] = None) -> Page:
    """Slice ``items`` into fixed-size pages, clamping ``page`` into range."""
    size = config.PAGE_SIZE if page_size is None else page_size
    if size <= 0:
        raise ValueError("page_size must be positive")
    total = len(items)
    pages = count_pages(total, size)
    current = clamp_page(page, pages)
    start = (current - 1) * size
    return Page(
        items=list(items[start:start + size]),
        page=current,
        page_count=pages,
        total=total,
        page_size=size,
    )


def derive_view(
    filters: TransactionFilters,
    transactions: Iterable[Transaction],
    page: int = 1,
    previous_filters: Optional[TransactionFilters] = None,
    page_size: Optional[int] = None,
) -> TransactionView:
    """Filter, order and paginate ``transactions``.

    Passing the filters of the previous view as ``previous_filters`` makes a
    filter change reset the view to page 1.
    """
    if previous_filters is not None and previous_filters != filters:
        page = 1
    filtered = sort_newest_first(apply_filters(transactions, filters))
    return TransactionView(
        filters=filters,
        filtered=filtered,
        page=paginate(filtered, page, page_size),
    )


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def format_amount(amount: float) -> str:
    return f"{amount:.2f}"


def export_frame(transactions: Iterable[Transaction], include_type: bool = False) -> pd.DataFrame:
    """Tabular export of ``transactions`` in the fixed column order."""
    columns = list(EXPORT_COLUMNS)
    if include_type:
        columns.insert(3, 'Type')
    rows = [
        {
            'Date': t.date.isoformat(),
            'Description': t.description,
            'Category': t.category_name or MISSING_CATEGORY_LABEL,
            'Type': t.type,
            'Amount': format_amount(t.amount),
            'Payment Method': t.payment_method,
            'Recurring': 'Yes' if t.is_recurring else 'No',
        }
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=columns)


def export_transactions_csv(transactions: Iterable[Transaction], include_type: bool = False) -> str:
    """CSV text with one header line and one line per transaction.

    Fields containing the delimiter or quotes are quoted.
    """
    return export_frame(transactions, include_type).to_csv(index=False, lineterminator='\n')


def export_filename(prefix: str, today: DateLike) -> str:
    """``<prefix>-YYYY-MM-DD.csv`` with ``prefix`` reduced to filename-safe characters."""
    cleaned = ''.join(c for c in prefix if c.isalnum() or c in {' ', '_', '-'})
    cleaned = cleaned.strip().replace(' ', '-') or 'transactions'
    return f"{cleaned}-{as_date(today).isoformat()}.csv"
