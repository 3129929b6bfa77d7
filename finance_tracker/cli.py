"""Command line access to the reporting engine.

Reads records from a JSON seed file (see :mod:`finance_tracker.store`)::

    finance-tracker --seed data/seed.json --owner u1 dashboard
    finance-tracker --owner u1 report --preset 90d --export
    finance-tracker --owner u1 transactions --search coffee --type expense --page 2
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

import pandas as pd

from . import config
from .errors import FinanceTrackerError
from .logging_setup import configure_logging, get_logger
from .service import FinanceTracker
from .store import load_store
from .time_windows import PRESET_DAYS
from .transaction_view import TransactionFilters, format_amount

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='finance-tracker', description='Personal finance reports.')
    parser.add_argument('--seed', type=Path, default=None, help='JSON seed file (defaults to FINANCE_TRACKER_SEED_PATH)')
    parser.add_argument('--owner', required=True, help='Owner id whose records are reported')
    parser.add_argument('--today', default=None, help='Reference date (YYYY-MM-DD); defaults to today')
    parser.add_argument('--log-level', default=None, help='Logging level (INFO, DEBUG, ...)')

    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('dashboard', help='Current month snapshot')
    sub.add_parser('budgets', help='Budget utilisation for the current month')

    income = sub.add_parser('income', help='Income analytics')
    income.add_argument('--search', default='', help='Substring of description or category')
    income.add_argument('--category', default='all', help='Exact income category name')
    income.add_argument('--export', action='store_true', help='Write the filtered list as CSV')

    report = sub.add_parser('report', help='Report over a date range')
    group = report.add_mutually_exclusive_group()
    group.add_argument('--preset', choices=sorted(PRESET_DAYS), default='30d')
    group.add_argument('--range', nargs=2, metavar=('START', 'END'), help='Inclusive date range')
    report.add_argument('--export', action='store_true', help='Write the report summary as CSV')

    txns = sub.add_parser('transactions', help='Filtered, paginated transaction list')
    txns.add_argument('--search', default='')
    txns.add_argument('--type', choices=['all', 'expense', 'income'], default='all')
    txns.add_argument('--from', dest='date_from', default=None)
    txns.add_argument('--to', dest='date_to', default=None)
    txns.add_argument('--page', type=int, default=1)
    txns.add_argument('--export', action='store_true', help='Write every matching row as CSV')
    return parser


def _print_frame(title: str, frame: pd.DataFrame) -> None:
    print(f"\n{title}:")
    print(frame.to_string(index=False) if not frame.empty else "  (none)")


def _write_export(filename: str, text: str) -> Path:
    config.ensure_data_directories()
    target = config.EXPORTS_DIR / filename
    target.write_text(text, encoding='utf-8')
    print(f"\nExported to {target}")
    return target


def _show_dashboard(tracker: FinanceTracker) -> None:
    snapshot = tracker.dashboard()
    stats = snapshot.stats
    print(f"Income:        {format_amount(stats.total_income)}")
    print(f"Expenses:      {format_amount(stats.total_expenses)}")
    print(f"Balance:       {format_amount(stats.balance)}")
    print(f"Budget:        {format_amount(stats.monthly_budget)} ({stats.budget_used:.1f}% used)")
    print("\nRecent transactions:")
    for txn in snapshot.recent_transactions:
        print(f"  {txn.date}  {txn.type:<7} {format_amount(txn.amount):>10}  {txn.description}")
    _print_frame("Last 7 days", snapshot.daily)
    _print_frame("Expenses by category", snapshot.expenses_by_category)


def _show_budgets(tracker: FinanceTracker) -> None:
    overview = tracker.budgets()
    for evaluation in overview.evaluations:
        print(
            f"  {evaluation.category_name:<20} {format_amount(evaluation.spent):>10} / "
            f"{format_amount(evaluation.budget.amount):<10} {evaluation.percentage:6.1f}%  "
            f"{evaluation.status.label}"
        )
    print(
        f"\nTotal: {format_amount(overview.total_spent)} of {format_amount(overview.total_budget)} "
        f"({overview.overall_percentage:.1f}%), remaining {format_amount(overview.remaining)}"
    )


def _show_income(tracker: FinanceTracker, args: argparse.Namespace) -> None:
    analytics = tracker.income()
    stats = analytics.stats
    print(f"Total income:    {format_amount(stats.total_income)} over {stats.transaction_count} transactions")
    print(f"This month:      {format_amount(stats.monthly_income)} ({stats.monthly_growth:+.1f}% vs last month)")
    print(f"Average:         {format_amount(stats.avg_transaction)}")
    _print_frame("Income by category", analytics.by_category)
    if args.export:
        _write_export(*tracker.export_income(args.search, args.category))


def _show_report(tracker: FinanceTracker, args: argparse.Namespace) -> None:
    if args.range:
        report = tracker.report(args.range[0], args.range[1])
    else:
        report = tracker.report_for_preset(args.preset)
    summary = report.summary
    print(f"Period:                 {report.window}")
    print(f"Total income:           {format_amount(summary.total_income)}")
    print(f"Total expenses:         {format_amount(summary.total_expenses)}")
    print(f"Net income:             {format_amount(summary.net_income)}")
    print(f"Average daily spending: {format_amount(summary.avg_daily_spending)}")
    print(f"Transactions:           {summary.transaction_count}")
    _print_frame("Monthly trend", report.monthly_trend)
    _print_frame("Top categories", report.top_categories)
    if args.export:
        _write_export(*tracker.export_report(report))


def _show_transactions(tracker: FinanceTracker, args: argparse.Namespace) -> None:
    filters = TransactionFilters(
        search=args.search, type=args.type, date_from=args.date_from, date_to=args.date_to,
    )
    view = tracker.transactions(filters, page=args.page)
    page = view.page
    for txn in page.items:
        name = txn.category_name or 'N/A'
        print(f"  {txn.date}  {txn.type:<7} {format_amount(txn.amount):>10}  {name:<16} {txn.description}")
    print(f"\nShowing {page.first_index} to {page.last_index} of {page.total} (page {page.page} of {max(page.page_count, 1)})")
    if args.export:
        _write_export(*tracker.export_transactions(filters))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        store = load_store(args.seed or config.get_seed_path())
        tracker = FinanceTracker(store, args.owner, today=args.today)
        if args.command == 'dashboard':
            _show_dashboard(tracker)
        elif args.command == 'budgets':
            _show_budgets(tracker)
        elif args.command == 'income':
            _show_income(tracker, args)
        elif args.command == 'report':
            _show_report(tracker, args)
        elif args.command == 'transactions':
            _show_transactions(tracker, args)
    except (FinanceTrackerError, ValueError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}")
        return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
