"""Budget utilisation and status classification.

A budget's spend is the total of expense transactions in its category
whose date falls inside the budget's own inclusive window.  Status is
derived from the spend percentage alone:

==========================  ============
percentage                  status
==========================  ============
``>= OVER_BUDGET_THRESHOLD``  Over Budget
``>= NEAR_LIMIT_THRESHOLD``   Near Limit
otherwise                     On Track
==========================  ============
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from . import config
from .aggregation import (
    TransactionsLike,
    category_mask,
    percentage,
    sum_amounts,
    transactions_frame,
    type_mask,
    window_mask,
)
from .logging_setup import get_logger
from .models import EXPENSE, MONTHLY, Budget
from .time_windows import DateLike, DateWindow, month_window

logger = get_logger(__name__)


class BudgetStatus(Enum):
    ON_TRACK = 'On Track'
    NEAR_LIMIT = 'Near Limit'
    OVER_BUDGET = 'Over Budget'

    @property
    def label(self) -> str:
        return self.value


def classify_status(percent_used: float) -> BudgetStatus:
    """Map a spend percentage to a status; the first matching threshold wins."""
    if percent_used >= config.OVER_BUDGET_THRESHOLD:
        return BudgetStatus.OVER_BUDGET
    if percent_used >= config.NEAR_LIMIT_THRESHOLD:
        return BudgetStatus.NEAR_LIMIT
    return BudgetStatus.ON_TRACK


@dataclass(frozen=True)
class BudgetEvaluation:
    budget: Budget
    category_name: str
    color: str
    spent: float
    percentage: float
    status: BudgetStatus

    @property
    def remaining(self) -> float:
        return self.budget.amount - self.spent

    @property
    def window(self) -> DateWindow:
        return DateWindow(self.budget.start_date, self.budget.end_date)


@dataclass(frozen=True)
class BudgetOverview:
    total_budget: float = 0.0
    total_spent: float = 0.0
    overall_percentage: float = 0.0
    overall_status: BudgetStatus = BudgetStatus.ON_TRACK
    evaluations: List[BudgetEvaluation] = field(default_factory=list)

    @property
    def remaining(self) -> float:
        return self.total_budget - self.total_spent


def evaluate_budget(budget: Budget, transactions: TransactionsLike) -> BudgetEvaluation:
    """Compute spend, percentage and status for one budget."""
    frame = transactions_frame(transactions)
    window = DateWindow(budget.start_date, budget.end_date)
    spent = sum_amounts(
        frame,
        lambda f: type_mask(f, EXPENSE) & category_mask(f, budget.category_id) & window_mask(f, window),
    )
    percent_used = percentage(spent, budget.amount)
    ref = budget.category
    return BudgetEvaluation(
        budget=budget,
        category_name=ref.name if ref and ref.name else config.FALLBACK_CATEGORY_NAME,
        color=ref.color if ref and ref.color else config.FALLBACK_CATEGORY_COLOR,
        spent=spent,
        percentage=percent_used,
        status=classify_status(percent_used),
    )


def evaluate_budgets(budgets: Iterable[Budget], transactions: TransactionsLike) -> List[BudgetEvaluation]:
    frame = transactions_frame(transactions)
    return [evaluate_budget(budget, frame) for budget in budgets]


def budgets_for_month(budgets: Iterable[Budget], ref: DateLike) -> List[Budget]:
    """Monthly budgets whose window starts in the month containing ``ref``."""
    window = month_window(ref)
    return [b for b in budgets if b.period == MONTHLY and window.contains(b.start_date)]


def budget_overview(
    budgets: Sequence[Budget],
    transactions: TransactionsLike,
    window: Optional[DateWindow] = None,
) -> BudgetOverview:
    """Evaluate monthly budgets and roll them up into overall totals.

    When ``window`` is given only budgets starting inside it are included.
    Weekly and yearly budgets are not evaluated.
    """
    selected = []
    for budget in budgets:
        if budget.period != MONTHLY:
            logger.debug("Skipping %s budget %s", budget.period, budget.id)
            continue
        if window is not None and not window.contains(budget.start_date):
            continue
        selected.append(budget)

    evaluations = evaluate_budgets(selected, transactions)
    total_budget = float(sum(e.budget.amount for e in evaluations))
    total_spent = float(sum(e.spent for e in evaluations))
    overall = percentage(total_spent, total_budget)
    logger.debug(
        "Evaluated %d budgets: budget=%.2f spent=%.2f (%.1f%%)",
        len(evaluations), total_budget, total_spent, overall,
    )
    return BudgetOverview(
        total_budget=total_budget,
        total_spent=total_spent,
        overall_percentage=overall,
        overall_status=classify_status(overall),
        evaluations=evaluations,
    )
