"""Top-level package for the finance tracker.

The aggregation and reporting engine turns flat lists of transactions,
categories and budgets into dashboard statistics, budget status, income
analytics, multi-period reports and paginated/exported transaction views.
The primary modules are:

* ``aggregation`` – sums, category groupings and time series shared by every view
* ``budgets`` – budget spend and status classification
* ``dashboard_stats`` / ``income_analytics`` / ``reports`` – the view builders
* ``transaction_view`` – filtering, pagination and CSV export
* ``service`` – a facade reading from a ``store`` and calling the builders
* ``dashboard`` – a Streamlit app on top of the facade

To run the dashboard from the command line you can execute:

```bash
streamlit run finance_tracker/dashboard.py
```
"""

from . import aggregation  # noqa: F401  # re-exported for convenience
from . import budgets  # noqa: F401
from . import reports  # noqa: F401
from .models import Budget, Category, CategoryRef, Transaction  # noqa: F401
from .service import FinanceTracker  # noqa: F401

__all__ = [
    "aggregation",
    "budgets",
    "reports",
    "Budget",
    "Category",
    "CategoryRef",
    "Transaction",
    "FinanceTracker",
]
