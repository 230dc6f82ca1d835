"""Top‑level package for the household budget calculations.

The primary modules are:

* ``apportionment`` – spreads a monthly budget over days by weekday weight
* ``progress`` – daily and weekly budget vs actual tables (pandas)
* ``cashflow`` – monthly fixed income/expense planner
* ``months`` – calendar helpers for a single year/month

Storage, authentication and rendering are left to the calling application,
which passes in the monthly budget, the spending transactions and the dates
it wants figures for.
"""

from . import apportionment  # noqa: F401  # re-exported for convenience
from . import cashflow  # noqa: F401  # re-exported for convenience
from . import progress  # noqa: F401  # re-exported for convenience
from .apportionment import (
    BudgetApportioner,
    WeekdayRatioTable,
    cumulative_budget,
    daily_budget,
    monthly_cumulative_budget,
    monthly_total_budget,
    today_budget,
    unit_price,
    weekday_day_counts,
)
from .errors import BudgetError, DegenerateComputationError, InvalidArgumentError

__all__ = [
    "apportionment",
    "cashflow",
    "progress",
    "BudgetApportioner",
    "WeekdayRatioTable",
    "cumulative_budget",
    "daily_budget",
    "monthly_cumulative_budget",
    "monthly_total_budget",
    "today_budget",
    "unit_price",
    "weekday_day_counts",
    "BudgetError",
    "DegenerateComputationError",
    "InvalidArgumentError",
]
