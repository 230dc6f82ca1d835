"""Budget-vs-actual tables built on top of the apportionment engine.

This module turns a monthly budget and a set of recorded spending
transactions into the daily table, the weekly progress buckets and the
month-to-date snapshot shown by the application.

Transactions are passed as a DataFrame with ``Transaction Date`` and
``Amount`` columns, where ``Amount`` is the (positive) amount spent.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .apportionment import DEFAULT_APPORTIONER, BudgetApportioner
from .defaults import get_config_value
from .errors import InvalidArgumentError
from .logging_setup import get_logger
from .months import WEEKDAY_NAMES, as_date, days_in_month, validate_month

logger = get_logger(__name__)

DEFAULT_WEEK_BUCKETS: List[Dict[str, Any]] = [
    {'label': '1W', 'start': 1, 'end': 7},
    {'label': '2W', 'start': 8, 'end': 14},
    {'label': '3W', 'start': 15, 'end': 21},
    {'label': '4W', 'start': 22, 'end': 28},
    {'label': '5W', 'start': 29, 'end': None},
]

STATUS_BEHIND = 'behind'
STATUS_WITHIN = 'within budget'

DAILY_COLUMNS = ['Date', 'Day', 'Weekday', 'Weekday Name', 'Budget', 'Actual', 'Difference']
WEEKLY_COLUMNS = [
    'Period', 'Start Day', 'End Day', 'Budget', 'Actual',
    'Cumulative Budget', 'Cumulative Actual', 'Usage Rate', 'Remaining',
    'Is Behind', 'Status',
]


@dataclass(frozen=True)
class WeekBucket:
    label: str
    start: int
    end: int


def week_buckets(year: int, month: int, buckets: Optional[List[Dict[str, Any]]] = None) -> List[WeekBucket]:
    """Fixed day ranges used to split a month into weeks.

    Args:
        year: Calendar year
        month: 1-based month
        buckets: Bucket definitions (``label``/``start``/``end``); an ``end``
            of ``None`` means the last day of the month. Defaults to the
            ``week_buckets`` entry of the apportionment config.

    Returns:
        List of buckets with ``end`` clipped to the month's last day. In a
        28-day month the final bucket is empty (``start > end``) but is still
        returned so every month reports the same periods.
    """
    last_day = days_in_month(year, month)
    if buckets is None:
        buckets = get_config_value('apportionment', 'week_buckets', default=DEFAULT_WEEK_BUCKETS)
    result = []
    for entry in buckets:
        start = int(entry['start'])
        end = last_day if entry.get('end') is None else min(int(entry['end']), last_day)
        if start < 1:
            raise InvalidArgumentError(f"Week bucket {entry.get('label')!r} starts before day 1")
        result.append(WeekBucket(label=str(entry['label']), start=start, end=end))
    return result


def _prepare_transactions(transactions: Optional[pd.DataFrame]) -> pd.DataFrame:
    if transactions is None or transactions.empty:
        return pd.DataFrame({'Transaction Date': pd.Series(dtype='datetime64[ns]'),
                             'Amount': pd.Series(dtype=float)})
    for column in ('Transaction Date', 'Amount'):
        if column not in transactions.columns:
            raise InvalidArgumentError(f"Transactions are missing the '{column}' column")
    data = transactions.copy()
    data['Transaction Date'] = pd.to_datetime(data['Transaction Date'])
    data['Amount'] = pd.to_numeric(data['Amount'], errors='coerce').fillna(0.0)
    return data


def _daily_actuals(transactions: Optional[pd.DataFrame], year: int, month: int) -> pd.Series:
    """Total amount spent per day-of-month for the given month."""
    data = _prepare_transactions(transactions)
    dates = data['Transaction Date']
    scoped = data[(dates.dt.year == year) & (dates.dt.month == month)]
    if scoped.empty:
        return pd.Series(dtype=float)
    return scoped.groupby(scoped['Transaction Date'].dt.day)['Amount'].sum()


def daily_budget_frame(
    monthly_budget: float,
    year: int,
    month: int,
    transactions: Optional[pd.DataFrame] = None,
    *,
    apportioner: Optional[BudgetApportioner] = None,
) -> pd.DataFrame:
    """Create the per-day budget vs actual table for a month.

    Args:
        monthly_budget: Monthly budget to apportion
        year: Calendar year
        month: 1-based month
        transactions: Spending transactions (``Transaction Date``, ``Amount``)
        apportioner: Engine to use; defaults to the standard weekday ratios

    Returns:
        DataFrame with columns: Date, Day, Weekday (Sunday=0), Weekday Name,
        Budget, Actual, Difference (actual minus budget)
    """
    engine = apportioner or DEFAULT_APPORTIONER
    month = validate_month(month)
    allocation = engine.month_allocation(monthly_budget, year, month)
    dates = pd.date_range(pd.Timestamp(year=year, month=month, day=1), periods=len(allocation), freq='D')
    weekdays = (dates.dayofweek + 1) % 7

    frame = pd.DataFrame({
        'Date': dates,
        'Day': dates.day,
        'Weekday': weekdays,
        'Weekday Name': [WEEKDAY_NAMES[w] for w in weekdays],
        'Budget': allocation,
    })
    actuals = _daily_actuals(transactions, year, month)
    frame['Actual'] = frame['Day'].map(actuals).fillna(0.0).astype(float)
    frame['Difference'] = frame['Actual'] - frame['Budget']
    return frame[DAILY_COLUMNS]


def month_totals(frame: pd.DataFrame) -> Dict[str, float]:
    """Total budget, actual and difference of a daily budget frame."""
    if frame.empty:
        return {'Budget': 0.0, 'Actual': 0.0, 'Difference': 0.0}
    budget = float(frame['Budget'].sum())
    actual = float(frame['Actual'].sum())
    return {'Budget': budget, 'Actual': actual, 'Difference': actual - budget}


def _elapsed_days(year: int, month: int, today: date) -> int:
    """Number of days of the month on or before ``today``."""
    if (year, month) < (today.year, today.month):
        return days_in_month(year, month)
    if (year, month) == (today.year, today.month):
        return today.day
    return 0


def weekly_progress(
    monthly_budget: float,
    year: int,
    month: int,
    transactions: Optional[pd.DataFrame] = None,
    *,
    today: Optional[date] = None,
    apportioner: Optional[BudgetApportioner] = None,
    buckets: Optional[List[Dict[str, Any]]] = None,
) -> pd.DataFrame:
    """Calculate weekly bucket progress for a month.

    Each bucket reports its own budget and actual, plus cumulative figures
    from day 1 through the end of the bucket. Cumulative figures only count
    days up to ``today``, so buckets in the future carry the month-to-date
    totals and a month that has not started yet reports zeros.

    Args:
        monthly_budget: Monthly budget to apportion
        year: Calendar year
        month: 1-based month
        transactions: Spending transactions (``Transaction Date``, ``Amount``)
        today: Reference date; defaults to ``date.today()``
        apportioner: Engine to use; defaults to the standard weekday ratios
        buckets: Optional bucket definitions (see ``week_buckets``)

    Returns:
        DataFrame with columns: Period, Start Day, End Day, Budget, Actual,
        Cumulative Budget, Cumulative Actual, Usage Rate, Remaining,
        Is Behind, Status
    """
    today = as_date(today or date.today())
    daily = daily_budget_frame(monthly_budget, year, month, transactions, apportioner=apportioner)
    elapsed = daily['Day'] <= _elapsed_days(year, month, today)

    rows = []
    for bucket in week_buckets(year, month, buckets):
        in_bucket = (daily['Day'] >= bucket.start) & (daily['Day'] <= bucket.end)
        cumulative = daily[(daily['Day'] <= bucket.end) & elapsed]
        cumulative_budget = float(cumulative['Budget'].sum())
        cumulative_actual = float(cumulative['Actual'].sum())
        usage_rate = cumulative_actual / cumulative_budget * 100 if cumulative_budget > 0 else 0.0
        is_behind = cumulative_actual > cumulative_budget
        rows.append({
            'Period': bucket.label,
            'Start Day': bucket.start,
            'End Day': bucket.end,
            'Budget': float(daily.loc[in_bucket, 'Budget'].sum()),
            'Actual': float(daily.loc[in_bucket, 'Actual'].sum()),
            'Cumulative Budget': cumulative_budget,
            'Cumulative Actual': cumulative_actual,
            'Usage Rate': usage_rate,
            'Remaining': cumulative_budget - cumulative_actual,
            'Is Behind': is_behind,
        })

    result = pd.DataFrame(rows, columns=WEEKLY_COLUMNS[:-1])
    result['Is Behind'] = result['Is Behind'].astype(bool)
    result['Status'] = np.where(result['Is Behind'], STATUS_BEHIND, STATUS_WITHIN)
    logger.debug("Weekly progress for %04d-%02d through %s: %d buckets", year, month, today, len(result))
    return result[WEEKLY_COLUMNS]


def month_snapshot(
    monthly_budget: float,
    transactions: Optional[pd.DataFrame] = None,
    *,
    today: Optional[date] = None,
    apportioner: Optional[BudgetApportioner] = None,
) -> Dict[str, float]:
    """Today's and month-to-date budget vs actual.

    Returns:
        Dictionary with keys ``today_budget``, ``today_actual``,
        ``today_difference``, ``cumulative_budget``, ``cumulative_actual``,
        ``cumulative_difference`` and ``month_total_budget``. Differences are
        actual minus budget, so a positive value means overspending.
    """
    engine = apportioner or DEFAULT_APPORTIONER
    today = as_date(today or date.today())
    actuals = _daily_actuals(transactions, today.year, today.month)

    today_budget = engine.today_budget(monthly_budget, today)
    today_actual = float(actuals.get(today.day, 0.0))
    cumulative_budget = engine.monthly_cumulative_budget(monthly_budget, today)
    cumulative_actual = float(actuals[actuals.index <= today.day].sum())

    return {
        'today_budget': today_budget,
        'today_actual': today_actual,
        'today_difference': today_actual - today_budget,
        'cumulative_budget': cumulative_budget,
        'cumulative_actual': cumulative_actual,
        'cumulative_difference': cumulative_actual - cumulative_budget,
        'month_total_budget': engine.monthly_total_budget(monthly_budget, today),
    }
