"""Budget apportionment across the days of a month.

A single monthly budget is spread over the days of a calendar month using a
fixed relative weight per weekday.  Because months contain different numbers
of each weekday, the weights are first normalised for the specific month:

* ``weighted_days`` = sum over the month's days of ``ratio[weekday] / 100``
* ``unit_price`` = ``monthly_budget / weighted_days`` (currency per 1% of weight)
* ``daily_budget`` = ``unit_price * ratio[weekday] / 100``

Summing ``daily_budget`` over every day of the month gives back the monthly
budget (up to floating point rounding).

Weekdays are numbered with Sunday as 0 and Saturday as 6 throughout.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .defaults import get_apportionment_config
from .errors import DegenerateComputationError, InvalidArgumentError
from .logging_setup import get_logger
from .months import as_date, days_in_month, sunday_weekday, validate_month

logger = get_logger(__name__)

DEFAULT_WEEKDAY_RATIOS: Mapping[int, int] = MappingProxyType({
    0: 19,  # Sunday
    1: 5,   # Monday
    2: 5,   # Tuesday
    3: 5,   # Wednesday
    4: 5,   # Thursday
    5: 19,  # Friday
    6: 42,  # Saturday
})


@dataclass(frozen=True)
class WeekdayRatioTable:
    """Relative percentage weight per weekday, indexed Sunday=0 .. Saturday=6.

    The weights are relative and need not sum to 100.
    """

    ratios: Tuple[int, ...]

    def __post_init__(self) -> None:
        ratios = tuple(self.ratios)
        if len(ratios) != 7:
            raise InvalidArgumentError(f"Expected 7 weekday ratios, got {len(ratios)}")
        for weekday, ratio in enumerate(ratios):
            if isinstance(ratio, bool) or not isinstance(ratio, numbers.Integral):
                raise InvalidArgumentError(
                    f"Ratio for weekday {weekday} must be an integer, got {ratio!r}"
                )
            if ratio < 0:
                raise InvalidArgumentError(f"Ratio for weekday {weekday} is negative: {ratio}")
        object.__setattr__(self, 'ratios', ratios)

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> 'WeekdayRatioTable':
        """Build a table from ``{weekday: ratio}``; keys may be ints or digit strings."""
        normalized: Dict[int, int] = {}
        for key, value in mapping.items():
            try:
                weekday = int(key)
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(f"Invalid weekday key {key!r}") from e
            normalized[weekday] = value
        if sorted(normalized) != list(range(7)):
            raise InvalidArgumentError(
                f"Weekday ratios must cover weekdays 0-6 exactly, got {sorted(normalized)}"
            )
        return cls(tuple(normalized[weekday] for weekday in range(7)))

    @classmethod
    def from_config(cls, config_dir: Optional[Path] = None) -> 'WeekdayRatioTable':
        """Load the table from the ``apportionment.json`` defaults file."""
        config = get_apportionment_config(config_dir)
        if 'weekday_ratios' not in config:
            raise InvalidArgumentError("apportionment config is missing 'weekday_ratios'")
        return cls.from_mapping(config['weekday_ratios'])

    def fraction(self, weekday: int) -> float:
        return self.ratios[weekday] / 100

    def as_dict(self) -> Dict[int, int]:
        return dict(enumerate(self.ratios))


DEFAULT_RATIO_TABLE = WeekdayRatioTable.from_mapping(DEFAULT_WEEKDAY_RATIOS)


def load_weekday_ratios(config_dir: Optional[Path] = None) -> WeekdayRatioTable:
    """Read the weekday ratio table from the JSON defaults."""
    return WeekdayRatioTable.from_config(config_dir)


def configured_ratio_table(config_dir: Optional[Path] = None) -> WeekdayRatioTable:
    """Ratio table from ``apportionment.json``.

    Falls back to ``DEFAULT_RATIO_TABLE`` when the file or its
    ``weekday_ratios`` entry is missing. A malformed entry still raises
    ``InvalidArgumentError``.
    """
    try:
        config = get_apportionment_config(config_dir)
    except FileNotFoundError:
        return DEFAULT_RATIO_TABLE
    if 'weekday_ratios' not in config:
        return DEFAULT_RATIO_TABLE
    return WeekdayRatioTable.from_mapping(config['weekday_ratios'])


def validate_budget(monthly_budget) -> float:
    """Return the budget as a float, rejecting negative and non-numeric values."""
    if isinstance(monthly_budget, bool) or not isinstance(monthly_budget, numbers.Real):
        raise InvalidArgumentError(f"Monthly budget must be a number, got {monthly_budget!r}")
    value = float(monthly_budget)
    if not math.isfinite(value):
        raise InvalidArgumentError(f"Monthly budget must be finite, got {monthly_budget}")
    if value < 0:
        raise InvalidArgumentError(f"Monthly budget must be non-negative, got {monthly_budget}")
    return value


class BudgetApportioner:
    """Distributes a monthly budget over days using a weekday ratio table.

    Without an explicit table the engine uses the configured ratios, looked
    up again on each calculation so ``HOUSEHOLD_BUDGET_DEFAULTS_DIR`` applies
    to the module-level functions too.
    """

    def __init__(self, ratios: Optional[WeekdayRatioTable] = None):
        self._ratios = ratios

    @property
    def ratios(self) -> WeekdayRatioTable:
        return self._ratios if self._ratios is not None else configured_ratio_table()

    def weekday_day_counts(self, year: int, month: int) -> Dict[int, int]:
        """Count how many times each weekday (Sunday=0) occurs in the month."""
        counts = {weekday: 0 for weekday in range(7)}
        for day in range(1, days_in_month(year, month) + 1):
            counts[sunday_weekday(date(year, month, day))] += 1
        return counts

    def weighted_days(self, year: int, month: int) -> float:
        return self._weighted_days(self.ratios, year, month)

    def _weighted_days(self, ratios: WeekdayRatioTable, year: int, month: int) -> float:
        counts = self.weekday_day_counts(year, month)
        return sum(ratios.fraction(weekday) * counts[weekday] for weekday in range(7))

    def unit_price(self, monthly_budget, year: int, month: int) -> float:
        """Currency value of one percentage point of weekday weight in this month.

        Raises:
            InvalidArgumentError: negative budget or invalid month
            DegenerateComputationError: the month's weighted day total is zero
        """
        return self._unit_price(self.ratios, monthly_budget, year, month)

    def _unit_price(self, ratios: WeekdayRatioTable, monthly_budget, year: int, month: int) -> float:
        budget = validate_budget(monthly_budget)
        total = self._weighted_days(ratios, year, month)
        if total == 0:
            logger.warning("Zero weighted days for %04d-%02d with ratios %s", year, month, ratios.ratios)
            raise DegenerateComputationError(
                f"Weighted day total for {year:04d}-{month:02d} is zero; cannot apportion budget"
            )
        price = budget / total
        logger.debug("Unit price for %04d-%02d: %.4f (weighted days %.2f)", year, month, price, total)
        return price

    def daily_budget(self, day, monthly_budget) -> float:
        day = as_date(day)
        ratios = self.ratios
        price = self._unit_price(ratios, monthly_budget, day.year, day.month)
        return price * ratios.fraction(sunday_weekday(day))

    def month_allocation(self, monthly_budget, year: int, month: int) -> List[float]:
        """Daily allocations for every day of the month, day 1 first."""
        ratios = self.ratios
        price = self._unit_price(ratios, monthly_budget, year, month)
        return [
            price * ratios.fraction(sunday_weekday(date(year, month, day)))
            for day in range(1, days_in_month(year, month) + 1)
        ]

    def cumulative_budget(self, monthly_budget, year: int, month: int, through_day: int) -> float:
        """Sum of daily allocations from day 1 through ``through_day`` inclusive.

        ``through_day`` of 0 gives 0.0; values past the end of the month are rejected.
        """
        validate_month(month)
        last_day = days_in_month(year, month)
        if isinstance(through_day, bool) or not isinstance(through_day, numbers.Integral):
            raise InvalidArgumentError(f"Day must be an integer, got {through_day!r}")
        if not 0 <= through_day <= last_day:
            raise InvalidArgumentError(
                f"Day must be between 0 and {last_day} for {year:04d}-{month:02d}, got {through_day}"
            )
        allocation = self.month_allocation(monthly_budget, year, month)
        return sum(allocation[:through_day])

    def monthly_cumulative_budget(self, monthly_budget, today: Optional[date] = None) -> float:
        """Cumulative budget from the 1st of the current month through today."""
        today = as_date(today or date.today())
        return self.cumulative_budget(monthly_budget, today.year, today.month, today.day)

    def monthly_total_budget(self, monthly_budget, today: Optional[date] = None) -> float:
        """Budget for the whole current month."""
        today = as_date(today or date.today())
        return self.cumulative_budget(
            monthly_budget, today.year, today.month, days_in_month(today.year, today.month)
        )

    def today_budget(self, monthly_budget, today: Optional[date] = None) -> float:
        return self.daily_budget(today or date.today(), monthly_budget)


DEFAULT_APPORTIONER = BudgetApportioner()


def weekday_day_counts(year: int, month: int) -> Dict[int, int]:
    return DEFAULT_APPORTIONER.weekday_day_counts(year, month)


def unit_price(monthly_budget, year: int, month: int) -> float:
    return DEFAULT_APPORTIONER.unit_price(monthly_budget, year, month)


def daily_budget(day, monthly_budget) -> float:
    return DEFAULT_APPORTIONER.daily_budget(day, monthly_budget)


def month_allocation(monthly_budget, year: int, month: int) -> List[float]:
    return DEFAULT_APPORTIONER.month_allocation(monthly_budget, year, month)


def cumulative_budget(monthly_budget, year: int, month: int, through_day: int) -> float:
    return DEFAULT_APPORTIONER.cumulative_budget(monthly_budget, year, month, through_day)


def monthly_cumulative_budget(monthly_budget, today: Optional[date] = None) -> float:
    return DEFAULT_APPORTIONER.monthly_cumulative_budget(monthly_budget, today)


def monthly_total_budget(monthly_budget, today: Optional[date] = None) -> float:
    return DEFAULT_APPORTIONER.monthly_total_budget(monthly_budget, today)


def today_budget(monthly_budget, today: Optional[date] = None) -> float:
    return DEFAULT_APPORTIONER.today_budget(monthly_budget, today)
