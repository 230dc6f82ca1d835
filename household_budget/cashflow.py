"""Monthly cash-flow planner for fixed income and expense items."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional

import pandas as pd

from .errors import InvalidArgumentError
from .logging_setup import get_logger
from .months import previous_month, validate_month

logger = get_logger(__name__)

INCOME = 'income'
EXPENSE = 'expense'
ITEM_KINDS = (INCOME, EXPENSE)
EDITABLE_FIELDS = {'name', 'amount', 'is_fixed'}

PRESET_EXPENSE_CATEGORIES = ['家賃', 'ローン', '楽天', 'PayPay', 'ANA', 'Amazon']
PRESET_INCOME_CATEGORIES = ['給与']

FRAME_COLUMNS = ['type', 'category_name', 'amount', 'is_fixed']


@dataclass(frozen=True)
class CashflowItem:
    name: str
    amount: float = 0.0
    is_fixed: bool = False
    kind: str = EXPENSE

    def __post_init__(self) -> None:
        if self.kind not in ITEM_KINDS:
            raise InvalidArgumentError(f"Cash-flow item kind must be one of {ITEM_KINDS}, got {self.kind!r}")
        if isinstance(self.amount, bool) or not isinstance(self.amount, numbers.Real):
            raise InvalidArgumentError(f"Amount for {self.name!r} must be a number, got {self.amount!r}")
        amount = float(self.amount)
        if not math.isfinite(amount) or amount < 0:
            raise InvalidArgumentError(f"Amount for {self.name!r} must be non-negative, got {self.amount}")
        object.__setattr__(self, 'amount', amount)
        object.__setattr__(self, 'is_fixed', bool(self.is_fixed))


@dataclass
class CashflowPlan:
    """Income and expense items planned for one month."""

    year: int
    month: int
    incomes: List[CashflowItem] = field(default_factory=list)
    expenses: List[CashflowItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.month = validate_month(self.month)
        for item in self.incomes:
            if item.kind != INCOME:
                raise InvalidArgumentError(f"{item.name!r} is not an income item")
        for item in self.expenses:
            if item.kind != EXPENSE:
                raise InvalidArgumentError(f"{item.name!r} is not an expense item")

    @property
    def is_empty(self) -> bool:
        return not self.incomes and not self.expenses

    @property
    def total_income(self) -> float:
        return sum(item.amount for item in self.incomes)

    @property
    def total_expense(self) -> float:
        return sum(item.amount for item in self.expenses)

    @property
    def net_cashflow(self) -> float:
        """Income minus expense; negative when the month runs a deficit."""
        return self.total_income - self.total_expense

    def add_item(self, name: str, kind: str, amount: float = 0.0, is_fixed: bool = False) -> CashflowItem:
        item = CashflowItem(name=name, amount=amount, is_fixed=is_fixed, kind=kind)
        (self.incomes if kind == INCOME else self.expenses).append(item)
        return item

    def _items(self, kind: str, index: int) -> List[CashflowItem]:
        if kind not in ITEM_KINDS:
            raise InvalidArgumentError(f"Unknown cash-flow item kind {kind!r}")
        items = self.incomes if kind == INCOME else self.expenses
        if isinstance(index, bool) or not isinstance(index, numbers.Integral) or not 0 <= index < len(items):
            raise InvalidArgumentError(f"No {kind} item at position {index!r}")
        return items

    def update_item(self, kind: str, index: int, **changes) -> CashflowItem:
        """Replace the item at ``index`` with a copy carrying ``changes``.

        Only ``name``, ``amount`` and ``is_fixed`` may change. The new item is
        validated like any other, so a negative amount is rejected and the
        plan is left untouched.
        """
        items = self._items(kind, index)
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidArgumentError(f"Cannot update cash-flow item fields {sorted(unknown)}")
        items[index] = replace(items[index], **changes)
        return items[index]

    def remove_item(self, kind: str, index: int) -> CashflowItem:
        return self._items(kind, index).pop(index)


def preset_plan(year: int, month: int) -> CashflowPlan:
    """Plan pre-filled with the preset category names at zero amounts."""
    plan = CashflowPlan(year=year, month=month)
    for name in PRESET_EXPENSE_CATEGORIES:
        plan.add_item(name, EXPENSE)
    for name in PRESET_INCOME_CATEGORIES:
        plan.add_item(name, INCOME)
    return plan


def _carry_item(item: CashflowItem) -> CashflowItem:
    return replace(item, amount=item.amount if item.is_fixed else 0.0)


def carry_forward(previous: Optional[CashflowPlan], year: int, month: int) -> CashflowPlan:
    """Start a month's plan from the previous month's items.

    Item names and fixed flags are copied. Fixed items keep their amount,
    everything else starts at zero. Without previous items the new plan is
    empty.
    """
    plan = CashflowPlan(year=year, month=month)
    if previous is None or previous.is_empty:
        return plan
    expected = previous_month(year, month)
    if (previous.year, previous.month) != expected:
        logger.warning(
            "Carrying forward %04d-%02d into %04d-%02d; expected the previous month %04d-%02d",
            previous.year, previous.month, year, month, *expected,
        )
    plan.incomes = [_carry_item(item) for item in previous.incomes]
    plan.expenses = [_carry_item(item) for item in previous.expenses]
    return plan


def plan_to_frame(plan: CashflowPlan) -> pd.DataFrame:
    """Flatten a plan into store rows: type, category_name, amount, is_fixed."""
    rows = [
        {'type': item.kind, 'category_name': item.name, 'amount': item.amount, 'is_fixed': item.is_fixed}
        for item in [*plan.expenses, *plan.incomes]
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def plan_from_frame(frame: pd.DataFrame, year: int, month: int) -> CashflowPlan:
    """Build a plan from store rows.

    Missing amounts are read as 0 and missing fixed flags as ``False``.
    Items are ordered by name within each kind.
    """
    plan = CashflowPlan(year=year, month=month)
    if frame is None or frame.empty:
        return plan
    missing = [column for column in ('type', 'category_name') if column not in frame.columns]
    if missing:
        raise InvalidArgumentError(f"Cash-flow rows are missing columns: {missing}")

    data = frame.copy()
    if 'amount' not in data.columns:
        data['amount'] = 0.0
    if 'is_fixed' not in data.columns:
        data['is_fixed'] = False
    data['amount'] = pd.to_numeric(data['amount'], errors='coerce').fillna(0.0)
    data['is_fixed'] = data['is_fixed'].fillna(False).astype(bool)
    data = data.sort_values('category_name', kind='stable')

    for row in data.itertuples(index=False):
        plan.add_item(str(row.category_name), row.type, float(row.amount), bool(row.is_fixed))
    return plan


def monthly_totals(plans: Iterable[CashflowPlan]) -> pd.DataFrame:
    """Income, expense and net totals per month for a series of plans."""
    rows = [
        {
            'Month': f"{plan.year:04d}-{plan.month:02d}",
            'Income': plan.total_income,
            'Expense': plan.total_expense,
            'Net': plan.net_cashflow,
        }
        for plan in plans
    ]
    return pd.DataFrame(rows, columns=['Month', 'Income', 'Expense', 'Net']).sort_values('Month', ignore_index=True)
