"""Exception types raised by the budget calculations."""

from __future__ import annotations


class BudgetError(Exception):
    """Base class for all household budget errors."""


class InvalidArgumentError(BudgetError, ValueError):
    """An input is outside the accepted range (month, budget, day, ratios)."""


class DegenerateComputationError(BudgetError, ZeroDivisionError):
    """The weighted day total for a month is zero, so no unit price exists."""
