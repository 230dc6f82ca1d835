"""Calendar helpers for working with a single year/month."""

from __future__ import annotations

import calendar
import numbers
from datetime import MAXYEAR, MINYEAR, date, datetime
from typing import List, Optional, Tuple

from .defaults import get_config_value
from .errors import InvalidArgumentError

WEEKDAY_NAMES = ['日', '月', '火', '水', '木', '金', '土']

# Used when apportionment.json has no month_picker entry for the view
MONTH_PICKER_WINDOWS = {
    'overview': {'months_back': 6, 'months_forward': 3},
    'cashflow': {'months_back': 12, 'months_forward': 3},
}


def validate_month(month: int) -> int:
    """Return ``month`` as an int if it is a 1-based month number."""
    if isinstance(month, bool) or not isinstance(month, numbers.Integral):
        raise InvalidArgumentError(f"Month must be an integer, got {month!r}")
    if not 1 <= month <= 12:
        raise InvalidArgumentError(f"Month must be between 1 and 12, got {month}")
    return int(month)


def validate_year(year: int) -> int:
    """Return ``year`` as an int if ``datetime.date`` can represent it."""
    if isinstance(year, bool) or not isinstance(year, numbers.Integral):
        raise InvalidArgumentError(f"Year must be an integer, got {year!r}")
    if not MINYEAR <= year <= MAXYEAR:
        raise InvalidArgumentError(f"Year must be between {MINYEAR} and {MAXYEAR}, got {year}")
    return int(year)


def days_in_month(year: int, month: int) -> int:
    year = validate_year(year)
    month = validate_month(month)
    return calendar.monthrange(year, month)[1]


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday as 0 and Saturday as 6."""
    return day.isoweekday() % 7


def as_date(value) -> date:
    """Coerce a ``date``, ``datetime`` or pandas ``Timestamp`` to a plain date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidArgumentError(f"Expected a date, got {type(value).__name__}")


def month_key(year: int, month: int) -> str:
    validate_month(month)
    return f"{year:04d}-{month:02d}"


def parse_month_key(key: str) -> Tuple[int, int]:
    """Split a ``YYYY-MM`` key into ``(year, month)``."""
    try:
        year_text, month_text = key.split('-')
        year, month = int(year_text), int(month_text)
    except (AttributeError, ValueError) as e:
        raise InvalidArgumentError(f"Month key must look like YYYY-MM, got {key!r}") from e
    validate_month(month)
    return year, month


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    validate_month(month)
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return shift_month(year, month, -1)


def month_label(year: int, month: int) -> str:
    return f"{year}年{month}月"


def month_picker_window(view: str) -> Tuple[int, int]:
    """``(months_back, months_forward)`` for a month picker view.

    Read from ``month_picker`` in ``apportionment.json``, falling back to
    ``MONTH_PICKER_WINDOWS``.
    """
    if view not in MONTH_PICKER_WINDOWS:
        raise InvalidArgumentError(f"Unknown month picker view {view!r}")
    fallback = MONTH_PICKER_WINDOWS[view]
    window = get_config_value('apportionment', 'month_picker', view, default=fallback)
    if not isinstance(window, dict):
        raise InvalidArgumentError(f"month_picker.{view} must be an object, got {window!r}")
    return (
        int(window.get('months_back', fallback['months_back'])),
        int(window.get('months_forward', fallback['months_forward'])),
    )


def available_months(
    today: Optional[date] = None,
    months_back: Optional[int] = None,
    months_forward: Optional[int] = None,
    *,
    view: str = 'overview',
) -> List[Tuple[str, str]]:
    """List selectable months around ``today``.

    Returns ``(key, label)`` pairs from ``months_back`` months ago through
    ``months_forward`` months ahead, oldest first, with the current month
    included. Windows left as ``None`` come from the ``view``'s configured
    month picker (``'overview'`` or ``'cashflow'``).
    """
    today = as_date(today or date.today())
    if months_back is None or months_forward is None:
        default_back, default_forward = month_picker_window(view)
        months_back = default_back if months_back is None else months_back
        months_forward = default_forward if months_forward is None else months_forward
    if months_back < 0 or months_forward < 0:
        raise InvalidArgumentError("Month picker windows must be non-negative")
    months = []
    for offset in range(-months_back, months_forward + 1):
        year, month = shift_month(today.year, today.month, offset)
        months.append((month_key(year, month), month_label(year, month)))
    return months
