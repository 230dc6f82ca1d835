"""Formatting utilities for currency and rate display."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a yen amount with thousands separators and no minor unit.
    
    Args:
        amount: The amount to format
        include_sign: Whether to include the yen sign
        
    Returns:
        Formatted currency string (e.g., "¥1,235" or "1,235")
        
    Example:
        >>> format_currency(1234.56)
        '¥1,235'
        >>> format_currency(-500, include_sign=False)
        '-500'
        >>> format_currency(-500)
        '-¥500'
    """
    rounded = round(amount)
    formatted = f"{abs(rounded):,}"
    if include_sign:
        formatted = f"¥{formatted}"
    return f"-{formatted}" if rounded < 0 else formatted


def format_usage_rate(rate: float) -> str:
    """Format a usage percentage as a whole number, e.g. ``87.4`` -> ``'87%'``."""
    return f"{rate:.0f}%"
