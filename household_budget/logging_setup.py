import logging
import sys
from typing import Optional

from .config import get_log_level


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for applications embedding the budget calculations.

    ``level`` falls back to ``HOUSEHOLD_BUDGET_LOG_LEVEL`` (default INFO).
    """
    level = level or get_log_level()
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve a namespaced logger.
    """
    return logging.getLogger(name)
