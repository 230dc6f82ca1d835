"""Configuration management for the household budget package.

This module centralizes the values read from the environment: where the
JSON defaults live and how verbose logging should be.
"""

from __future__ import annotations

import os
from pathlib import Path

# Package root - assumes this file is in household_budget/
_PACKAGE_ROOT = Path(__file__).parent.resolve()

# JSON defaults (weekday ratios, week buckets, month picker windows)
DEFAULTS_DIR = Path(
    os.getenv("HOUSEHOLD_BUDGET_DEFAULTS_DIR", _PACKAGE_ROOT / "defaults")
).resolve()

LOG_LEVEL = os.getenv("HOUSEHOLD_BUDGET_LOG_LEVEL", "INFO")


def get_defaults_dir() -> Path:
    """Return the directory JSON defaults are read from.

    The environment is consulted on every call so tests can point the
    loader at a temporary directory with ``monkeypatch.setenv``.
    """
    override = os.getenv("HOUSEHOLD_BUDGET_DEFAULTS_DIR")
    return Path(override).resolve() if override else DEFAULTS_DIR


def get_log_level() -> str:
    """Get the configured log level name."""
    return os.getenv("HOUSEHOLD_BUDGET_LOG_LEVEL", LOG_LEVEL)
