"""Read the JSON default files, caching each file until it changes on disk."""

from __future__ import annotations

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import get_defaults_dir


@lru_cache(maxsize=32)
def _read_json(path: str, mtime_ns: int) -> Dict[str, Any]:
    # mtime_ns is part of the cache key so an edited file is read again
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_config(config_name: str, config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Return the parsed ``<config_name>.json`` from ``config_dir``.

    ``config_dir`` defaults to the directory named by
    ``HOUSEHOLD_BUDGET_DEFAULTS_DIR`` (or the packaged defaults). The result
    is a copy, so callers may modify it freely.

    Raises:
        FileNotFoundError: no such file in the directory
    """
    config_path = (config_dir or get_defaults_dir()) / f"{config_name}.json"
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    return copy.deepcopy(_read_json(str(config_path), config_path.stat().st_mtime_ns))


def get_apportionment_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    return load_config('apportionment', config_dir)


def get_config_value(config_name: str, *keys: str, default: Any = None) -> Any:
    """Look up a nested value, e.g. ``('apportionment', 'month_picker', 'overview')``.

    A missing file or key path gives ``default``.
    """
    try:
        value = load_config(config_name)
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError, FileNotFoundError):
        return default
