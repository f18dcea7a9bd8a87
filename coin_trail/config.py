# coin_trail/config.py
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Dict, Optional

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "db_path": "cointrail.db",
    "output_dir": "./data",
    "output_modules": {
        "csv": "coin_trail.outputs.csv_output.CSVOutput",
        "excel": "coin_trail.outputs.excel_output.ExcelOutput",
    },
    "categories": {
        "income": ["Salary", "Rental Income", "Business Income", "Investments", "Other"],
        "expense": [
            "Housing",
            "Transport",
            "Food & Groceries",
            "Health",
            "Entertainment",
            "Other",
        ],
    },
    "recent_transactions": 5,
    "realm": "Coin Trail",
    "log_level": "INFO",
}

CONFIG_ENV = "COIN_TRAIL_CONFIG"
DB_ENV = "COIN_TRAIL_DB"
LOG_LEVEL_ENV = "COIN_TRAIL_LOG_LEVEL"


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def _apply_env(config: Dict[str, object]) -> Dict[str, object]:
    if os.environ.get(DB_ENV):
        config["db_path"] = os.environ[DB_ENV]
    if os.environ.get(LOG_LEVEL_ENV):
        config["log_level"] = os.environ[LOG_LEVEL_ENV]
    return config


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Load a YAML config file and fill in defaults.

    When *path* is omitted the ``COIN_TRAIL_CONFIG`` environment variable is
    consulted; a missing file yields the defaults. ``COIN_TRAIL_DB`` and
    ``COIN_TRAIL_LOG_LEVEL`` override the file.
    """
    target = path or os.environ.get(CONFIG_ENV)
    data: Dict[str, object] = {}
    if target and Path(target).exists():
        with Path(target).open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    return _apply_env(_merge_defaults(data, DEFAULT_CONFIG))


def with_defaults(overrides: Optional[Dict[str, object]] = None) -> Dict[str, object]:
    return _merge_defaults(overrides or {}, DEFAULT_CONFIG)
