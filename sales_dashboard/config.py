# sales_dashboard/config.py
from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Dict

import yaml

from sales_dashboard.seed import DEFAULT_SEED_URL

DEFAULT_CONFIG: Dict[str, object] = {
    "seed_url": DEFAULT_SEED_URL,
    "seed_timeout": None,
    "store": {
        "backend": "sqlite",
        "sqlite_path": "sales_dashboard.db",
        "mongo_uri": "mongodb://localhost:27017",
        "mongo_database": "sales_dashboard",
        "mongo_collection": "transactions",
    },
    "store_backends": {
        "sqlite": "sales_dashboard.stores.sqlite_store.SqliteTransactionStore",
        "mongo": "sales_dashboard.stores.mongo_store.MongoTransactionStore",
        "memory": "sales_dashboard.stores.memory_store.InMemoryTransactionStore",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 8000,
    },
    "cors_origins": ["*"],
    "log_level": "INFO",
}

CONFIG_ENV_VAR = "SALES_DASHBOARD_CONFIG"
LOG_LEVEL_ENV_VAR = "SALES_DASHBOARD_LOG_LEVEL"
DEFAULT_CONFIG_PATH = Path("config.yaml")


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def config_path(path: str | Path | None = None) -> Path:
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Load the YAML config at ``path`` merged over the defaults.

    Without ``path`` the ``SALES_DASHBOARD_CONFIG`` environment variable is
    consulted, then ``./config.yaml``. A missing file yields the defaults.
    """
    target = config_path(path)
    if not target.exists():
        return copy.deepcopy(DEFAULT_CONFIG)
    with target.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {target} must contain a mapping")
    return _merge_defaults(data, DEFAULT_CONFIG)


def configure_logging(config: Dict[str, object]) -> None:
    level = os.environ.get(LOG_LEVEL_ENV_VAR) or str(config.get("log_level") or "INFO")
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
