"""Key/value configuration stores passed into the engine."""

from typing import Mapping, Optional

import pandas as pd

from engine.errors import ConfigLookupError

KEY_COLUMN = "config_key"
VALUE_COLUMN = "config_value"
ACTIVE_COLUMN = "is_active"


class DictConfigStore:
    """In-memory store; get() returns None for unknown keys."""

    def __init__(self, values: Optional[Mapping[str, object]] = None):
        self._values = dict(values or {})

    def get(self, key: str):
        return self._values.get(key)


def _truthy(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y")
    return bool(value)


def config_store_from_frame(df: pd.DataFrame) -> DictConfigStore:
    """Build a store from a config_key/config_value frame, skipping inactive rows."""
    missing = [c for c in (KEY_COLUMN, VALUE_COLUMN) if c not in df.columns]
    if missing:
        raise ConfigLookupError(f"Config table missing columns: {', '.join(missing)}")

    values = {}
    for _, row in df.iterrows():
        if ACTIVE_COLUMN in df.columns and pd.notna(row[ACTIVE_COLUMN]) and not _truthy(row[ACTIVE_COLUMN]):
            continue
        if pd.isna(row[KEY_COLUMN]) or pd.isna(row[VALUE_COLUMN]):
            continue
        values[str(row[KEY_COLUMN]).strip()] = row[VALUE_COLUMN]
    return DictConfigStore(values)


def load_config_store(path: str) -> DictConfigStore:
    """Load a config store from a CSV or XLSX file."""
    lower = str(path).lower()
    try:
        if lower.endswith(".xlsx") or lower.endswith(".xls"):
            df = pd.read_excel(path, engine="openpyxl")
        else:
            df = pd.read_csv(path)
    except (OSError, ValueError) as err:
        raise ConfigLookupError(f"Could not read config file {path}: {err}") from err
    return config_store_from_frame(df)
