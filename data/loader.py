"""File parsing — CSV/XLSX usage sheets and invoice totals into typed records."""

from datetime import date
from typing import Dict, List, Optional, Tuple

import pandas as pd

from models.invoice import InvoiceTotals
from models.usage import UnitUsage

# Canonical column -> accepted header spellings (case-insensitive)
USAGE_COLUMN_ALIASES = {
    "Unit": ["unit", "unit number", "unit_id", "호", "호실"],
    "Move-in Date": ["move-in date", "move_in_date", "이사일"],
    "Previous Reading": ["previous reading", "previous_reading", "전기누적값"],
    "Current Reading": ["current reading", "current_reading", "전기기준값"],
    "Usage": ["usage", "usage (kwh)", "전기사용량", "전기사용량 (kwh)"],
    "Notes": ["notes", "비고"],
}

# Invoice field -> InvoiceTotals attribute
INVOICE_FIELD_ALIASES = {
    "basic_fee": ["basic fee", "basic_fee", "기본요금", "기본료"],
    "power_fee": ["power fee", "power_fee", "전력량요금"],
    "climate_fee": ["climate fee", "climate_fee", "기후환경요금"],
    "fuel_fee": ["fuel fee", "fuel_fee", "연료비조정액", "연료비조정요금"],
    "power_factor_fee": ["power factor fee", "power_factor_fee", "역률요금"],
    "vat": ["vat", "부가가치세", "부가세"],
    "power_fund": ["power fund", "power_fund", "전력기금", "전력산업기반기금"],
    "round_down": ["round down", "round_down", "원단위절사", "원단위 절사"],
    "total_amount": ["total amount", "total_amount", "total", "청구금액", "총 청구액"],
}
TOTAL_USAGE_ALIASES = ["total usage", "total_usage", "building usage", "사용전력량", "총 사용량"]


def _normalize(name) -> str:
    return str(name).strip().lower()


def normalize_usage_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename known header spellings to canonical usage column names."""
    renames = {}
    for col in df.columns:
        for canonical, aliases in USAGE_COLUMN_ALIASES.items():
            if _normalize(col) == canonical.lower() or _normalize(col) in aliases:
                renames[col] = canonical
                break
    return df.rename(columns=renames)


def _to_float(value, default: float = 0.0) -> float:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return default
    return float(value)


def _to_date(value) -> Optional[date]:
    if value is None or (not isinstance(value, str) and pd.isna(value)) or value == "":
        return None
    return pd.to_datetime(value).date()


def parse_unit_usages(df: pd.DataFrame) -> List[UnitUsage]:
    """Convert a usage DataFrame into UnitUsage objects. Rows without a unit are dropped."""
    df = normalize_usage_columns(df)
    usages = []
    for _, row in df.iterrows():
        unit = row.get("Unit")
        if unit is None or pd.isna(unit) or str(unit).strip() == "":
            continue
        unit_id = str(unit).strip()
        if unit_id.endswith(".0"):
            unit_id = unit_id[:-2]

        previous = _to_float(row.get("Previous Reading"))
        current = _to_float(row.get("Current Reading"))
        usage = _to_float(row.get("Usage"), default=current - previous)
        notes = row.get("Notes")

        usages.append(UnitUsage(
            unit_id=unit_id,
            previous_reading=previous,
            current_reading=current,
            usage=usage,
            move_in_date=_to_date(row.get("Move-in Date")),
            notes="" if notes is None or pd.isna(notes) else str(notes).strip(),
        ))
    return usages


def invoice_fields(df: pd.DataFrame) -> Dict[str, object]:
    """Read invoice fields from either a Field/Amount sheet or a one-row wide sheet."""
    lower_cols = [_normalize(c) for c in df.columns]
    if lower_cols[:2] == ["field", "amount"]:
        return {_normalize(k): v for k, v in zip(df.iloc[:, 0], df.iloc[:, 1])}
    if df.empty:
        return {}
    first = df.iloc[0]
    return {_normalize(c): first[c] for c in df.columns}


def lookup_field(fields: Dict[str, object], aliases: List[str]):
    for alias in aliases:
        if alias.lower() in fields:
            return fields[alias.lower()]
    return None


def parse_invoice_totals(df: pd.DataFrame) -> Tuple[InvoiceTotals, Optional[float]]:
    """Convert an invoice sheet into InvoiceTotals and the optional building usage."""
    fields = invoice_fields(df)

    total = lookup_field(fields, INVOICE_FIELD_ALIASES["total_amount"])
    if total is None or (not isinstance(total, str) and pd.isna(total)):
        raise ValueError("Invoice sheet has no total amount.")

    values = {
        attr: _to_float(lookup_field(fields, aliases))
        for attr, aliases in INVOICE_FIELD_ALIASES.items()
    }
    invoice = InvoiceTotals(**values)

    usage = lookup_field(fields, TOTAL_USAGE_ALIASES)
    building_usage = None
    if usage is not None and not (not isinstance(usage, str) and pd.isna(usage)):
        building_usage = _to_float(usage)
    return invoice, building_usage


def load_file(uploaded_file) -> pd.DataFrame:
    """Load a CSV or XLSX file (path or file-like with .name) into a DataFrame."""
    name = str(getattr(uploaded_file, "name", uploaded_file)).lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")
