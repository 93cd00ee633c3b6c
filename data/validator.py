"""Schema validation for uploaded usage and invoice files."""

from dataclasses import dataclass, field
from typing import List
import pandas as pd

from data.loader import (
    normalize_usage_columns, parse_unit_usages, invoice_fields, lookup_field, INVOICE_FIELD_ALIASES,
)


@dataclass
class SchemaCheck:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


USAGE_REQUIRED_COLUMNS = [
    "Unit",
    "Previous Reading",
    "Current Reading",
    "Usage",
]

# Allowed gap between Usage and (current - previous) before warning, kWh
READING_DELTA_TOLERANCE = 1.0


def _check_required_columns(df: pd.DataFrame, required: List[str], file_label: str) -> SchemaCheck:
    result = SchemaCheck()
    missing = [col for col in required if col not in df.columns]
    if missing:
        result.is_valid = False
        result.errors.append(f"{file_label}: Missing required columns: {', '.join(missing)}")
    if df.empty:
        result.is_valid = False
        result.errors.append(f"{file_label}: File contains no data rows.")
    return result


def validate_usage_frame(df: pd.DataFrame) -> SchemaCheck:
    df = normalize_usage_columns(df)
    result = _check_required_columns(df, USAGE_REQUIRED_COLUMNS, "Unit Usage")
    if not result.is_valid:
        return result

    usage = pd.to_numeric(df["Usage"], errors="coerce")
    if usage.isna().any():
        result.is_valid = False
        result.errors.append("Unit Usage: Usage must be numeric for every unit.")
        return result

    if (usage < 0).any():
        result.is_valid = False
        bad = df[usage < 0]["Unit"].astype(str).tolist()
        result.errors.append(f"Unit Usage: Usage cannot be negative: {', '.join(bad)}")

    units = df["Unit"].astype(str).str.strip()
    dupes = units.duplicated(keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(f"Unit Usage: Duplicate units: {units[dupes].unique().tolist()}")

    try:
        parsed = parse_unit_usages(df)
    except ValueError:
        result.warnings.append("Unit Usage: Meter readings are not numeric; reading check skipped.")
        parsed = []
    mismatched = [u.unit_id for u in parsed if abs(u.reading_delta - u.usage) > READING_DELTA_TOLERANCE]
    if mismatched:
        result.warnings.append(
            "Unit Usage: Usage does not match meter readings for units: "
            f"{', '.join(mismatched)}"
        )

    vacant = units[usage == 0]
    if not vacant.empty:
        result.warnings.append(f"Unit Usage: Zero usage (vacant) units: {', '.join(vacant.tolist())}")

    return result


def validate_invoice_frame(df: pd.DataFrame) -> SchemaCheck:
    result = SchemaCheck()
    if df.empty:
        result.is_valid = False
        result.errors.append("Invoice: File contains no data rows.")
        return result

    fields = invoice_fields(df)
    missing = [
        attr for attr, aliases in INVOICE_FIELD_ALIASES.items()
        if lookup_field(fields, aliases) is None
    ]
    if "total_amount" in missing:
        result.is_valid = False
        result.errors.append("Invoice: Missing total amount.")
        missing.remove("total_amount")
    if missing:
        result.warnings.append(
            f"Invoice: Missing components treated as 0: {', '.join(missing)}"
        )
    return result
