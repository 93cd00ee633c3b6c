"""Flatten calculation results into DataFrames for reporting and CSV output."""

import pandas as pd

from models.result import CalculationResult

ALLOCATION_COLUMNS = [
    ("Unit", "unit_id"),
    ("Move-in Date", "move_in_date"),
    ("Billing Period", "billing_period"),
    ("Previous Reading", "previous_reading"),
    ("Current Reading", "current_reading"),
    ("Usage", "usage"),
    ("Usage Ratio", "usage_ratio"),
    ("Basic Fee", "basic_fee"),
    ("Power Fee", "power_fee"),
    ("Climate Fee", "climate_fee"),
    ("Fuel Fee", "fuel_fee"),
    ("Power Factor Fee", "power_factor_fee"),
    ("Subtotal", "subtotal"),
    ("VAT", "vat"),
    ("Power Fund", "power_fund"),
    ("Total Before Round", "total_before_round"),
    ("Total Amount", "total_amount"),
]


def allocations_to_dataframe(result: CalculationResult) -> pd.DataFrame:
    """One row per billed unit, with the reconciliation adjustment per unit."""
    adjustments = {}
    for record in result.reconciliation_records:
        adjustments[record.unit_id] = adjustments.get(record.unit_id, 0) + record.adjustment_amount

    rows = []
    for alloc in result.unit_allocations:
        row = {label: getattr(alloc, attr) for label, attr in ALLOCATION_COLUMNS}
        row["Adjustment"] = adjustments.get(alloc.unit_id, 0)
        rows.append(row)

    columns = [label for label, _ in ALLOCATION_COLUMNS] + ["Adjustment"]
    return pd.DataFrame(rows, columns=columns)


def reconciliation_to_dataframe(result: CalculationResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"Unit": r.unit_id, "Adjustment": r.adjustment_amount, "Reason": r.reason}
            for r in result.reconciliation_records
        ],
        columns=["Unit", "Adjustment", "Reason"],
    )
