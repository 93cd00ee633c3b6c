"""Generates human-readable explanations and summaries for unit bills."""

from typing import List

from models.invoice import InvoiceTotals
from models.result import CalculationResult


def explain_unit_allocation(
    unit_id: str,
    usage: float,
    building_total_usage: float,
    usage_ratio: float,
    invoice: InvoiceTotals,
    subtotal: float,
    vat: float,
    power_fund: float,
    total_before_round: float,
    total_amount: int,
    rounding_unit: int,
) -> List[str]:
    """Produce step-by-step explanation for a unit's share of the invoice."""
    steps = []

    steps.append(
        f"Step 1 - Usage ratio: {usage:,.0f} kWh of {building_total_usage:,.0f} kWh "
        f"building usage => ratio {usage_ratio:.4%}"
    )

    steps.append(
        f"Step 2 - Primary fees: {invoice.primary_components:,.0f} x {usage_ratio:.6f} "
        f"= subtotal {subtotal:,.2f}"
    )

    steps.append(
        f"Step 3 - VAT and power fund: {invoice.vat:,.0f} and {invoice.power_fund:,.0f} "
        f"pro-rated => {vat:,.2f} + {power_fund:,.2f}"
    )

    steps.append(
        f"Step 4 - Total: {total_before_round:,.2f} rounded to the nearest "
        f"{rounding_unit} => {total_amount:,}"
    )

    return steps


def explain_adjustment(adjustment_amount: int, total_amount: int) -> str:
    return f"Adjustment: {adjustment_amount:+,} to match target total => {total_amount:,}"


def format_summary(result: CalculationResult) -> str:
    """Render a calculation result as a plain-text summary for logs and reports."""
    validation = result.validation
    lines = [
        "=== Calculation Summary ===",
        f"Units billed: {len(result.unit_allocations)}",
        f"Unit usage: {validation.unit_usage_total:,.0f} kWh "
        f"(building {result.building_total_usage:,.0f} kWh)",
        f"Target total: {validation.target_total:,.0f}",
        f"Calculated total: {validation.calculated_total:,.0f}",
        f"Difference: {validation.difference:,.0f}",
        f"Validation ({validation.mode.value}): {'PASSED' if validation.passed else 'FAILED'}",
    ]

    if result.was_reconciled:
        lines.append(
            f"Adjustments: {len(result.reconciliation_records)} "
            f"({result.reconciliation_state.value})"
        )

    if result.warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"- {w}" for w in result.warnings)

    return "\n".join(lines)
