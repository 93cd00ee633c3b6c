"""Anomaly warnings for a finished allocation."""

from typing import List

from models.allocation import UnitAllocation
from models.invoice import InvoiceTotals
from config.defaults import HIGH_RATE_MULTIPLIER


def generate_warnings(
    allocations: List[UnitAllocation],
    invoice: InvoiceTotals,
    difference: float,
    rate_multiplier: float = HIGH_RATE_MULTIPLIER,
) -> List[str]:
    warnings = []

    # Any residual is surfaced, even inside tolerance
    if difference != 0:
        warnings.append(f"Calculated total differs from target by {difference:,.0f}")

    negative = [a.unit_id for a in allocations if a.total_amount < 0]
    if negative:
        warnings.append(f"Negative bill amounts: {', '.join(negative)}")

    usage_total = sum(a.usage for a in allocations)
    if usage_total > 0:
        average_rate = invoice.total_amount / usage_total
        for a in allocations:
            if a.usage <= 0:
                continue
            rate = a.total_amount / a.usage
            if rate > average_rate * rate_multiplier:
                warnings.append(
                    f"Unit {a.unit_id}: rate {rate:,.0f}/kWh is more than "
                    f"{rate_multiplier:g}x the average ({average_rate:,.0f}/kWh)"
                )

    return warnings
