"""Final check of the reconciled unit bills against the applicable target."""

from typing import List, Tuple

from models.allocation import UnitAllocation
from models.invoice import InvoiceTotals
from models.options import AllocationOptions, ValidationMode
from models.result import ValidationResult
from config.defaults import UNIT_SUBSET_TOLERANCE


def validation_target(invoice: InvoiceTotals, options: AllocationOptions) -> Tuple[float, float]:
    """Return (target total, allowed deviation) for the configured mode."""
    if options.validation_mode is ValidationMode.UNIT_SUBSET:
        return options.target_unit_total, UNIT_SUBSET_TOLERANCE
    return invoice.total_amount, options.tolerance_amount


def validate_allocations(
    allocations: List[UnitAllocation],
    invoice: InvoiceTotals,
    options: AllocationOptions,
) -> ValidationResult:
    """Compare the bill sum to the target. A failed check is reported, not raised."""
    calculated = sum(a.total_amount for a in allocations)
    target, tolerance = validation_target(invoice, options)
    difference = target - calculated

    return ValidationResult(
        calculated_total=calculated,
        target_total=target,
        difference=difference,
        passed=abs(difference) <= tolerance,
        mode=options.validation_mode,
        tolerance=tolerance,
        unit_usage_total=sum(a.usage for a in allocations),
    )
