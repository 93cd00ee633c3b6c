"""Full billing pipeline: allocate, round, reconcile, validate, warn."""

import logging
from typing import List, Optional

from models.invoice import InvoiceTotals, BillingPeriod
from models.usage import UnitUsage
from models.options import AllocationOptions
from models.result import CalculationResult
from engine.allocation_engine import compute_unit_allocations, resolve_building_total_usage
from engine.reconciliation import reconcile
from engine.validator import validate_allocations, validation_target
from engine.warning_generator import generate_warnings
from engine.explainer import format_summary
from engine.errors import CalculationRejectedError

logger = logging.getLogger(__name__)


def calculate(
    invoice: InvoiceTotals,
    usages: List[UnitUsage],
    building_total_usage: Optional[float] = None,
    options: Optional[AllocationOptions] = None,
    config_store=None,
    billing_period: Optional[BillingPeriod] = None,
) -> CalculationResult:
    """Run one billing calculation.

    building_total_usage falls back to the config store and then to a fixed
    default. Raises FatalInputError when the resolved usage is zero; every
    other problem is reported on the result.
    """
    opts = options or AllocationOptions()
    total_usage = resolve_building_total_usage(building_total_usage, config_store)

    allocations = compute_unit_allocations(invoice, usages, total_usage, opts, billing_period)

    target, _ = validation_target(invoice, opts)
    outcome = reconcile(allocations, target, opts.rounding_unit, opts.tolerance_amount)

    validation = validate_allocations(outcome.allocations, invoice, opts)
    warnings = generate_warnings(outcome.allocations, invoice, validation.difference)

    logger.info(
        "Allocated %s across %d units: calculated %s, difference %s, %s",
        target, len(outcome.allocations), validation.calculated_total,
        validation.difference, "passed" if validation.passed else "failed",
    )

    return CalculationResult(
        unit_allocations=outcome.allocations,
        validation=validation,
        reconciliation_records=outcome.records,
        reconciliation_state=outcome.state,
        warnings=warnings,
        building_total_usage=total_usage,
    )


def accept_calculation(result: CalculationResult, force: bool = False) -> CalculationResult:
    """Gate a result for saving: failed validation needs an explicit force."""
    if result.validation.passed:
        return result
    if force:
        logger.warning(
            "Accepting calculation with failed validation (difference %s) by force",
            result.validation.difference,
        )
        return result
    raise CalculationRejectedError(
        f"Validation failed: calculated {result.validation.calculated_total:,} vs "
        f"target {result.validation.target_total:,.0f}",
        result=result,
    )


class BillCalculator:
    """Options and config store bound once, reused across calculations."""

    def __init__(self, options: Optional[AllocationOptions] = None, config_store=None):
        self.options = options or AllocationOptions()
        self.config_store = config_store

    def calculate(
        self,
        invoice: InvoiceTotals,
        usages: List[UnitUsage],
        building_total_usage: Optional[float] = None,
        billing_period: Optional[BillingPeriod] = None,
    ) -> CalculationResult:
        return calculate(
            invoice, usages, building_total_usage,
            options=self.options,
            config_store=self.config_store,
            billing_period=billing_period,
        )

    def format_summary(self, result: CalculationResult) -> str:
        return format_summary(result)
