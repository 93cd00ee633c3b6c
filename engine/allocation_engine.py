"""Usage-proportional allocation of the building invoice to tenant units."""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from models.invoice import InvoiceTotals, BillingPeriod
from models.usage import UnitUsage
from models.allocation import UnitAllocation
from models.options import AllocationOptions
from engine.errors import FatalInputError, ConfigLookupError
from engine.explainer import explain_unit_allocation
from config.defaults import BUILDING_TOTAL_USAGE_KEY, DEFAULT_BUILDING_TOTAL_USAGE

logger = logging.getLogger(__name__)


def round_to_unit(amount: float, unit: int) -> int:
    """Round to the nearest multiple of unit, ties away from zero."""
    steps = (Decimal(str(amount)) / Decimal(str(unit))).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return int(steps) * unit


def filter_active_units(usages: List[UnitUsage], exclude_vacant: bool) -> List[UnitUsage]:
    if exclude_vacant:
        return [u for u in usages if u.usage > 0]
    return list(usages)


def resolve_building_total_usage(
    override: Optional[float] = None,
    config_store=None,
) -> float:
    """Pick the ratio denominator: explicit override, then config store, then constant.

    The config read is best-effort; any failure is logged and the fallback
    constant is used instead.
    """
    if override is not None:
        return float(override)

    if config_store is not None:
        try:
            value = config_store.get(BUILDING_TOTAL_USAGE_KEY)
            if value is not None and value != "":
                return float(value)
        except (ConfigLookupError, TypeError, ValueError) as err:
            logger.warning(
                "Config lookup for %s failed, using default %s: %s",
                BUILDING_TOTAL_USAGE_KEY, DEFAULT_BUILDING_TOTAL_USAGE, err,
            )
        except Exception as err:
            logger.error(
                "Config store error for %s, using default %s: %s",
                BUILDING_TOTAL_USAGE_KEY, DEFAULT_BUILDING_TOTAL_USAGE, err,
            )

    return float(DEFAULT_BUILDING_TOTAL_USAGE)


def allocate_unit(
    invoice: InvoiceTotals,
    usage: UnitUsage,
    building_total_usage: float,
    rounding_unit: int,
    billing_period: str = "",
) -> UnitAllocation:
    """Pro-rate every invoice component to a single unit by its usage ratio."""
    ratio = usage.usage / building_total_usage

    # Step 1: Five primary components, kept unrounded
    basic_fee = invoice.basic_fee * ratio
    power_fee = invoice.power_fee * ratio
    climate_fee = invoice.climate_fee * ratio
    fuel_fee = invoice.fuel_fee * ratio
    power_factor_fee = invoice.power_factor_fee * ratio
    subtotal = basic_fee + power_fee + climate_fee + fuel_fee + power_factor_fee

    # Step 2: VAT and power fund by the same ratio
    vat = invoice.vat * ratio
    power_fund = invoice.power_fund * ratio

    # Step 3: Bill total from the unrounded figures
    total_before_round = subtotal + vat + power_fund
    total_amount = round_to_unit(total_before_round, rounding_unit)

    explanation = explain_unit_allocation(
        unit_id=usage.unit_id,
        usage=usage.usage,
        building_total_usage=building_total_usage,
        usage_ratio=ratio,
        invoice=invoice,
        subtotal=subtotal,
        vat=vat,
        power_fund=power_fund,
        total_before_round=total_before_round,
        total_amount=total_amount,
        rounding_unit=rounding_unit,
    )

    return UnitAllocation(
        unit_id=usage.unit_id,
        previous_reading=usage.previous_reading,
        current_reading=usage.current_reading,
        usage=usage.usage,
        usage_ratio=ratio,
        basic_fee=round_to_unit(basic_fee, 1),
        power_fee=round_to_unit(power_fee, 1),
        climate_fee=round_to_unit(climate_fee, 1),
        fuel_fee=round_to_unit(fuel_fee, 1),
        power_factor_fee=round_to_unit(power_factor_fee, 1),
        subtotal=round_to_unit(subtotal, 1),
        vat=round_to_unit(vat, 1),
        power_fund=round_to_unit(power_fund, 1),
        total_before_round=total_before_round,
        total_amount=total_amount,
        billing_period=billing_period,
        move_in_date=usage.move_in_date,
        explanation_steps=tuple(explanation),
    )


def compute_unit_allocations(
    invoice: InvoiceTotals,
    usages: List[UnitUsage],
    building_total_usage: float,
    options: Optional[AllocationOptions] = None,
    billing_period: Optional[BillingPeriod] = None,
) -> List[UnitAllocation]:
    """Allocate the invoice to every active unit, rounding each bill total.

    The ratio denominator is the building's metered total, which includes
    common-area load, so the unit bills do not add up to the invoice on their
    own when common usage exists.
    """
    opts = options or AllocationOptions()

    if not building_total_usage or building_total_usage < 0:
        raise FatalInputError(
            f"Building total usage must be positive, got {building_total_usage!r}. "
            "Cannot compute usage ratios."
        )

    negative = [u.unit_id for u in usages if u.usage < 0]
    if negative:
        raise FatalInputError(f"Negative usage for units: {', '.join(negative)}")

    active = filter_active_units(usages, opts.exclude_vacant)
    unit_usage_total = sum(u.usage for u in active)
    logger.debug(
        "Building usage %s kWh, unit usage %s kWh, common usage %s kWh, %d active units",
        building_total_usage, unit_usage_total,
        building_total_usage - unit_usage_total, len(active),
    )

    period_text = billing_period.label if billing_period else ""
    return [
        allocate_unit(invoice, u, building_total_usage, opts.rounding_unit, period_text)
        for u in active
    ]
