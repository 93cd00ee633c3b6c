"""Tenant electricity billing — command-line entry point.

Usage:
    python app.py --invoice invoice.csv --usage usage.csv [--output bills.csv]
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.defaults import (
    DEFAULT_ROUNDING_UNIT, DEFAULT_TOLERANCE_AMOUNT, VALIDATION_MODES,
    DEFAULT_VALIDATION_MODE,
)
from data.config_store import load_config_store
from data.export import allocations_to_dataframe
from data.loader import load_file, parse_invoice_totals, parse_unit_usages
from data.validator import validate_invoice_frame, validate_usage_frame
from engine.calculator import BillCalculator, accept_calculation
from engine.errors import CalculationRejectedError, ConfigLookupError, FatalInputError
from models.invoice import BillingPeriod
from models.options import AllocationOptions

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Split a building electricity invoice across units")
    p.add_argument("--invoice", required=True, help="Invoice totals CSV/XLSX (Field, Amount)")
    p.add_argument("--usage", required=True, help="Per-unit meter readings CSV/XLSX")
    p.add_argument("--building-usage", type=float, default=None,
                   help="Building total usage in kWh (overrides invoice and config)")
    p.add_argument("--config", default=None, help="Config table CSV/XLSX (config_key, config_value)")
    p.add_argument("--rounding-unit", type=int, default=DEFAULT_ROUNDING_UNIT)
    p.add_argument("--tolerance", type=float, default=DEFAULT_TOLERANCE_AMOUNT)
    p.add_argument("--include-vacant", action="store_true", help="Bill zero-usage units too")
    p.add_argument("--mode", choices=VALIDATION_MODES, default=DEFAULT_VALIDATION_MODE)
    p.add_argument("--target-unit-total", type=float, default=None,
                   help="Expected unit bill sum for unit-subset validation")
    p.add_argument("--period", default="", help="Billing period label, e.g. '2025-6-10 ~ 2025-7-9'")
    p.add_argument("--output", default=None, help="Write unit bills to this CSV")
    p.add_argument("--force", action="store_true", help="Accept a result that failed validation")
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        invoice_df = load_file(args.invoice)
        usage_df = load_file(args.usage)
    except (OSError, ValueError) as err:
        logger.error("Could not load input file: %s", err)
        return 2

    checks = [validate_invoice_frame(invoice_df), validate_usage_frame(usage_df)]
    for check in checks:
        for w in check.warnings:
            logger.warning(w)
    errors = [e for check in checks for e in check.errors]
    if errors:
        for e in errors:
            logger.error(e)
        return 2

    invoice, invoice_usage = parse_invoice_totals(invoice_df)
    usages = parse_unit_usages(usage_df)

    config_store = None
    if args.config:
        try:
            config_store = load_config_store(args.config)
        except ConfigLookupError as err:
            logger.warning("Ignoring config file: %s", err)

    try:
        options = AllocationOptions(
            rounding_unit=args.rounding_unit,
            tolerance_amount=args.tolerance,
            exclude_vacant=not args.include_vacant,
            validation_mode=args.mode,
            target_unit_total=args.target_unit_total,
        )
    except ValueError as err:
        logger.error("Invalid options: %s", err)
        return 2

    building_usage = args.building_usage if args.building_usage is not None else invoice_usage
    calculator = BillCalculator(options, config_store)
    try:
        result = calculator.calculate(
            invoice, usages, building_usage,
            billing_period=BillingPeriod(display_text=args.period),
        )
    except FatalInputError as err:
        logger.error("Calculation aborted: %s", err)
        return 2

    print(calculator.format_summary(result))

    try:
        accept_calculation(result, force=args.force)
    except CalculationRejectedError as err:
        logger.error("%s (use --force to accept anyway)", err)
        return 1

    if args.output:
        allocations_to_dataframe(result).to_csv(args.output, index=False)
        logger.info("Wrote %d unit bills to %s", len(result.unit_allocations), args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
