"""Default configuration constants for the tenant electricity billing engine."""

# Rounding: every final unit bill is a multiple of this amount (KRW)
DEFAULT_ROUNDING_UNIT = 10

# Maximum deviation between the unit bill sum and the invoice total
DEFAULT_TOLERANCE_AMOUNT = 10

# Unit-subset validation compares against a smaller target, so rounding
# accumulates relative to it; the allowed deviation is wider and fixed.
UNIT_SUBSET_TOLERANCE = 30000

# Vacant units (zero usage) are left out of the allocation
DEFAULT_EXCLUDE_VACANT = True

# Validation modes
VALIDATION_MODE_WHOLE_BUILDING = "whole-building"
VALIDATION_MODE_UNIT_SUBSET = "unit-subset"
VALIDATION_MODES = [
    VALIDATION_MODE_WHOLE_BUILDING,
    VALIDATION_MODE_UNIT_SUBSET,
]
DEFAULT_VALIDATION_MODE = VALIDATION_MODE_WHOLE_BUILDING

# Building total usage (kWh): config store key and last-resort fallback
BUILDING_TOTAL_USAGE_KEY = "building.total_usage_default"
DEFAULT_BUILDING_TOTAL_USAGE = 25231

# Reconciliation loop bound: passes over the active unit list
RECONCILIATION_MAX_PASSES = 2
ADJUSTMENT_REASON = "Rounding adjustment to match target total"

# Outlier detection: unit rate above this multiple of the average is flagged
HIGH_RATE_MULTIPLIER = 2.0

# Billing period label used when none is supplied
DEFAULT_BILLING_PERIOD_TEXT = ""
