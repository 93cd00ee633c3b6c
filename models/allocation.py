from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple


@dataclass(frozen=True)
class UnitAllocation:
    unit_id: str
    previous_reading: float
    current_reading: float
    usage: float
    usage_ratio: float              # usage / building total usage
    # Pro-rated components, rounded to whole currency for display
    basic_fee: int
    power_fee: int
    climate_fee: int
    fuel_fee: int
    power_factor_fee: int
    subtotal: int                   # five primary components
    vat: int
    power_fund: int
    total_before_round: float       # unrounded sum of all seven components
    total_amount: int               # billed amount, multiple of the rounding unit
    billing_period: str = ""
    move_in_date: Optional[date] = None
    explanation_steps: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReconciliationRecord:
    unit_id: str
    adjustment_amount: int          # +/- one rounding unit
    reason: str
