from dataclasses import dataclass, field
from enum import Enum
from typing import List

from models.allocation import UnitAllocation, ReconciliationRecord
from models.options import ValidationMode


class ReconciliationState(str, Enum):
    ADJUSTING = "adjusting"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"       # iteration bound hit with a residual left


@dataclass(frozen=True)
class ValidationResult:
    calculated_total: int
    target_total: float
    difference: float             # target - calculated
    passed: bool
    mode: ValidationMode = ValidationMode.WHOLE_BUILDING
    tolerance: float = 0
    unit_usage_total: float = 0   # sum of active unit usage (diagnostic)


@dataclass(frozen=True)
class CalculationResult:
    unit_allocations: List[UnitAllocation]
    validation: ValidationResult
    reconciliation_records: List[ReconciliationRecord] = field(default_factory=list)
    reconciliation_state: ReconciliationState = ReconciliationState.CONVERGED
    warnings: List[str] = field(default_factory=list)
    building_total_usage: float = 0

    @property
    def was_reconciled(self) -> bool:
        return bool(self.reconciliation_records)
