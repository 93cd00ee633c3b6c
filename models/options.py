from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config.defaults import (
    DEFAULT_ROUNDING_UNIT, DEFAULT_TOLERANCE_AMOUNT, DEFAULT_EXCLUDE_VACANT,
    DEFAULT_VALIDATION_MODE, VALIDATION_MODE_WHOLE_BUILDING,
    VALIDATION_MODE_UNIT_SUBSET,
)


class ValidationMode(str, Enum):
    WHOLE_BUILDING = VALIDATION_MODE_WHOLE_BUILDING
    UNIT_SUBSET = VALIDATION_MODE_UNIT_SUBSET


@dataclass(frozen=True)
class AllocationOptions:
    rounding_unit: int = DEFAULT_ROUNDING_UNIT
    tolerance_amount: float = DEFAULT_TOLERANCE_AMOUNT
    exclude_vacant: bool = DEFAULT_EXCLUDE_VACANT
    validation_mode: ValidationMode = ValidationMode(DEFAULT_VALIDATION_MODE)
    target_unit_total: Optional[float] = None   # required in unit-subset mode

    def __post_init__(self):
        try:
            mode = ValidationMode(self.validation_mode)
        except ValueError:
            raise ValueError(
                f"Unknown validation mode: {self.validation_mode!r}. "
                f"Use one of: {[m.value for m in ValidationMode]}"
            ) from None
        object.__setattr__(self, "validation_mode", mode)

        if self.rounding_unit <= 0:
            raise ValueError(f"rounding_unit must be positive, got {self.rounding_unit}")
        if self.tolerance_amount < 0:
            raise ValueError(f"tolerance_amount cannot be negative, got {self.tolerance_amount}")
        if mode is ValidationMode.UNIT_SUBSET and self.target_unit_total is None:
            raise ValueError("unit-subset validation requires target_unit_total.")

    @classmethod
    def from_config(cls, rule_config: Optional[dict] = None) -> "AllocationOptions":
        """Build options from a loose rule-config mapping, filling defaults."""
        cfg = rule_config or {}
        return cls(
            rounding_unit=cfg.get("rounding_unit", DEFAULT_ROUNDING_UNIT),
            tolerance_amount=cfg.get("tolerance_amount", DEFAULT_TOLERANCE_AMOUNT),
            exclude_vacant=cfg.get("exclude_vacant", DEFAULT_EXCLUDE_VACANT),
            validation_mode=cfg.get("validation_mode", DEFAULT_VALIDATION_MODE),
            target_unit_total=cfg.get("target_unit_total"),
        )

    @property
    def is_unit_subset(self) -> bool:
        return self.validation_mode is ValidationMode.UNIT_SUBSET
