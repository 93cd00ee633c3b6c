from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class UnitUsage:
    unit_id: str                  # e.g. "201"
    previous_reading: float
    current_reading: float
    usage: float                  # kWh for the period, >= 0
    move_in_date: Optional[date] = None
    notes: str = ""

    @property
    def reading_delta(self) -> float:
        return self.current_reading - self.previous_reading

    @property
    def is_vacant(self) -> bool:
        return self.usage == 0
