from dataclasses import dataclass
from datetime import date
from typing import Optional

from config.defaults import DEFAULT_BILLING_PERIOD_TEXT


@dataclass(frozen=True)
class InvoiceTotals:
    """Building-wide electricity invoice for one billing period."""
    basic_fee: float
    power_fee: float
    climate_fee: float
    fuel_fee: float
    power_factor_fee: float       # usually negative (power-factor discount)
    vat: float
    power_fund: float
    round_down: float             # sub-10 truncation printed on the invoice
    total_amount: float           # grand total, the authoritative figure

    @property
    def primary_components(self) -> float:
        return (
            self.basic_fee + self.power_fee + self.climate_fee
            + self.fuel_fee + self.power_factor_fee
        )

    @property
    def component_total(self) -> float:
        """Sum of every itemised line, which should equal total_amount."""
        return self.primary_components + self.vat + self.power_fund + self.round_down


@dataclass(frozen=True)
class BillingPeriod:
    start: Optional[date] = None
    end: Optional[date] = None
    display_text: str = DEFAULT_BILLING_PERIOD_TEXT

    @property
    def label(self) -> str:
        if self.display_text:
            return self.display_text
        if self.start and self.end:
            return (
                f"{self.start.year}-{self.start.month}-{self.start.day} ~ "
                f"{self.end.year}-{self.end.month}-{self.end.day}"
            )
        return ""
