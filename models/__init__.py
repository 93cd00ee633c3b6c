from models.invoice import InvoiceTotals, BillingPeriod
from models.usage import UnitUsage
from models.allocation import UnitAllocation, ReconciliationRecord
from models.options import AllocationOptions, ValidationMode
from models.result import CalculationResult, ReconciliationState, ValidationResult
