"""Post-rounding reconciliation — nudge unit bills until the sum meets the target."""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Tuple

from models.allocation import UnitAllocation, ReconciliationRecord
from models.result import ReconciliationState
from engine.explainer import explain_adjustment
from config.defaults import RECONCILIATION_MAX_PASSES, ADJUSTMENT_REASON

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationOutcome:
    allocations: List[UnitAllocation]
    records: List[ReconciliationRecord] = field(default_factory=list)
    state: ReconciliationState = ReconciliationState.CONVERGED
    initial_difference: float = 0
    remaining_difference: float = 0


def is_settled(remaining: float, tolerance: float) -> bool:
    """True once the residual is strictly inside tolerance or fully closed."""
    return abs(remaining) < tolerance or remaining == 0


def max_iterations_for(unit_count: int) -> int:
    return RECONCILIATION_MAX_PASSES * unit_count


def iter_corrections(
    allocations: List[UnitAllocation],
    difference: float,
    rounding_unit: int,
    tolerance: float,
) -> Iterator[Tuple[int, int, float]]:
    """Yield (allocation index, delta, remaining difference) per correction.

    Units are visited round-robin from the highest usage down; equal usage
    keeps input order. Stops when settled or after the iteration bound.
    """
    order = sorted(range(len(allocations)), key=lambda i: allocations[i].usage, reverse=True)
    remaining = difference

    for step in range(max_iterations_for(len(order))):
        if is_settled(remaining, tolerance):
            return
        index = order[step % len(order)]
        delta = rounding_unit if remaining > 0 else -rounding_unit
        remaining -= delta
        yield index, delta, remaining


def reconcile(
    allocations: List[UnitAllocation],
    target_total: float,
    rounding_unit: int,
    tolerance: float,
) -> ReconciliationOutcome:
    """Apply rounding-unit corrections so the bill sum lands within tolerance of target.

    target_total follows the validation mode: the invoice grand total for
    whole-building runs, the supplied unit-subset total otherwise.
    """
    calculated = sum(a.total_amount for a in allocations)
    difference = target_total - calculated
    logger.debug("Target %s, calculated %s, initial difference %s", target_total, calculated, difference)

    if abs(difference) <= tolerance:
        return ReconciliationOutcome(
            allocations=list(allocations),
            initial_difference=difference,
            remaining_difference=difference,
        )

    state = ReconciliationState.ADJUSTING
    remaining = difference
    records = []
    deltas: Dict[int, List[int]] = {}

    for index, delta, remaining in iter_corrections(allocations, difference, rounding_unit, tolerance):
        deltas.setdefault(index, []).append(delta)
        records.append(ReconciliationRecord(
            unit_id=allocations[index].unit_id,
            adjustment_amount=delta,
            reason=ADJUSTMENT_REASON,
        ))

    adjusted = []
    for i, alloc in enumerate(allocations):
        if i not in deltas:
            adjusted.append(alloc)
            continue
        total = alloc.total_amount
        steps = list(alloc.explanation_steps)
        for delta in deltas[i]:
            total += delta
            steps.append(explain_adjustment(delta, total))
        adjusted.append(replace(alloc, total_amount=total, explanation_steps=tuple(steps)))

    if abs(remaining) <= tolerance:
        state = ReconciliationState.CONVERGED
    else:
        state = ReconciliationState.EXHAUSTED
        logger.warning(
            "Reconciliation stopped after %d adjustments with %s still outstanding",
            len(records), remaining,
        )

    logger.debug("Applied %d adjustments, remaining difference %s", len(records), remaining)
    return ReconciliationOutcome(
        allocations=adjusted,
        records=records,
        state=state,
        initial_difference=difference,
        remaining_difference=remaining,
    )
