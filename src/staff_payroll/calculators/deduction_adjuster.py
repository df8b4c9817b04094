"""Net pay floor enforcement by shrinking voluntary deductions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from staff_payroll.calculators.rules import DEFAULT_REDUCTION_ORDER
from staff_payroll.calculators.types import VoluntaryDeduction

ZERO = Decimal("0")


@dataclass(frozen=True)
class DeductionAdjustment:
    """Outcome of absorbing a shortfall into voluntary deductions."""

    deductions: dict[VoluntaryDeduction, Decimal]
    absorbed: Decimal
    residual: Decimal

    @property
    def fully_absorbed(self) -> bool:
        return self.residual == 0


class NetPayFloorAdjuster:
    """Reduces voluntary deductions in priority order to cover a shortfall.

    Each deduction in reduction_order absorbs as much of the remaining
    shortfall as it can, down to zero, and passes the rest on. Whatever
    the deductions cannot absorb is returned as the residual; statutory
    amounts are never touched.
    """

    def __init__(self, reduction_order: Sequence[VoluntaryDeduction] = DEFAULT_REDUCTION_ORDER):
        self.reduction_order = tuple(reduction_order)

    def apply(
        self,
        deductions: Mapping[VoluntaryDeduction, Decimal],
        shortfall: Decimal,
    ) -> DeductionAdjustment:
        """Absorb shortfall into a copy of deductions."""
        adjusted = dict(deductions)
        remaining = max(ZERO, shortfall)

        for kind in self.reduction_order:
            if remaining <= 0:
                break
            current = adjusted.get(kind, ZERO)
            reduction = min(current, remaining)
            adjusted[kind] = current - reduction
            remaining -= reduction

        return DeductionAdjustment(
            deductions=adjusted,
            absorbed=max(ZERO, shortfall) - remaining,
            residual=remaining,
        )
