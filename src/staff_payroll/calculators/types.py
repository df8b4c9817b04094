"""Type definitions for the payslip calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any


class ValidationError(Exception):
    """Raised when a compensation field is negative or not a number."""

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Invalid value for '{field_name}': {value!r} (must be a non-negative amount)"
        )


class VoluntaryDeduction(str, Enum):
    """Employee-elected deductions that the net pay floor may reduce."""

    LOAN_REPAYMENT = "loan_repayment"
    SACCO_CONTRIBUTION = "sacco_contribution"
    OTHER_DEDUCTIONS = "other_deductions"


class LineType(str, Enum):
    """Payslip line item types."""

    EARNING = "EARNING"
    STATUTORY = "STATUTORY"
    TAX = "TAX"
    DEDUCTION = "DEDUCTION"


def to_amount(field_name: str, value: Any) -> Decimal:
    """Coerce a monetary value to Decimal, rejecting negatives.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its
    binary expansion.
    """
    if isinstance(value, bool):
        raise ValidationError(field_name, value)
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(field_name, value) from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError(field_name, value)
    return amount


@dataclass(frozen=True)
class EmployeeCompensation:
    """Compensation inputs for one employee in one pay period."""

    gross_salary: Decimal
    benefits: Decimal = Decimal("0")
    provident_fund: Decimal = Decimal("0")
    loan_repayment: Decimal = Decimal("0")
    sacco_contribution: Decimal = Decimal("0")
    other_deductions: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        """Validate and normalize every amount."""
        for f in fields(self):
            # frozen: bypass __setattr__ to store the coerced value
            object.__setattr__(self, f.name, to_amount(f.name, getattr(self, f.name)))

    @property
    def total_gross_taxable_income(self) -> Decimal:
        return self.gross_salary + self.benefits

    def voluntary_deductions(self) -> dict[VoluntaryDeduction, Decimal]:
        """Return the voluntary deductions keyed by kind."""
        return {kind: getattr(self, kind.value) for kind in VoluntaryDeduction}


@dataclass(frozen=True)
class Payslip:
    """Computed breakdown of earnings, deductions and net pay.

    Voluntary deduction fields hold the values after the net pay floor
    has been enforced. Amounts are never rounded here.
    """

    total_gross_taxable_income: Decimal
    pension_contribution: Decimal
    health_contribution: Decimal
    housing_levy: Decimal
    tax_deductible_provident_fund: Decimal
    taxable_income: Decimal
    paye: Decimal
    loan_repayment: Decimal
    sacco_contribution: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal

    # Net pay floor bookkeeping
    minimum_net_pay: Decimal
    net_pay_before_adjustment: Decimal
    deductions_adjusted: bool = False
    residual_shortfall: Decimal = Decimal("0")

    @property
    def statutory_contributions(self) -> Decimal:
        return self.pension_contribution + self.health_contribution + self.housing_levy

    @property
    def voluntary_deductions(self) -> Decimal:
        return self.loan_repayment + self.sacco_contribution + self.other_deductions

    @property
    def meets_net_pay_floor(self) -> bool:
        return self.residual_shortfall == 0

    def as_dict(self) -> dict[str, Any]:
        """Return a plain dict keyed by field name."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class LineCandidate:
    """A signed payslip line for export."""

    line_type: LineType
    code: str
    amount: Decimal  # Final amount (signed per conventions)
    explanation: str | None = None

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "line_type": self.line_type.value,
            "code": self.code,
            "amount": str(self.amount),
        }
