"""Payslip line items with deterministic hashing."""

from __future__ import annotations

import hashlib
import json
from decimal import ROUND_HALF_UP, Decimal

from staff_payroll.calculators.types import LineCandidate, LineType, Payslip


class LineItemBuilder:
    """Builds export line items from a Payslip.

    Sign conventions (non-negotiable):
    - EARNING: positive
    - STATUTORY (NSSF, SHIF, housing levy): negative
    - TAX (PAYE): negative
    - DEDUCTION (voluntary): negative

    Rounding:
    - Payslip amounts are kept unrounded
    - Lines are rounded to cents here, at the export boundary
    - Zero-amount deduction lines are omitted
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def compute_line_hash(line: LineCandidate) -> str:
        """Compute deterministic hash for a line item."""
        canonical = line.to_canonical_dict()
        json_str = json.dumps(canonical, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    @staticmethod
    def _line(line_type: LineType, code: str, amount: Decimal, explanation: str) -> LineCandidate:
        rounded = LineItemBuilder.round_to_cents(abs(amount))
        return LineCandidate(
            line_type=line_type,
            code=code,
            amount=rounded if line_type == LineType.EARNING else -rounded,
            explanation=explanation,
        )

    @staticmethod
    def build_lines(
        payslip: Payslip,
        gross_salary: Decimal,
        benefits: Decimal,
    ) -> list[LineCandidate]:
        """Build signed lines for a payslip.

        Earnings are split into basic salary and benefits, so the caller
        passes the original amounts; the payslip only keeps their sum.
        """
        build = LineItemBuilder._line
        lines = [build(LineType.EARNING, "BASIC", gross_salary, "Basic salary")]
        if benefits > 0:
            lines.append(build(LineType.EARNING, "BENEFITS", benefits, "Taxable benefits"))

        candidates = [
            (LineType.STATUTORY, "NSSF", payslip.pension_contribution, "NSSF contribution"),
            (LineType.STATUTORY, "SHIF", payslip.health_contribution, "SHIF contribution"),
            (LineType.STATUTORY, "HOUSING_LEVY", payslip.housing_levy, "Housing levy"),
            (LineType.TAX, "PAYE", payslip.paye, "PAYE"),
            (LineType.DEDUCTION, "LOAN", payslip.loan_repayment, "Loan repayment"),
            (LineType.DEDUCTION, "SACCO", payslip.sacco_contribution, "SACCO contribution"),
            (LineType.DEDUCTION, "OTHER", payslip.other_deductions, "Other deductions"),
        ]
        for line_type, code, amount, explanation in candidates:
            if amount > 0:
                lines.append(build(line_type, code, amount, explanation))

        return lines

    @staticmethod
    def calculate_net_from_lines(lines: list[LineCandidate]) -> Decimal:
        """NET = sum of all line amounts."""
        net = sum((line.amount for line in lines), Decimal("0"))
        return LineItemBuilder.round_to_cents(net)

    @staticmethod
    def calculate_gross_from_lines(lines: list[LineCandidate]) -> Decimal:
        """GROSS = sum of EARNING lines."""
        gross = sum(
            (line.amount for line in lines if line.line_type == LineType.EARNING),
            Decimal("0"),
        )
        return LineItemBuilder.round_to_cents(gross)

    @staticmethod
    def rounding_drift(lines: list[LineCandidate], payslip: Payslip) -> Decimal:
        """Difference between the payslip net (to the cent) and the line total.

        Per-line rounding can drift a cent or two from the unrounded net.
        """
        expected = LineItemBuilder.round_to_cents(payslip.net_pay)
        return expected - LineItemBuilder.calculate_net_from_lines(lines)

    @staticmethod
    def validate_line_signs(lines: list[LineCandidate]) -> list[str]:
        """Validate that all line items have correct signs.

        Returns list of error messages (empty if all valid).
        """
        errors: list[str] = []

        for i, line in enumerate(lines):
            if line.line_type == LineType.EARNING:
                if line.amount < 0:
                    errors.append(
                        f"Line {i} ({line.line_type.value}) has negative amount {line.amount}, expected positive"
                    )
            elif line.amount > 0:
                errors.append(
                    f"Line {i} ({line.line_type.value}) has positive amount {line.amount}, expected negative"
                )

        return errors
