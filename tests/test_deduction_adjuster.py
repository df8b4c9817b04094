"""Tests for the net pay floor adjuster."""

from decimal import Decimal

from staff_payroll.calculators.deduction_adjuster import NetPayFloorAdjuster
from staff_payroll.calculators.types import VoluntaryDeduction

LOAN = VoluntaryDeduction.LOAN_REPAYMENT
SACCO = VoluntaryDeduction.SACCO_CONTRIBUTION
OTHER = VoluntaryDeduction.OTHER_DEDUCTIONS


def deductions(loan: str, sacco: str, other: str) -> dict[VoluntaryDeduction, Decimal]:
    return {LOAN: Decimal(loan), SACCO: Decimal(sacco), OTHER: Decimal(other)}


class TestNetPayFloorAdjuster:
    """Test priority-ordered reduction."""

    def test_zero_shortfall_changes_nothing(self):
        result = NetPayFloorAdjuster().apply(deductions("100", "50", "20"), Decimal("0"))

        assert result.deductions == deductions("100", "50", "20")
        assert result.absorbed == Decimal("0")
        assert result.fully_absorbed

    def test_negative_shortfall_treated_as_zero(self):
        result = NetPayFloorAdjuster().apply(deductions("100", "50", "20"), Decimal("-5"))

        assert result.deductions == deductions("100", "50", "20")
        assert result.residual == Decimal("0")

    def test_other_absorbs_first(self):
        result = NetPayFloorAdjuster().apply(deductions("100", "50", "20"), Decimal("15"))

        assert result.deductions == deductions("100", "50", "5")
        assert result.absorbed == Decimal("15")

    def test_spills_into_sacco(self):
        result = NetPayFloorAdjuster().apply(deductions("100", "50", "20"), Decimal("45"))

        assert result.deductions == deductions("100", "25", "0")

    def test_spills_into_loan(self):
        result = NetPayFloorAdjuster().apply(deductions("100", "50", "20"), Decimal("100"))

        assert result.deductions == deductions("70", "0", "0")
        assert result.fully_absorbed

    def test_exact_total_zeroes_everything(self):
        result = NetPayFloorAdjuster().apply(deductions("100", "50", "20"), Decimal("170"))

        assert result.deductions == deductions("0", "0", "0")
        assert result.residual == Decimal("0")

    def test_residual_when_deductions_exhausted(self):
        result = NetPayFloorAdjuster().apply(deductions("100", "50", "20"), Decimal("200"))

        assert result.deductions == deductions("0", "0", "0")
        assert result.absorbed == Decimal("170")
        assert result.residual == Decimal("30")
        assert not result.fully_absorbed

    def test_input_not_mutated(self):
        original = deductions("100", "50", "20")
        NetPayFloorAdjuster().apply(original, Decimal("100"))

        assert original == deductions("100", "50", "20")

    def test_custom_order(self):
        """A table may protect other deductions and cut the loan first."""
        adjuster = NetPayFloorAdjuster((LOAN, SACCO, OTHER))
        result = adjuster.apply(deductions("100", "50", "20"), Decimal("120"))

        assert result.deductions == deductions("0", "30", "20")

    def test_zero_deduction_skipped(self):
        result = NetPayFloorAdjuster().apply(deductions("100", "50", "0"), Decimal("10"))

        assert result.deductions == deductions("100", "40", "0")
