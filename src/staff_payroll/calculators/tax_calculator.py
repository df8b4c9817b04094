"""Statutory contributions and PAYE using a rule table."""

from __future__ import annotations

from decimal import Decimal

from staff_payroll.calculators.rules import RuleTable

ZERO = Decimal("0")


class TaxCalculator:
    """Calculates statutory withholdings from a RuleTable.

    Contributions are rate-based on gross taxable income:
    - pension (NSSF): rate x income, clamped to the cap
    - health (SHIF): flat rate, uncapped
    - housing levy: flat rate, uncapped

    PAYE walks the bands in order, taxing min(remaining, width) at each
    band's rate, then subtracts personal relief and floors at zero.
    No amount is rounded.
    """

    def __init__(self, rules: RuleTable):
        self.rules = rules

    def pension_contribution(self, gross: Decimal) -> Decimal:
        return min(gross * self.rules.pension_rate, self.rules.pension_cap)

    def health_contribution(self, gross: Decimal) -> Decimal:
        return gross * self.rules.health_rate

    def housing_levy(self, gross: Decimal) -> Decimal:
        return gross * self.rules.housing_rate

    def tax_deductible_provident_fund(self, provident_fund: Decimal) -> Decimal:
        return min(provident_fund, self.rules.provident_fund_relief_cap)

    def taxable_income(
        self,
        gross: Decimal,
        contributions: Decimal,
        provident_fund_relief: Decimal,
    ) -> Decimal:
        """Income subject to PAYE, floored at zero."""
        return max(ZERO, gross - contributions - provident_fund_relief)

    def band_breakdown(self, taxable_income: Decimal) -> list[Decimal]:
        """Tax charged in each band, in band order.

        Bands past the point where taxable income is used up are omitted.
        """
        amounts: list[Decimal] = []
        remaining = taxable_income

        for band in self.rules.bands:
            if remaining <= 0:
                break
            in_band = remaining if band.width is None else min(remaining, band.width)
            amounts.append(in_band * band.rate)
            remaining -= in_band

        return amounts

    def progressive_tax(self, taxable_income: Decimal) -> Decimal:
        """Tax before personal relief."""
        return sum(self.band_breakdown(taxable_income), ZERO)

    def paye(self, taxable_income: Decimal) -> Decimal:
        """Tax after personal relief, never negative."""
        return max(ZERO, self.progressive_tax(taxable_income) - self.rules.personal_relief)
