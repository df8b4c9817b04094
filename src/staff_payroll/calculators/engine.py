"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

from decimal import Decimal

from staff_payroll.calculators.deduction_adjuster import NetPayFloorAdjuster
from staff_payroll.calculators.rules import KENYA_2024, RuleTable
from staff_payroll.calculators.tax_calculator import TaxCalculator
from staff_payroll.calculators.types import (
    EmployeeCompensation,
    Payslip,
    VoluntaryDeduction,
)


class PayrollEngine:
    """Turns one employee's compensation into a Payslip.

    Calculation pipeline (stable order):
    1) Gross taxable income = gross salary + benefits
    2) Statutory contributions (pension capped, health, housing levy)
    3) Provident fund relief, capped
    4) Taxable income, floored at zero
    5) PAYE over progressive bands, less personal relief, floored at zero
    6) Net pay before adjustment
    7) Net pay floor (gross / divisor): shrink voluntary deductions in
       the table's reduction order; contributions and PAYE stay fixed

    The engine is pure: no I/O, no logging, no shared mutable state.
    """

    def __init__(self, rules: RuleTable = KENYA_2024):
        self.rules = rules
        self.tax_calculator = TaxCalculator(rules)
        self.adjuster = NetPayFloorAdjuster(rules.reduction_order)

    def calculate(self, employee: EmployeeCompensation) -> Payslip:
        """Calculate the payslip for one employee."""
        tax = self.tax_calculator

        # 1) Gross
        gross = employee.total_gross_taxable_income

        # 2) Statutory contributions
        pension = tax.pension_contribution(gross)
        health = tax.health_contribution(gross)
        housing = tax.housing_levy(gross)
        contributions = pension + health + housing

        # 3-5) Taxable income and PAYE
        pf_relief = tax.tax_deductible_provident_fund(employee.provident_fund)
        taxable_income = tax.taxable_income(gross, contributions, pf_relief)
        paye = tax.paye(taxable_income)

        # 6) Net before adjustment
        voluntary = employee.voluntary_deductions()
        fixed_deductions = contributions + paye
        total_deductions = fixed_deductions + sum(voluntary.values(), Decimal("0"))
        net_before = gross - total_deductions

        # 7) Net pay floor
        minimum_net_pay = gross / self.rules.net_pay_floor_divisor
        adjusted = False
        residual = Decimal("0")

        if net_before < minimum_net_pay:
            adjustment = self.adjuster.apply(voluntary, minimum_net_pay - net_before)
            voluntary = adjustment.deductions
            adjusted = adjustment.absorbed > 0
            residual = adjustment.residual
            total_deductions = fixed_deductions + sum(voluntary.values(), Decimal("0"))

        return Payslip(
            total_gross_taxable_income=gross,
            pension_contribution=pension,
            health_contribution=health,
            housing_levy=housing,
            tax_deductible_provident_fund=pf_relief,
            taxable_income=taxable_income,
            paye=paye,
            loan_repayment=voluntary[VoluntaryDeduction.LOAN_REPAYMENT],
            sacco_contribution=voluntary[VoluntaryDeduction.SACCO_CONTRIBUTION],
            other_deductions=voluntary[VoluntaryDeduction.OTHER_DEDUCTIONS],
            total_deductions=total_deductions,
            net_pay=gross - total_deductions,
            minimum_net_pay=minimum_net_pay,
            net_pay_before_adjustment=net_before,
            deductions_adjusted=adjusted,
            residual_shortfall=residual,
        )


def calculate(employee: EmployeeCompensation, rules: RuleTable | None = None) -> Payslip:
    """Calculate a payslip with the given rule table (default KE-2024)."""
    return PayrollEngine(rules or KENYA_2024).calculate(employee)
