"""Payroll calculation engine."""

from staff_payroll.calculators.deduction_adjuster import DeductionAdjustment, NetPayFloorAdjuster
from staff_payroll.calculators.engine import PayrollEngine, calculate
from staff_payroll.calculators.line_builder import LineItemBuilder
from staff_payroll.calculators.rules import (
    KENYA_2024,
    RuleBook,
    RuleTable,
    RuleTableError,
    RuleTableNotFoundError,
    TaxBand,
    default_rule_book,
)
from staff_payroll.calculators.tax_calculator import TaxCalculator
from staff_payroll.calculators.types import (
    EmployeeCompensation,
    LineCandidate,
    LineType,
    Payslip,
    ValidationError,
    VoluntaryDeduction,
)

__all__ = [
    "DeductionAdjustment",
    "EmployeeCompensation",
    "KENYA_2024",
    "LineCandidate",
    "LineItemBuilder",
    "LineType",
    "NetPayFloorAdjuster",
    "PayrollEngine",
    "Payslip",
    "RuleBook",
    "RuleTable",
    "RuleTableError",
    "RuleTableNotFoundError",
    "TaxBand",
    "TaxCalculator",
    "ValidationError",
    "VoluntaryDeduction",
    "calculate",
    "default_rule_book",
]
