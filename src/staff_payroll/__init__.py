"""Staff payroll engine: statutory deductions, PAYE and the net pay floor."""

from staff_payroll.calculators import (
    KENYA_2024,
    EmployeeCompensation,
    PayrollEngine,
    Payslip,
    RuleTable,
    TaxBand,
    ValidationError,
    calculate,
)

__version__ = "1.0.0"

__all__ = [
    "KENYA_2024",
    "EmployeeCompensation",
    "PayrollEngine",
    "Payslip",
    "RuleTable",
    "TaxBand",
    "ValidationError",
    "calculate",
]
