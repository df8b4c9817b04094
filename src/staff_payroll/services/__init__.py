"""Payroll services."""

from staff_payroll.services.pay_run_service import (
    EmployeePayResult,
    PayrollSummary,
    PayRunResult,
    PayRunService,
    describe_adjustment,
    describe_residual_shortfall,
    summarize,
)

__all__ = [
    "EmployeePayResult",
    "PayrollSummary",
    "PayRunResult",
    "PayRunService",
    "describe_adjustment",
    "describe_residual_shortfall",
    "summarize",
]
