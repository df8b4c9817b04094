#!/usr/bin/env python
"""Pay run example - library-first demonstration.

This example shows how to use the engine as a library:
1. Pick a rule table (built-in or loaded from JSON)
2. Calculate a single payslip
3. Run a batch over a staff file and read the totals

Usage:
    python main.py
    python main.py --rules ../rules/ke_2024.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path

from staff_payroll import KENYA_2024, EmployeeCompensation, PayrollEngine
from staff_payroll.rule_loader import load_employees, load_rule_table
from staff_payroll.services import PayRunService

HERE = Path(__file__).parent


def main() -> int:
    parser = argparse.ArgumentParser(description="Staff payroll example")
    parser.add_argument("--rules", type=str, help="Rule table JSON file")
    parser.add_argument("--staff", type=str, default=str(HERE / "staff.json"))
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    rules = load_rule_table(args.rules) if args.rules else KENYA_2024
    engine = PayrollEngine(rules)

    # Single payslip
    payslip = engine.calculate(
        EmployeeCompensation(
            gross_salary=Decimal("250000"),
            benefits=Decimal("15000"),
            provident_fund=Decimal("25000"),
            loan_repayment=Decimal("8000"),
            sacco_contribution=Decimal("5000"),
            other_deductions=Decimal("2000"),
        )
    )
    print(f"PAYE: {payslip.paye}  NSSF: {payslip.pension_contribution}  Net: {payslip.net_pay}")

    # Batch
    result = PayRunService(engine=engine).run(load_employees(args.staff))
    for employee_id, emp in result.results.items():
        net = emp.payslip.net_pay if emp.payslip else "-"
        print(f"{employee_id}: net={net} warnings={len(emp.warnings)} errors={emp.errors}")

    summary = result.summary
    print(f"Employees: {summary.employee_count}  Gross: {summary.total_gross_pay}  "
          f"Net: {summary.total_net_pay}  PAYE: {summary.total_paye}")
    return 1 if result.error_count else 0


if __name__ == "__main__":
    sys.exit(main())
