"""Pytest fixtures for staff payroll tests."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from staff_payroll.calculators.engine import PayrollEngine
from staff_payroll.calculators.rules import KENYA_2024, RuleTable, TaxBand
from staff_payroll.calculators.tax_calculator import TaxCalculator
from staff_payroll.calculators.types import EmployeeCompensation
from staff_payroll.config import Settings
from staff_payroll.schemas import EmployeeRecord

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


def make_employee(
    gross_salary: str | int = "0",
    benefits: str | int = "0",
    provident_fund: str | int = "0",
    loan_repayment: str | int = "0",
    sacco_contribution: str | int = "0",
    other_deductions: str | int = "0",
) -> EmployeeCompensation:
    """Build a compensation record from plain numbers."""
    return EmployeeCompensation(
        gross_salary=Decimal(str(gross_salary)),
        benefits=Decimal(str(benefits)),
        provident_fund=Decimal(str(provident_fund)),
        loan_repayment=Decimal(str(loan_repayment)),
        sacco_contribution=Decimal(str(sacco_contribution)),
        other_deductions=Decimal(str(other_deductions)),
    )


def make_record(record_id: str, **kwargs) -> EmployeeRecord:
    """Build an employee record with a name derived from its id."""
    kwargs.setdefault("name", f"Employee {record_id}")
    return EmployeeRecord(id=record_id, **kwargs)


@pytest.fixture
def rules() -> RuleTable:
    return KENYA_2024


@pytest.fixture
def engine(rules) -> PayrollEngine:
    return PayrollEngine(rules)


@pytest.fixture
def calculator(rules) -> TaxCalculator:
    return TaxCalculator(rules)


@pytest.fixture
def flat_80_rules() -> RuleTable:
    """A punitive table where statutory tax alone breaks the net pay floor."""
    return RuleTable(
        version="TEST-FLAT-80",
        personal_relief=Decimal("0"),
        pension_rate=Decimal("0"),
        pension_cap=Decimal("0"),
        health_rate=Decimal("0"),
        housing_rate=Decimal("0"),
        provident_fund_relief_cap=Decimal("0"),
        bands=(TaxBand(width=None, rate=Decimal("0.80")),),
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        rules_version="KE-2024",
        rules_path=None,
        engine_version="1.0.0",
        log_level="INFO",
    )


@pytest.fixture
def senior_doctor() -> EmployeeCompensation:
    """High earner; pension cap applies, no adjustment."""
    return make_employee(
        gross_salary=250000,
        benefits=15000,
        provident_fund=25000,
        loan_repayment=8000,
        sacco_contribution=5000,
        other_deductions=2000,
    )


@pytest.fixture
def staff_records() -> list[EmployeeRecord]:
    """A small staff list: three active, one adjusted, one inactive."""
    return [
        make_record(
            "EMP001",
            gross_salary=Decimal("250000"),
            benefits=Decimal("15000"),
            provident_fund=Decimal("25000"),
            loan_repayment=Decimal("8000"),
            sacco_contribution=Decimal("5000"),
            other_deductions=Decimal("2000"),
        ),
        make_record(
            "EMP002",
            gross_salary=Decimal("85000"),
            benefits=Decimal("5000"),
            provident_fund=Decimal("8000"),
            loan_repayment=Decimal("5000"),
            sacco_contribution=Decimal("3000"),
            other_deductions=Decimal("1000"),
        ),
        make_record(
            "EMP005",
            gross_salary=Decimal("30000"),
            loan_repayment=Decimal("12000"),
            sacco_contribution=Decimal("5000"),
            other_deductions=Decimal("1000"),
        ),
        make_record(
            "EMP006",
            gross_salary=Decimal("95000"),
            status="inactive",
        ),
    ]
