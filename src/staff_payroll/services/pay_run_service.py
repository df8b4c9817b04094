"""Pay run service - batch payslip calculation for a staff list."""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID, uuid4

from staff_payroll.calculators.engine import PayrollEngine
from staff_payroll.calculators.line_builder import LineItemBuilder
from staff_payroll.calculators.types import LineCandidate, Payslip, ValidationError
from staff_payroll.config import Settings, get_settings
from staff_payroll.schemas import EmployeeRecord

logger = logging.getLogger(__name__)


@dataclass
class EmployeePayResult:
    """Result of calculating pay for one employee."""

    employee_id: str
    calculation_id: UUID
    payslip: Payslip | None
    lines: list[LineCandidate] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


@dataclass(frozen=True)
class PayrollSummary:
    """Totals across the successful payslips of a pay run."""

    employee_count: int = 0
    total_gross_pay: Decimal = Decimal("0")
    total_net_pay: Decimal = Decimal("0")
    total_paye: Decimal = Decimal("0")
    total_statutory_contributions: Decimal = Decimal("0")
    adjusted_count: int = 0


@dataclass
class PayRunResult:
    """Result of calculating an entire pay run."""

    pay_run_id: UUID
    rules_version: str
    rules_fingerprint: str
    results: dict[str, EmployeePayResult]  # employee id -> result
    summary: PayrollSummary = field(default_factory=PayrollSummary)
    error_count: int = 0
    skipped: list[str] = field(default_factory=list)


def summarize(payslips: Iterable[Payslip]) -> PayrollSummary:
    """Aggregate payslips into run totals."""
    count = 0
    adjusted = 0
    gross = net = paye = statutory = Decimal("0")

    for payslip in payslips:
        count += 1
        gross += payslip.total_gross_taxable_income
        net += payslip.net_pay
        paye += payslip.paye
        statutory += payslip.statutory_contributions
        if payslip.deductions_adjusted:
            adjusted += 1

    return PayrollSummary(
        employee_count=count,
        total_gross_pay=gross,
        total_net_pay=net,
        total_paye=paye,
        total_statutory_contributions=statutory,
        adjusted_count=adjusted,
    )


def _money(amount: Decimal) -> str:
    return f"{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,}"


def describe_adjustment(payslip: Payslip) -> str | None:
    """Warning text for a payslip whose voluntary deductions were reduced."""
    if not payslip.deductions_adjusted:
        return None
    return (
        f"Net pay (KES {_money(payslip.net_pay_before_adjustment)}) is less than 1/3 of "
        f"gross salary (KES {_money(payslip.minimum_net_pay)}). "
        "Voluntary deductions were adjusted."
    )


def describe_residual_shortfall(payslip: Payslip) -> str | None:
    """Warning text when the floor could not be met even with no voluntary deductions."""
    if payslip.meets_net_pay_floor:
        return None
    return (
        f"Net pay (KES {_money(payslip.net_pay)}) remains KES "
        f"{_money(payslip.residual_shortfall)} below the minimum after removing "
        "all voluntary deductions."
    )


class PayRunService:
    """Calculates payslips for a list of employee records.

    - Inactive employees are skipped
    - One employee's failure never aborts the run; it becomes an error result
    - Adjusted deductions and unmet net pay floors become warnings
    """

    def __init__(
        self,
        engine: PayrollEngine | None = None,
        settings: Settings | None = None,
        include_lines: bool = False,
    ):
        self.engine = engine or PayrollEngine()
        self.settings = settings or get_settings()
        self.include_lines = include_lines

    def run(
        self,
        records: Iterable[EmployeeRecord],
        pay_run_id: UUID | None = None,
    ) -> PayRunResult:
        """Calculate pay for every active employee.

        Raises ValueError if two records share an employee id.
        """
        pay_run_id = pay_run_id or uuid4()
        rules = self.engine.rules
        rules_fingerprint = rules.fingerprint()

        result = PayRunResult(
            pay_run_id=pay_run_id,
            rules_version=rules.version,
            rules_fingerprint=rules_fingerprint,
            results={},
        )
        logger.info("Starting pay run %s with rules %s", pay_run_id, rules.version)

        seen: set[str] = set()
        for record in records:
            if record.id in seen:
                raise ValueError(f"Duplicate employee id {record.id!r} in pay run {pay_run_id}")
            seen.add(record.id)

            if not record.is_active:
                logger.debug("Skipping inactive employee %s", record.id)
                result.skipped.append(record.id)
                continue

            emp_result = self.calculate_employee(record, pay_run_id, rules_fingerprint)
            result.results[record.id] = emp_result
            if not emp_result.success:
                result.error_count += 1

        result.summary = summarize(
            r.payslip for r in result.results.values() if r.payslip is not None
        )
        logger.info(
            "Finished pay run %s: %d calculated, %d errors, %d skipped",
            pay_run_id,
            result.summary.employee_count,
            result.error_count,
            len(result.skipped),
        )
        return result

    def calculate_employee(
        self,
        record: EmployeeRecord,
        pay_run_id: UUID,
        rules_fingerprint: str,
    ) -> EmployeePayResult:
        """Calculate one employee, capturing failures as errors."""
        calculation_id = self._generate_calculation_id(
            pay_run_id,
            record.id,
            self._compute_inputs_fingerprint(record),
            rules_fingerprint,
        )

        try:
            payslip = self.engine.calculate(record.to_compensation())
        except ValidationError as e:
            logger.warning("Employee %s rejected: %s", record.id, e)
            return EmployeePayResult(
                employee_id=record.id,
                calculation_id=calculation_id,
                payslip=None,
                errors=[str(e)],
            )
        except Exception as e:
            # Catch unexpected errors
            logger.exception("Unexpected error calculating employee %s", record.id)
            return EmployeePayResult(
                employee_id=record.id,
                calculation_id=calculation_id,
                payslip=None,
                errors=[f"Unexpected error: {str(e)}"],
            )

        emp_result = EmployeePayResult(
            employee_id=record.id,
            calculation_id=calculation_id,
            payslip=payslip,
        )
        for warning in (describe_adjustment(payslip), describe_residual_shortfall(payslip)):
            if warning:
                logger.warning("Employee %s: %s", record.id, warning)
                emp_result.warnings.append(warning)

        if self.include_lines:
            emp_result.lines = LineItemBuilder.build_lines(
                payslip, record.gross_salary, record.benefits
            )

        return emp_result

    def _compute_inputs_fingerprint(self, record: EmployeeRecord) -> str:
        """Compute fingerprint of the compensation inputs."""
        data = {
            "gross_salary": str(record.gross_salary),
            "benefits": str(record.benefits),
            "provident_fund": str(record.provident_fund),
            "loan_repayment": str(record.loan_repayment),
            "sacco_contribution": str(record.sacco_contribution),
            "other_deductions": str(record.other_deductions),
        }
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    def _generate_calculation_id(
        self,
        pay_run_id: UUID,
        employee_id: str,
        inputs_fingerprint: str,
        rules_fingerprint: str,
    ) -> UUID:
        """Generate deterministic calculation ID."""
        data = {
            "pay_run_id": str(pay_run_id),
            "employee_id": employee_id,
            "engine_version": self.settings.engine_version,
            "inputs_fingerprint": inputs_fingerprint,
            "rules_fingerprint": rules_fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])
