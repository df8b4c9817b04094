"""Pydantic schemas for employee files, payslip output and rule tables."""

from collections import Counter
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from staff_payroll.calculators.rules import DEFAULT_REDUCTION_ORDER, RuleTable, TaxBand
from staff_payroll.calculators.types import EmployeeCompensation, VoluntaryDeduction


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeRecord(BaseModel):
    """One employee as read from an employee file.

    Accepts both snake_case and the camelCase keys used by the staff
    module's exports. Amounts are not range-checked here; negatives are
    rejected per employee when the compensation record is built.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    employee_id: str | None = Field(default=None, alias="employeeId")
    department: str | None = None
    position: str | None = None
    gross_salary: Decimal = Field(alias="grossSalary")
    benefits: Decimal = Decimal("0")
    provident_fund: Decimal = Field(default=Decimal("0"), alias="providentFund")
    loan_repayment: Decimal = Field(default=Decimal("0"), alias="loanRepayment")
    sacco_contribution: Decimal = Field(default=Decimal("0"), alias="saccoContribution")
    other_deductions: Decimal = Field(default=Decimal("0"), alias="otherDeductions")
    status: Literal["active", "inactive"] = "active"

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def to_compensation(self) -> EmployeeCompensation:
        """Build the engine input; raises ValidationError on negative amounts."""
        return EmployeeCompensation(
            gross_salary=self.gross_salary,
            benefits=self.benefits,
            provident_fund=self.provident_fund,
            loan_repayment=self.loan_repayment,
            sacco_contribution=self.sacco_contribution,
            other_deductions=self.other_deductions,
        )


class EmployeeFile(BaseModel):
    """Top-level employee file: {"employees": [...]}."""

    employees: list[EmployeeRecord]

    @model_validator(mode="after")
    def check_unique_ids(self) -> "EmployeeFile":
        counts = Counter(e.id for e in self.employees)
        duplicates = sorted(i for i, n in counts.items() if n > 1)
        if duplicates:
            raise ValueError(f"duplicate employee id(s): {', '.join(duplicates)}")
        return self


# ============================================================================
# Payslip schemas
# ============================================================================


class LineItemResponse(BaseModel):
    """Schema for a payslip line item."""

    model_config = ConfigDict(from_attributes=True)

    line_type: str
    code: str
    amount: Decimal
    explanation: str | None = None
    line_hash: str


class PayslipResponse(BaseModel):
    """Schema for payslip output."""

    model_config = ConfigDict(from_attributes=True)

    total_gross_taxable_income: Decimal
    pension_contribution: Decimal
    health_contribution: Decimal
    housing_levy: Decimal
    tax_deductible_provident_fund: Decimal
    taxable_income: Decimal
    paye: Decimal
    loan_repayment: Decimal
    sacco_contribution: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    minimum_net_pay: Decimal
    net_pay_before_adjustment: Decimal
    deductions_adjusted: bool
    residual_shortfall: Decimal


class EmployeePayResponse(BaseModel):
    """Schema for one employee's result within a pay run."""

    employee_id: str
    calculation_id: str
    success: bool
    payslip: PayslipResponse | None = None
    lines: list[LineItemResponse] | None = None
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class PayrollSummaryResponse(BaseModel):
    """Schema for pay run totals."""

    model_config = ConfigDict(from_attributes=True)

    employee_count: int
    total_gross_pay: Decimal
    total_net_pay: Decimal
    total_paye: Decimal
    total_statutory_contributions: Decimal
    adjusted_count: int


class PayRunResponse(BaseModel):
    """Schema for a full pay run."""

    pay_run_id: str
    rules_version: str
    rules_fingerprint: str
    results: list[EmployeePayResponse]
    summary: PayrollSummaryResponse
    error_count: int
    skipped: list[str]


# ============================================================================
# Rule table schemas
# ============================================================================


class PensionSchema(BaseModel):
    """Pension (NSSF) contribution parameters."""

    rate: Decimal
    cap: Decimal
    upper_earnings_limit: Decimal | None = None


class TaxBandSchema(BaseModel):
    """One progressive band; width null means unbounded."""

    width: Decimal | None
    rate: Decimal


class RuleTableDocument(BaseModel):
    """JSON document describing a versioned rule table."""

    version: str
    description: str = ""
    personal_relief: Decimal
    pension: PensionSchema
    health_rate: Decimal
    housing_rate: Decimal
    provident_fund_relief_cap: Decimal
    bands: list[TaxBandSchema]
    net_pay_floor_divisor: Decimal = Decimal("3")
    reduction_order: list[VoluntaryDeduction] = Field(
        default_factory=lambda: list(DEFAULT_REDUCTION_ORDER)
    )

    def to_rule_table(self) -> RuleTable:
        """Build the immutable rule table; raises RuleTableError if malformed."""
        return RuleTable(
            version=self.version,
            description=self.description,
            personal_relief=self.personal_relief,
            pension_rate=self.pension.rate,
            pension_cap=self.pension.cap,
            pension_upper_earnings_limit=self.pension.upper_earnings_limit,
            health_rate=self.health_rate,
            housing_rate=self.housing_rate,
            provident_fund_relief_cap=self.provident_fund_relief_cap,
            bands=tuple(TaxBand(width=b.width, rate=b.rate) for b in self.bands),
            net_pay_floor_divisor=self.net_pay_floor_divisor,
            reduction_order=tuple(self.reduction_order),
        )

    @classmethod
    def from_rule_table(cls, table: RuleTable) -> "RuleTableDocument":
        return cls(
            version=table.version,
            description=table.description,
            personal_relief=table.personal_relief,
            pension=PensionSchema(
                rate=table.pension_rate,
                cap=table.pension_cap,
                upper_earnings_limit=table.pension_upper_earnings_limit,
            ),
            health_rate=table.health_rate,
            housing_rate=table.housing_rate,
            provident_fund_relief_cap=table.provident_fund_relief_cap,
            bands=[TaxBandSchema(width=b.width, rate=b.rate) for b in table.bands],
            net_pay_floor_divisor=table.net_pay_floor_divisor,
            reduction_order=list(table.reduction_order),
        )
