"""Versioned statutory rule tables.

A rule table carries every rate, cap, relief and tax band the engine
needs. Tax law changes periodically, so tables are immutable values
looked up by version rather than literals inside the calculator.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from staff_payroll.calculators.types import VoluntaryDeduction

# Shrink order when net pay falls below the floor: first entry is reduced first.
DEFAULT_REDUCTION_ORDER: tuple[VoluntaryDeduction, ...] = (
    VoluntaryDeduction.OTHER_DEDUCTIONS,
    VoluntaryDeduction.SACCO_CONTRIBUTION,
    VoluntaryDeduction.LOAN_REPAYMENT,
)


class RuleTableError(Exception):
    """Raised when a rule table is malformed."""


class RuleTableNotFoundError(Exception):
    """Raised when no rule table is registered for a version."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Rule table '{version}' not found")


@dataclass(frozen=True)
class TaxBand:
    """One progressive tax band.

    width is the slice of taxable income taxed at rate; None means the
    band is unbounded (only valid for the last band).
    """

    width: Decimal | None
    rate: Decimal


@dataclass(frozen=True)
class RuleTable:
    """Statutory rates, caps and PAYE bands for one tax year."""

    version: str
    personal_relief: Decimal
    pension_rate: Decimal
    pension_cap: Decimal
    health_rate: Decimal
    housing_rate: Decimal
    provident_fund_relief_cap: Decimal
    bands: tuple[TaxBand, ...]
    # Recorded for reference only; the cap is applied directly to rate x income.
    pension_upper_earnings_limit: Decimal | None = None
    net_pay_floor_divisor: Decimal = Decimal("3")
    reduction_order: tuple[VoluntaryDeduction, ...] = DEFAULT_REDUCTION_ORDER
    description: str = ""

    def __post_init__(self) -> None:
        """Validate configuration."""
        object.__setattr__(self, "bands", tuple(self.bands))
        try:
            order = tuple(VoluntaryDeduction(d) for d in self.reduction_order)
        except ValueError as e:
            raise RuleTableError(f"{self.version}: {e}") from e
        object.__setattr__(self, "reduction_order", order)

        if not self.bands:
            raise RuleTableError(f"{self.version}: at least one tax band is required")
        for i, band in enumerate(self.bands):
            last = i == len(self.bands) - 1
            if band.width is None and not last:
                raise RuleTableError(
                    f"{self.version}: only the last band may be unbounded (band {i})"
                )
            if band.width is not None and last:
                raise RuleTableError(f"{self.version}: the last band must be unbounded")
            if band.width is not None and band.width < 0:
                raise RuleTableError(f"{self.version}: band {i} has negative width")
            self._check_rate(f"band {i} rate", band.rate)

        for name in ("pension_rate", "health_rate", "housing_rate"):
            self._check_rate(name, getattr(self, name))
        for name in ("personal_relief", "pension_cap", "provident_fund_relief_cap"):
            if getattr(self, name) < 0:
                raise RuleTableError(f"{self.version}: {name} must not be negative")
        if self.net_pay_floor_divisor <= 0:
            raise RuleTableError(f"{self.version}: net_pay_floor_divisor must be positive")
        if sorted(self.reduction_order) != sorted(VoluntaryDeduction):
            raise RuleTableError(
                f"{self.version}: reduction_order must list each voluntary deduction once"
            )

    def _check_rate(self, name: str, rate: Decimal) -> None:
        if not Decimal("0") <= rate <= Decimal("1"):
            raise RuleTableError(f"{self.version}: {name} must be between 0 and 1, got {rate}")

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "version": self.version,
            "personal_relief": str(self.personal_relief),
            "pension_rate": str(self.pension_rate),
            "pension_cap": str(self.pension_cap),
            "pension_upper_earnings_limit": (
                str(self.pension_upper_earnings_limit)
                if self.pension_upper_earnings_limit is not None
                else None
            ),
            "health_rate": str(self.health_rate),
            "housing_rate": str(self.housing_rate),
            "provident_fund_relief_cap": str(self.provident_fund_relief_cap),
            "bands": [
                {"width": str(b.width) if b.width is not None else None, "rate": str(b.rate)}
                for b in self.bands
            ],
            "net_pay_floor_divisor": str(self.net_pay_floor_divisor),
            "reduction_order": [d.value for d in self.reduction_order],
        }

    def fingerprint(self) -> str:
        """Deterministic digest of the table's rules (description excluded)."""
        json_str = json.dumps(self.to_canonical_dict(), sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]


# Kenya monthly rates, Finance Act 2023/2024
KENYA_2024 = RuleTable(
    version="KE-2024",
    description="Kenya monthly PAYE, NSSF, SHIF and Housing Levy (Finance Act 2023/2024)",
    personal_relief=Decimal("2400"),
    pension_rate=Decimal("0.06"),
    pension_cap=Decimal("4320"),
    pension_upper_earnings_limit=Decimal("72000"),
    health_rate=Decimal("0.0275"),
    housing_rate=Decimal("0.015"),
    provident_fund_relief_cap=Decimal("30000"),
    bands=(
        TaxBand(width=Decimal("24000"), rate=Decimal("0.10")),
        TaxBand(width=Decimal("8333"), rate=Decimal("0.25")),
        TaxBand(width=Decimal("467667"), rate=Decimal("0.30")),
        TaxBand(width=Decimal("300000"), rate=Decimal("0.325")),
        TaxBand(width=None, rate=Decimal("0.35")),
    ),
)


class RuleBook:
    """Registry of rule tables keyed by version."""

    def __init__(self) -> None:
        self._tables: dict[str, RuleTable] = {}

    def register(self, table: RuleTable) -> None:
        self._tables[table.version] = table

    def get(self, version: str) -> RuleTable:
        try:
            return self._tables[version]
        except KeyError:
            raise RuleTableNotFoundError(version) from None

    def versions(self) -> list[str]:
        return sorted(self._tables)

    def __contains__(self, version: object) -> bool:
        return version in self._tables


def default_rule_book() -> RuleBook:
    """Rule book holding the built-in tables."""
    book = RuleBook()
    book.register(KENYA_2024)
    return book
