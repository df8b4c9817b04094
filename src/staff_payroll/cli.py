"""Staff payroll command line interface.

Provides tools for:
- Calculating payslips from an employee file
- Running a full pay run with totals and warnings
- Showing a rule table

Usage:
    python -m staff_payroll calculate --employees staff.json [--lines]
    python -m staff_payroll run --employees staff.json --rules rules.json
    python -m staff_payroll rules --version KE-2024
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable
from uuid import UUID

from staff_payroll.calculators.engine import PayrollEngine
from staff_payroll.calculators.line_builder import LineItemBuilder
from staff_payroll.calculators.rules import RuleTable, RuleTableNotFoundError
from staff_payroll.config import Settings, get_settings
from staff_payroll.rule_loader import (
    EmployeeFileError,
    RuleTableLoadError,
    dump_rule_table,
    load_employees,
    load_rule_table,
    resolve_rule_table,
)
from staff_payroll.schemas import (
    EmployeePayResponse,
    LineItemResponse,
    PayrollSummaryResponse,
    PayRunResponse,
    PayslipResponse,
)
from staff_payroll.services.pay_run_service import (
    EmployeePayResult,
    PayRunResult,
    PayRunService,
)


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


def employee_response(result: EmployeePayResult, include_lines: bool = False) -> EmployeePayResponse:
    """Convert an employee result to its output schema."""
    return EmployeePayResponse(
        employee_id=result.employee_id,
        calculation_id=str(result.calculation_id),
        success=result.success,
        payslip=(
            PayslipResponse.model_validate(result.payslip) if result.payslip is not None else None
        ),
        lines=(
            [
                LineItemResponse(
                    line_type=line.line_type.value,
                    code=line.code,
                    amount=line.amount,
                    explanation=line.explanation,
                    line_hash=LineItemBuilder.compute_line_hash(line),
                )
                for line in result.lines
            ]
            if include_lines
            else None
        ),
        warnings=result.warnings,
        errors=result.errors,
    )


def pay_run_response(result: PayRunResult, include_lines: bool = False) -> PayRunResponse:
    """Convert a pay run result to its output schema."""
    return PayRunResponse(
        pay_run_id=str(result.pay_run_id),
        rules_version=result.rules_version,
        rules_fingerprint=result.rules_fingerprint,
        results=[employee_response(r, include_lines) for r in result.results.values()],
        summary=PayrollSummaryResponse.model_validate(result.summary),
        error_count=result.error_count,
        skipped=result.skipped,
    )


class PayrollCli:
    """Staff payroll command line interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m staff_payroll",
            description="Staff payroll calculation tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        for name, help_text in (
            ("calculate", "Calculate payslips for active employees"),
            ("run", "Run a pay run with totals, warnings and errors"),
        ):
            cmd = subparsers.add_parser(name, help=help_text)
            cmd.add_argument(
                "--employees",
                type=str,
                required=True,
                help="Employee file (.json list or {\"employees\": [...]})",
            )
            self._add_rule_arguments(cmd)
            cmd.add_argument(
                "--lines",
                action="store_true",
                help="Include signed line items for each payslip",
            )

        run = subparsers.choices["run"]
        run.add_argument(
            "--pay-run-id",
            type=parse_uuid,
            help="Pay run ID (default: random)",
        )

        rules = subparsers.add_parser(
            "rules",
            help="Show a rule table as JSON",
        )
        self._add_rule_arguments(rules)

        return parser

    @staticmethod
    def _add_rule_arguments(cmd: argparse.ArgumentParser) -> None:
        group = cmd.add_mutually_exclusive_group()
        group.add_argument(
            "--rules",
            type=str,
            help="Rule table JSON file",
        )
        group.add_argument(
            "--version",
            type=str,
            help="Built-in rule table version (default: $PAYROLL_RULES_VERSION)",
        )

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 2

        logging.basicConfig(
            level=self.settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

        handlers: dict[str, Callable[[argparse.Namespace], int]] = {
            "calculate": self._cmd_calculate,
            "run": self._cmd_run,
            "rules": self._cmd_rules,
        }

        try:
            return handlers[parsed.command](parsed)
        except (RuleTableLoadError, RuleTableNotFoundError, EmployeeFileError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 2

    def _rule_table(self, args: argparse.Namespace) -> RuleTable:
        if args.rules:
            return load_rule_table(args.rules)
        return resolve_rule_table(self.settings, args.version)

    def _pay_run(self, args: argparse.Namespace) -> PayRunResult:
        service = PayRunService(
            engine=PayrollEngine(self._rule_table(args)),
            settings=self.settings,
            include_lines=args.lines,
        )
        records = load_employees(args.employees)
        return service.run(records, pay_run_id=getattr(args, "pay_run_id", None))

    def _cmd_calculate(self, args: argparse.Namespace) -> int:
        """Print one JSON payslip per line."""
        result = self._pay_run(args)
        for emp_result in result.results.values():
            print(employee_response(emp_result, args.lines).model_dump_json())
        return 1 if result.error_count else 0

    def _cmd_run(self, args: argparse.Namespace) -> int:
        """Print the full pay run."""
        result = self._pay_run(args)
        print(pay_run_response(result, args.lines).model_dump_json(indent=2))
        return 1 if result.error_count else 0

    def _cmd_rules(self, args: argparse.Namespace) -> int:
        """Print the selected rule table."""
        print(dump_rule_table(self._rule_table(args)))
        return 0


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
