"""Loading rule tables and employee files from JSON."""

from __future__ import annotations

import json
from pathlib import Path

import pydantic

from staff_payroll.calculators.rules import RuleTable, RuleTableError, default_rule_book
from staff_payroll.config import Settings
from staff_payroll.schemas import EmployeeFile, EmployeeRecord, RuleTableDocument


class RuleTableLoadError(Exception):
    """Raised when a rule table file cannot be read or is invalid."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot load rule table from {self.path}: {reason}")


class EmployeeFileError(Exception):
    """Raised when an employee file cannot be read or is invalid."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot load employees from {self.path}: {reason}")


def load_rule_table(path: Path | str) -> RuleTable:
    """Load and validate a rule table JSON document."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RuleTableLoadError(path, str(e)) from e

    try:
        document = RuleTableDocument.model_validate_json(text)
        return document.to_rule_table()
    except pydantic.ValidationError as e:
        raise RuleTableLoadError(path, f"{e.error_count()} validation error(s): {e}") from e
    except RuleTableError as e:
        raise RuleTableLoadError(path, str(e)) from e


def dump_rule_table(table: RuleTable) -> str:
    """Serialize a rule table to its JSON document form."""
    return RuleTableDocument.from_rule_table(table).model_dump_json(indent=2)


def load_employees(path: Path | str) -> list[EmployeeRecord]:
    """Load employee records from a JSON list or {"employees": [...]} object."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise EmployeeFileError(path, str(e)) from e
    except json.JSONDecodeError as e:
        raise EmployeeFileError(path, f"invalid JSON: {e}") from e

    if isinstance(raw, list):
        raw = {"employees": raw}

    try:
        return EmployeeFile.model_validate(raw).employees
    except pydantic.ValidationError as e:
        raise EmployeeFileError(path, f"{e.error_count()} validation error(s): {e}") from e


def resolve_rule_table(settings: Settings, version: str | None = None) -> RuleTable:
    """Pick the rule table for a run.

    An explicit version wins, then PAYROLL_RULES_PATH, then the
    configured default version from the built-in rule book.
    """
    if version is None and settings.rules_path:
        return load_rule_table(settings.rules_path)
    return default_rule_book().get(version or settings.rules_version)
