"""Tests for the payroll CLI."""

import json
from decimal import Decimal

import pytest

from staff_payroll.cli import PayrollCli

from tests.conftest import EXAMPLES_DIR

STAFF_FILE = str(EXAMPLES_DIR / "pay_run" / "staff.json")
RULES_FILE = str(EXAMPLES_DIR / "rules" / "ke_2024.json")


@pytest.fixture
def cli(test_settings) -> PayrollCli:
    return PayrollCli(settings=test_settings)


class TestRulesCommand:
    """Test the rules command."""

    def test_builtin_version(self, cli, capsys):
        assert cli.run(["rules", "--version", "KE-2024"]) == 0

        document = json.loads(capsys.readouterr().out)
        assert document["version"] == "KE-2024"
        assert document["personal_relief"] == "2400"
        assert document["bands"][-1]["width"] is None

    def test_default_version_from_settings(self, cli, capsys):
        assert cli.run(["rules"]) == 0
        assert json.loads(capsys.readouterr().out)["version"] == "KE-2024"

    def test_from_file(self, cli, capsys):
        assert cli.run(["rules", "--rules", RULES_FILE]) == 0
        assert json.loads(capsys.readouterr().out)["pension"]["cap"] == "4320"

    def test_unknown_version(self, cli, capsys):
        assert cli.run(["rules", "--version", "XX-1900"]) == 2
        assert "XX-1900" in capsys.readouterr().err


class TestRunCommand:
    """Test the run command."""

    def test_example_staff_file(self, cli, capsys):
        assert cli.run(["run", "--employees", STAFF_FILE]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["rules_version"] == "KE-2024"
        assert output["skipped"] == ["EMP006"]
        assert output["error_count"] == 0
        assert output["summary"]["employee_count"] == 5
        assert output["summary"]["adjusted_count"] == 1

        by_id = {r["employee_id"]: r for r in output["results"]}
        assert Decimal(by_id["EMP001"]["payslip"]["net_pay"]) == Decimal("174708.90")
        assert by_id["EMP005"]["warnings"]
        assert by_id["EMP001"]["lines"] is None

    def test_fixed_pay_run_id(self, cli, capsys):
        pay_run_id = "8d6f3c1e-2b4a-4c5d-9e8f-1a2b3c4d5e6f"
        assert cli.run(["run", "--employees", STAFF_FILE, "--pay-run-id", pay_run_id]) == 0
        assert json.loads(capsys.readouterr().out)["pay_run_id"] == pay_run_id

    def test_error_exit_code(self, cli, capsys, tmp_path):
        path = tmp_path / "staff.json"
        path.write_text(json.dumps([{"id": "X1", "grossSalary": -5}]))

        assert cli.run(["run", "--employees", str(path)]) == 1
        output = json.loads(capsys.readouterr().out)
        assert output["results"][0]["success"] is False

    def test_missing_employee_file(self, cli, capsys, tmp_path):
        assert cli.run(["run", "--employees", str(tmp_path / "none.json")]) == 2
        assert "none.json" in capsys.readouterr().err

    def test_duplicate_employee_ids(self, cli, capsys, tmp_path):
        path = tmp_path / "staff.json"
        path.write_text(
            json.dumps([{"id": "D1", "grossSalary": -1}, {"id": "D1", "grossSalary": 50000}])
        )

        assert cli.run(["run", "--employees", str(path)]) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ERROR" in captured.err
        assert "D1" in captured.err

    def test_undecodable_employee_file(self, cli, capsys, tmp_path):
        path = tmp_path / "staff.json"
        path.write_bytes(b'[{"id": "\xff", "grossSalary": 1}]')

        assert cli.run(["run", "--employees", str(path)]) == 2
        assert "ERROR" in capsys.readouterr().err

    def test_undecodable_rule_file(self, cli, capsys, tmp_path):
        path = tmp_path / "rules.json"
        path.write_bytes(b"\xff\xfe")

        assert cli.run(["run", "--employees", STAFF_FILE, "--rules", str(path)]) == 2
        assert "ERROR" in capsys.readouterr().err


class TestCalculateCommand:
    """Test the calculate command."""

    def test_one_line_per_active_employee(self, cli, capsys):
        assert cli.run(["calculate", "--employees", STAFF_FILE, "--lines"]) == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 5
        first = json.loads(lines[0])
        assert first["employee_id"] == "EMP001"
        assert first["lines"][0]["code"] == "BASIC"

    def test_lines_carry_hashes(self, cli, capsys):
        assert cli.run(["calculate", "--employees", STAFF_FILE, "--lines"]) == 0
        first_run = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert cli.run(["calculate", "--employees", STAFF_FILE, "--lines"]) == 0
        second_run = [json.loads(line) for line in capsys.readouterr().out.splitlines()]

        hashes = [item["line_hash"] for item in first_run[0]["lines"]]
        assert all(len(h) == 32 for h in hashes)
        assert len(set(hashes)) == len(hashes)
        assert hashes == [item["line_hash"] for item in second_run[0]["lines"]]

    def test_no_command_prints_help(self, cli, capsys):
        assert cli.run([]) == 2
        assert "usage" in capsys.readouterr().out
