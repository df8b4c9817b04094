"""Entry point for running the payroll CLI."""

import sys

from staff_payroll.cli import main

if __name__ == "__main__":
    sys.exit(main())
