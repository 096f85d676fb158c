"""Recurring income series and budget planning.

The command-line entry point lives in ``budgetseries.cli.main``.
"""

__version__ = "0.1.0"
