"""Utility functions for budgetseries."""

from budgetseries.utils.date_parser import parse_date, parse_month, parse_weekday
from budgetseries.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "parse_weekday", "parse_amount"]
