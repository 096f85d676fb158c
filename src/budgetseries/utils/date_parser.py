"""Date, weekday and month parsing for command-line input."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from budgetseries.utils.date_helpers import MONTH_NAMES, WEEKDAY_NAMES, first_of_month, last_day_of_month


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative days: "today", "yesterday", "tomorrow"
    - Month boundaries: "start of month", "end of month", "end of next month"
    - Offsets: "+3 months", "+2 weeks", "-10 days", "+1 year" (from today)

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "start of month": first_of_month(today),
        "end of month": last_day_of_month(today.year, today.month),
        "start of next month": first_of_month(today) + relativedelta(months=1),
        "end of next month": _end_of_month(today + relativedelta(months=1)),
        "end of year": date(today.year, 12, 31),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str[:1] in ("+", "-"):
        return _parse_offset(date_str, today)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def _end_of_month(value: date) -> date:
    return last_day_of_month(value.year, value.month)


def _parse_offset(date_str: str, today: date) -> date:
    """Parse '+N unit' / '-N unit' relative to today."""
    parts = date_str.split()
    if len(parts) != 2:
        raise ValueError(f"Could not parse date offset '{date_str}'")
    try:
        amount = int(parts[0])
    except ValueError:
        raise ValueError(f"Could not parse date offset '{date_str}'")

    unit = parts[1].rstrip("s")
    if unit == "day":
        return today + timedelta(days=amount)
    elif unit == "week":
        return today + timedelta(weeks=amount)
    elif unit == "month":
        return today + relativedelta(months=amount)
    elif unit == "year":
        return today + relativedelta(years=amount)
    raise ValueError(f"Unknown date offset unit '{parts[1]}'. Supported units: days, weeks, months, years")


def _parse_name_or_number(value: str, names: list[str], label: str) -> int:
    value = value.strip()
    if value.isdigit():
        number = int(value)
        if 1 <= number <= len(names):
            return number
        raise ValueError(f"{label} must be between 1 and {len(names)}, got {number}")

    lowered = value.lower()
    if len(lowered) >= 3:
        for index, name in enumerate(names, start=1):
            if name.lower().startswith(lowered):
                return index
    raise ValueError(f"Unknown {label.lower()} '{value}'")


def parse_weekday(value: str) -> int:
    """Parse a weekday name ("friday", "fri") or number into 1 = Sunday .. 7 = Saturday."""
    return _parse_name_or_number(value, WEEKDAY_NAMES, "Weekday")


def parse_month(value: str) -> int:
    """Parse a month name ("february", "feb") or number into 1..12."""
    return _parse_name_or_number(value, MONTH_NAMES, "Month")
