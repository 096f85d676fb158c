"""Day-granularity date arithmetic used by the recurrence engine."""

import calendar
from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta


def to_day(value: date | datetime) -> date:
    """Strip any time-of-day component, returning a plain date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def clamped_date(year: int, month: int, day: int) -> date:
    """Return year/month/day, pulling day back to the month's last valid day."""
    return date(year, month, max(1, min(day, days_in_month(year, month))))


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, days_in_month(year, month))


def first_of_month(value: date) -> date:
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """Add months to a date, clamping the day to the end of the target month."""
    return value + relativedelta(months=months)


def day_before(value: date) -> date:
    return value - timedelta(days=1)


def weekday_number(value: date) -> int:
    """Return the weekday of a date as 1 = Sunday through 7 = Saturday."""
    return value.isoweekday() % 7 + 1


def first_weekday_on_or_after(value: date, weekday: int) -> date:
    """Return the first date >= value falling on weekday (1 = Sunday)."""
    offset = (weekday - weekday_number(value)) % 7
    return value + timedelta(days=offset)


WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
