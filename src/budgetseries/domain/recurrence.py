"""Recurrence engine.

Expands a recurrence rule into the concrete occurrence days that fall inside
an inclusive ``[start, end]`` window. Everything here is pure date arithmetic
at day granularity: no I/O, no clock, no time zones.
"""

from datetime import date, datetime, timedelta
from typing import Iterator

from budgetseries.domain.entities import Frequency, IncomeSeries, RecurrenceRule
from budgetseries.utils.date_helpers import (
    MONTH_NAMES,
    WEEKDAY_NAMES,
    add_months,
    clamped_date,
    first_of_month,
    first_weekday_on_or_after,
    last_day_of_month,
    to_day,
)


def occurrences(series: IncomeSeries) -> list[date]:
    """Return every occurrence day of a series within its own bounds."""
    return expand(series.rule, series.start_date, series.end_date)


def occurrences_in_window(rule: RecurrenceRule, window_start: date | datetime, window_end: date | datetime) -> list[date]:
    """Return the occurrence days of an unbounded rule inside a window.

    Used for presets, which carry no bounds of their own and are anchored to
    the budget period they are materialized into.
    """
    return expand(rule, window_start, window_end)


def expand(rule: RecurrenceRule, start: date | datetime, end: date | datetime) -> list[date]:
    """Expand a rule over the inclusive window [start, end].

    Returns a strictly ascending list without duplicates. An empty list is
    returned for ``Frequency.NONE`` and for an inverted window.
    """
    start = to_day(start)
    end = to_day(end)
    if end < start:
        return []

    rule = rule.clamped()
    if rule.frequency is Frequency.DAILY:
        days = _daily(start, end, rule.interval)
    elif rule.frequency is Frequency.WEEKLY:
        days = _weekly(start, end, rule.interval, rule.weekly_weekday)
    elif rule.frequency is Frequency.MONTHLY:
        days = _monthly(start, end, rule.interval, rule.monthly_day_of_month, rule.monthly_is_last_day)
    elif rule.frequency is Frequency.YEARLY:
        days = _yearly(start, end, rule.interval, rule.yearly_month, rule.yearly_day_of_month)
    else:
        return []
    return list(days)


def _daily(start: date, end: date, interval: int) -> Iterator[date]:
    step = timedelta(days=interval)
    cursor = start
    while cursor <= end:
        yield cursor
        cursor += step


def _weekly(start: date, end: date, interval: int, weekday: int) -> Iterator[date]:
    step = timedelta(weeks=interval)
    cursor = first_weekday_on_or_after(start, weekday)
    while cursor <= end:
        yield cursor
        cursor += step


def _monthly(start: date, end: date, interval: int, day_of_month: int, is_last_day: bool) -> Iterator[date]:
    month = first_of_month(start)
    step = 0
    while month <= end:
        if is_last_day:
            occurrence = last_day_of_month(month.year, month.month)
        else:
            occurrence = clamped_date(month.year, month.month, day_of_month)
        if occurrence > end:
            return
        if occurrence >= start:
            yield occurrence
        # Step from the original month so the cursor never drifts.
        step += interval
        month = add_months(first_of_month(start), step)


def _yearly(start: date, end: date, interval: int, month: int, day_of_month: int) -> Iterator[date]:
    year = start.year
    while year <= end.year:
        occurrence = clamped_date(year, month, day_of_month)
        if occurrence > end:
            return
        if occurrence >= start:
            yield occurrence
        year += interval


def ordinal(day: int) -> str:
    """Return 1st, 2nd, 3rd, 4th ... for a day number."""
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def describe_schedule(rule: RecurrenceRule) -> str:
    """Return a short human-readable description of a rule.

    Examples: "Daily", "Every 2 weeks • Friday", "Monthly • Last day",
    "Yearly • February 29th".
    """
    rule = rule.clamped()
    n = rule.interval

    if rule.frequency is Frequency.DAILY:
        return rule.frequency.display_name if n == 1 else f"Every {n} days"

    if rule.frequency is Frequency.WEEKLY:
        day = WEEKDAY_NAMES[rule.weekly_weekday - 1]
        prefix = rule.frequency.display_name if n == 1 else f"Every {n} weeks"
        return f"{prefix} • {day}"

    if rule.frequency is Frequency.MONTHLY:
        day = "Last day" if rule.monthly_is_last_day else ordinal(rule.monthly_day_of_month)
        prefix = rule.frequency.display_name if n == 1 else f"Every {n} months"
        return f"{prefix} • {day}"

    if rule.frequency is Frequency.YEARLY:
        month = MONTH_NAMES[rule.yearly_month - 1]
        prefix = rule.frequency.display_name if n == 1 else f"Every {n} years"
        return f"{prefix} • {month} {ordinal(rule.yearly_day_of_month)}"

    return rule.frequency.display_name
