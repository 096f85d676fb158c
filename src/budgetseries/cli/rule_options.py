"""Shared click options for describing a recurrence rule."""

from dataclasses import replace
from datetime import date
from typing import Optional

import click

from budgetseries.cli.error_handling import parse_option
from budgetseries.domain.entities import Frequency, RecurrenceRule
from budgetseries.utils.date_helpers import weekday_number
from budgetseries.utils.date_parser import parse_month, parse_weekday

FREQUENCY_CHOICES = [f.value for f in Frequency]

_RULE_OPTIONS = [
    click.option(
        "--repeat",
        type=click.Choice(FREQUENCY_CHOICES, case_sensitive=False),
        help="Repeat frequency (none, daily, weekly, monthly, yearly)",
    ),
    click.option("--every", type=int, help="Repeat every N days/weeks/months/years (default 1)"),
    click.option("--weekday", help="Weekly: day of week by name or number (1 = Sunday)"),
    click.option("--day", type=int, help="Monthly/yearly: day of month (clamped to the month's last day)"),
    click.option("--last-day", is_flag=True, help="Monthly: fall on the last day of every month"),
    click.option("--month", help="Yearly: month by name or number"),
]


def rule_options(func):
    """Decorate a command with --repeat, --every, --weekday, --day, --last-day and --month."""
    for option in reversed(_RULE_OPTIONS):
        func = option(func)
    return func


def build_rule(
    ctx: click.Context,
    *,
    repeat: Optional[str],
    every: Optional[int],
    weekday: Optional[str],
    day: Optional[int],
    last_day: bool,
    month: Optional[str],
    anchor: Optional[date] = None,
    base: Optional[RecurrenceRule] = None,
) -> RecurrenceRule:
    """Build a recurrence rule from rule options.

    Options left unset keep the value of ``base`` when editing an existing
    rule. For a new rule, anchors not given on the command line are taken from
    ``anchor`` (the first occurrence date) so that "--repeat monthly" on the
    31st repeats on the 31st.
    """
    if base is None:
        rule = RecurrenceRule()
        if anchor is not None:
            rule = replace(
                rule,
                weekly_weekday=weekday_number(anchor),
                monthly_day_of_month=anchor.day,
                yearly_month=anchor.month,
                yearly_day_of_month=anchor.day,
            )
    else:
        rule = base

    changes = {}
    if repeat is not None:
        changes["frequency"] = Frequency(repeat.lower())
    if every is not None:
        if every < 1:
            click.echo("Error: --every must be at least 1", err=True)
            ctx.exit(1)
        changes["interval"] = every
    if weekday is not None:
        changes["weekly_weekday"] = parse_option(ctx, parse_weekday, weekday, "weekday")
    if day is not None:
        changes["monthly_day_of_month"] = day
        changes["yearly_day_of_month"] = day
        changes["monthly_is_last_day"] = False
    if last_day:
        changes["monthly_is_last_day"] = True
    if month is not None:
        changes["yearly_month"] = parse_option(ctx, parse_month, month, "month")

    return replace(rule, **changes).clamped()
