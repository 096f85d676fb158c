"""Schedule preview command."""

import click

from budgetseries.cli.error_handling import parse_option
from budgetseries.cli.rule_options import build_rule, rule_options
from budgetseries.domain.recurrence import describe_schedule, expand
from budgetseries.utils.date_parser import parse_date


@click.group()
def schedule_group():
    """Preview recurrence schedules."""
    pass


@schedule_group.command("preview")
@click.option("--start-date", default="today", help="First day of the window (default: today)")
@click.option("--end-date", required=True, help="Last day of the window")
@rule_options
@click.pass_context
def preview_schedule(
    ctx,
    start_date: str,
    end_date: str,
    repeat: str | None,
    every: int | None,
    weekday: str | None,
    day: int | None,
    last_day: bool,
    month: str | None,
) -> None:
    """List the days a schedule falls on, without saving anything.

    Examples:
        budgetseries schedule preview --repeat weekly --every 2 --weekday friday --start-date 2026-01-01 --end-date 2026-03-15
        budgetseries schedule preview --repeat monthly --day 31 --start-date 2026-01-01 --end-date 2026-06-30
    """
    start = parse_option(ctx, parse_date, start_date, "start date")
    end = parse_option(ctx, parse_date, end_date, "end date")
    if end < start:
        click.echo(f"Error: End date {end} is before start date {start}", err=True)
        ctx.exit(1)
        return

    rule = build_rule(
        ctx,
        repeat=repeat,
        every=every,
        weekday=weekday,
        day=day,
        last_day=last_day,
        month=month,
        anchor=start,
    )

    days = expand(rule, start, end)
    click.echo(f"{describe_schedule(rule)}: {len(days)} occurrence{'s' if len(days) != 1 else ''}")
    for d in days:
        click.echo(f"  {d.isoformat()}  {d.strftime('%A')}")


def register_commands(cli):
    """Register schedule commands with main CLI."""
    cli.add_command(schedule_group, name="schedule")
