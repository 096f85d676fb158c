"""Income management commands."""

import click
from dataclasses import replace
from decimal import Decimal

from budgetseries.cli.error_handling import handle_domain_error, parse_option
from budgetseries.cli.rule_options import build_rule, rule_options
from budgetseries.domain.coordinator import EditScope
from budgetseries.domain.entities import IncomeDraft, RecurrenceRule
from budgetseries.domain.income import IncomeService
from budgetseries.utils.amount_parser import parse_amount
from budgetseries.utils.date_parser import parse_date

SCOPE_CHOICES = {
    "just-this": EditScope.JUST_THIS,
    "this-and-future": EditScope.THIS_AND_FUTURE,
    "all": EditScope.ALL_IN_SERIES,
}


@click.group()
def income_group():
    """Manage incomes and recurring incomes."""
    pass


@income_group.command("add")
@click.argument("source")
@click.argument("amount")
@click.option("--date", "date_str", default="today", help="Income date, or first occurrence of a series (default: today)")
@click.option("--planned", is_flag=True, help="Mark as planned (expected) rather than received")
@rule_options
@click.option("--end-date", help="Last possible occurrence (required with --repeat)")
@click.pass_context
def add_income(
    ctx,
    source: str,
    amount: str,
    date_str: str,
    planned: bool,
    repeat: str | None,
    every: int | None,
    weekday: str | None,
    day: int | None,
    last_day: bool,
    month: str | None,
    end_date: str | None,
) -> None:
    """Add an income, or a recurring income series.

    Without --repeat a single income is recorded. With --repeat an income
    series is created and one income is generated for every occurrence from
    --date through --end-date.

    Examples:
        budgetseries income add "Freelance" 450
        budgetseries income add "Salary" 3200 --date 2026-01-31 --repeat monthly --last-day --end-date 2026-12-31
        budgetseries income add "Paycheck" 1500 --date 2026-01-02 --repeat weekly --every 2 --weekday friday --end-date "end of year"
    """
    db = ctx.obj["db"]
    service = IncomeService(db)

    income_date = parse_option(ctx, parse_date, date_str, "date")
    income_amount = parse_option(ctx, parse_amount, amount, "amount")
    end = parse_option(ctx, parse_date, end_date, "end date")
    rule = build_rule(
        ctx,
        repeat=repeat,
        every=every,
        weekday=weekday,
        day=day,
        last_day=last_day,
        month=month,
        anchor=income_date,
    )

    draft = IncomeDraft(
        source=source,
        amount=income_amount,
        date=income_date,
        is_planned=planned,
        rule=rule,
        end_date=end,
    )

    try:
        added = service.add_income(draft)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if added.series_id is None:
        click.echo(f"Added income '{source.strip()}' on {income_date} (ID: {added.income_ids[0]})")
    else:
        count = len(added.income_ids)
        click.echo(
            f"Created income series '{source.strip()}' (ID: {added.series_id}) "
            f"with {count} income{'s' if count != 1 else ''}"
        )


@income_group.command("list")
@click.option("--start-date", help="Start date (inclusive)")
@click.option("--end-date", help="End date (inclusive)")
@click.option("--series", "series_id", type=int, help="Only incomes of this series")
@click.option("--standalone", is_flag=True, help="Only incomes that belong to no series")
@click.option("--planned/--actual", "planned", default=None, help="Only planned or only received incomes")
@click.pass_context
def list_incomes(
    ctx,
    start_date: str | None,
    end_date: str | None,
    series_id: int | None,
    standalone: bool,
    planned: bool | None,
) -> None:
    """List incomes ordered by date.

    Incomes edited individually within a series are marked with '*'.

    Examples:
        budgetseries income list --start-date "start of month" --end-date "end of month"
        budgetseries income list --series 3
    """
    db = ctx.obj["db"]
    service = IncomeService(db)

    start = parse_option(ctx, parse_date, start_date, "start date")
    end = parse_option(ctx, parse_date, end_date, "end date")

    incomes = service.list_incomes(series_id=series_id, start_date=start, end_date=end, standalone=standalone)
    if planned is not None:
        incomes = [i for i in incomes if i.is_planned == planned]

    if not incomes:
        click.echo("No incomes found.")
        return

    click.echo(f"\n{'ID':>5}  {'Date':10}  {'Source':24}  {'Amount':>12}  {'Series':>6}  Status")
    click.echo("-" * 80)
    for inc in incomes:
        series_col = f"{inc.series_id}{'*' if inc.is_exception else ''}" if inc.series_id is not None else "-"
        status = "planned" if inc.is_planned else "received"
        click.echo(
            f"{inc.id:>5}  {inc.date.isoformat():10}  {inc.source[:24]:24}  {inc.amount:>12,.2f}  {series_col:>6}  {status}"
        )

    total = sum((i.amount for i in incomes), Decimal("0"))
    click.echo("-" * 80)
    click.echo(f"Total: {total:,.2f} ({len(incomes)} income{'s' if len(incomes) != 1 else ''})")


@income_group.command("edit")
@click.argument("income_id", type=int)
@click.option("--source", help="New source")
@click.option("--amount", help="New amount")
@click.option("--date", "date_str", help="New date; with --scope this-and-future, the day the new values start")
@click.option("--planned/--received", "planned", default=None, help="Mark as planned or received")
@rule_options
@click.option("--end-date", help="New series end date")
@click.option(
    "--scope",
    type=click.Choice(list(SCOPE_CHOICES), case_sensitive=False),
    default="just-this",
    show_default=True,
    help="For incomes in a series: edit just this income, this and all future ones, or the whole series",
)
@click.pass_context
def edit_income(
    ctx,
    income_id: int,
    source: str | None,
    amount: str | None,
    date_str: str | None,
    planned: bool | None,
    repeat: str | None,
    every: int | None,
    weekday: str | None,
    day: int | None,
    last_day: bool,
    month: str | None,
    end_date: str | None,
    scope: str,
) -> None:
    """Edit an income.

    Only the values provided are changed. For an income that belongs to a
    series, --scope decides how far the edit reaches:

    \b
      just-this        only this income; it is kept on every regeneration
      this-and-future  split the series at --date (default: this income's date)
      all              rewrite the whole series, keeping its start date

    Giving --repeat to a single income turns it into a series.

    Examples:
        budgetseries income edit 12 --amount 1650
        budgetseries income edit 12 --amount 1650 --scope this-and-future
        budgetseries income edit 12 --repeat monthly --day 1 --end-date 2026-12-31 --scope all
    """
    db = ctx.obj["db"]
    service = IncomeService(db)

    income = service.get_income(income_id)
    if income is None:
        click.echo(f"Error: Income {income_id} not found", err=True)
        ctx.exit(1)
        return

    series = service.get_series(income.series_id) if income.series_id is not None else None

    new_date = parse_option(ctx, parse_date, date_str, "date") or income.date
    new_amount = parse_option(ctx, parse_amount, amount, "amount")
    new_end = parse_option(ctx, parse_date, end_date, "end date")

    rule = build_rule(
        ctx,
        repeat=repeat,
        every=every,
        weekday=weekday,
        day=day,
        last_day=last_day,
        month=month,
        anchor=new_date,
        base=series.rule if series is not None else None,
    )

    draft = IncomeDraft(
        source=source if source is not None else income.source,
        amount=new_amount if new_amount is not None else income.amount,
        date=new_date,
        is_planned=planned if planned is not None else income.is_planned,
        rule=rule,
        end_date=new_end if new_end is not None else (series.end_date if series is not None else None),
    )
    edit_scope = SCOPE_CHOICES[scope.lower()]
    if series is not None and edit_scope is EditScope.JUST_THIS:
        # A single occurrence carries no schedule of its own.
        draft = replace(draft, rule=RecurrenceRule(), end_date=None)

    try:
        outcome = service.coordinator.apply_edit_scope(income_id, draft, edit_scope)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    if outcome.applied_scope is None:
        if outcome.series_id is not None:
            click.echo(f"Converted income {income_id} into income series {outcome.series_id}")
        else:
            click.echo(f"Updated income {income_id}")
    elif outcome.applied_scope is EditScope.JUST_THIS:
        if edit_scope is EditScope.THIS_AND_FUTURE:
            click.echo("Nothing to split after the end of the series; edited just this income.")
        click.echo(f"Updated income {income_id} (kept as an exception of series {outcome.series_id})")
    elif outcome.applied_scope is EditScope.ALL_IN_SERIES:
        click.echo(f"Updated income series {outcome.series_id} and regenerated its incomes")
    elif outcome.degenerate_split:
        click.echo(
            f"Replaced income series {income.series_id} by series {outcome.series_id}: "
            f"it had no occurrences before {new_date}"
        )
    else:
        click.echo(
            f"Split income series {outcome.past_series_id}: new values apply from "
            f"{new_date} in series {outcome.series_id}"
        )


@income_group.command("delete")
@click.argument("income_id", type=int)
@click.pass_context
def delete_income(ctx, income_id: int) -> None:
    """Delete a single income.

    Deleting an income generated by a series only removes that occurrence
    until the series is regenerated. Use 'series delete' to remove a whole
    series.

    Examples:
        budgetseries income delete 12
    """
    db = ctx.obj["db"]
    service = IncomeService(db)

    income = service.get_income(income_id)
    if income is None:
        click.echo(f"Error: Income {income_id} not found", err=True)
        ctx.exit(1)
        return

    if not click.confirm(f"Are you sure you want to delete income '{income.source}' on {income.date} (ID: {income_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_income(income_id)
        click.echo(f"Deleted income {income_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register income commands with main CLI."""
    cli.add_command(income_group, name="income")
