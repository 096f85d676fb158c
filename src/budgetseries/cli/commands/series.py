"""Income series commands."""

import click

from budgetseries.cli.error_handling import handle_domain_error
from budgetseries.domain.income import IncomeService
from budgetseries.domain.recurrence import describe_schedule


@click.group()
def series_group():
    """Inspect, regenerate and delete income series."""
    pass


@series_group.command("list")
@click.pass_context
def list_series(ctx) -> None:
    """List all income series."""
    db = ctx.obj["db"]
    service = IncomeService(db)

    all_series = service.list_series()
    if not all_series:
        click.echo("No income series found.")
        return

    click.echo("\nIncome series:")
    click.echo("-" * 90)
    for s in all_series:
        click.echo(
            f"ID: {s.id:3d} | {s.source[:20]:20s} | {s.amount:>10,.2f} | "
            f"{s.start_date} to {s.end_date} | {describe_schedule(s.rule)}"
        )


@series_group.command("show")
@click.argument("series_id", type=int)
@click.pass_context
def show_series(ctx, series_id: int) -> None:
    """Show a series and the incomes it holds.

    Incomes edited individually are marked as exceptions; they are kept when
    the series is regenerated.
    """
    db = ctx.obj["db"]
    service = IncomeService(db)

    s = service.get_series(series_id)
    if s is None:
        click.echo(f"Error: Income series {series_id} not found", err=True)
        ctx.exit(1)
        return

    click.echo(f"\nSeries {s.id}: {s.source}")
    click.echo(f"  Amount:   {s.amount:,.2f} ({'planned' if s.is_planned else 'received'})")
    click.echo(f"  Schedule: {describe_schedule(s.rule)}")
    click.echo(f"  Period:   {s.start_date} to {s.end_date}")

    incomes = service.list_incomes(series_id=series_id)
    click.echo(f"\nIncomes ({len(incomes)}):")
    for inc in incomes:
        marker = "  (exception)" if inc.is_exception else ""
        click.echo(f"  {inc.id:5d}  {inc.date}  {inc.source[:24]:24s}  {inc.amount:>10,.2f}{marker}")


@series_group.command("regenerate")
@click.argument("series_id", type=int)
@click.option("--reset-exceptions", is_flag=True, help="Also discard incomes that were edited individually")
@click.pass_context
def regenerate_series(ctx, series_id: int, reset_exceptions: bool) -> None:
    """Rebuild the incomes of a series from its schedule.

    Examples:
        budgetseries series regenerate 3
        budgetseries series regenerate 3 --reset-exceptions
    """
    db = ctx.obj["db"]
    service = IncomeService(db)

    if reset_exceptions and not click.confirm("Individually edited incomes will be lost. Continue?"):
        click.echo("Regeneration cancelled.")
        return

    try:
        created = service.coordinator.regenerate(series_id, preserve_exceptions=not reset_exceptions)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Regenerated series {series_id}: {len(created)} income{'s' if len(created) != 1 else ''} generated")


@series_group.command("delete")
@click.argument("series_id", type=int)
@click.pass_context
def delete_series(ctx, series_id: int) -> None:
    """Delete a series together with all of its incomes."""
    db = ctx.obj["db"]
    service = IncomeService(db)

    s = service.get_series(series_id)
    if s is None:
        click.echo(f"Error: Income series {series_id} not found", err=True)
        ctx.exit(1)
        return

    if not click.confirm(f"Are you sure you want to delete series '{s.source}' (ID: {series_id}) and all its incomes?"):
        click.echo("Deletion cancelled.")
        return

    try:
        count = service.delete_series(series_id)
        click.echo(f"Deleted series '{s.source}' and {count} income{'s' if count != 1 else ''}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register series commands with main CLI."""
    cli.add_command(series_group, name="series")
