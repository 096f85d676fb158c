"""Budget management commands."""

import click

from budgetseries.cli.error_handling import handle_domain_error, parse_option
from budgetseries.domain.budget import BudgetService
from budgetseries.utils.amount_parser import parse_amount
from budgetseries.utils.date_parser import parse_date


def _resolve_budget(ctx, service: BudgetService, budget: str) -> int:
    """Resolve a budget name or ID to its ID."""
    found = service.get_budget_by_name(budget)
    if found is None and budget.isdigit():
        found = service.get_budget(int(budget))
    if found is None:
        click.echo(f"Error: Budget '{budget}' not found", err=True)
        ctx.exit(1)
    return found.id


@click.group()
def budget_group():
    """Manage budgets and their planned expenses."""
    pass


@budget_group.command("create")
@click.argument("name")
@click.option("--start-date", required=True, help="First day of the budget period")
@click.option("--end-date", required=True, help="Last day of the budget period")
@click.option("--preset", "preset_ids", type=int, multiple=True, help="Preset ID to link (repeatable)")
@click.pass_context
def create_budget(ctx, name: str, start_date: str, end_date: str, preset_ids: tuple[int, ...]) -> None:
    """Create a budget and plan the expenses of its presets.

    Examples:
        budgetseries budget create "January" --start-date 2026-01-01 --end-date 2026-01-31 --preset 1 --preset 2
    """
    db = ctx.obj["db"]
    service = BudgetService(db)

    start = parse_option(ctx, parse_date, start_date, "start date")
    end = parse_option(ctx, parse_date, end_date, "end date")

    try:
        budget_id = service.create_budget(name=name, start_date=start, end_date=end, preset_ids=preset_ids)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    count = len(service.list_planned_expenses(budget_id))
    click.echo(f"Created budget '{name.strip()}' (ID: {budget_id}) with {count} planned expense{'s' if count != 1 else ''}")


@budget_group.command("update")
@click.argument("budget", metavar="BUDGET")
@click.option("--name", help="New name")
@click.option("--start-date", help="New first day of the budget period")
@click.option("--end-date", help="New last day of the budget period")
@click.option("--preset", "preset_ids", type=int, multiple=True, help="Linked preset IDs, replacing the current ones (repeatable)")
@click.option("--clear-presets", is_flag=True, help="Unlink all presets")
@click.pass_context
def update_budget(
    ctx,
    budget: str,
    name: str | None,
    start_date: str | None,
    end_date: str | None,
    preset_ids: tuple[int, ...],
    clear_presets: bool,
) -> None:
    """Update a budget; its planned expenses follow the new period and presets.

    BUDGET can be a budget name or ID.

    Examples:
        budgetseries budget update "January" --end-date 2026-02-15
        budgetseries budget update 1 --preset 1 --preset 3
    """
    db = ctx.obj["db"]
    service = BudgetService(db)

    if clear_presets and preset_ids:
        click.echo("Error: --preset cannot be combined with --clear-presets", err=True)
        ctx.exit(1)
        return

    budget_id = _resolve_budget(ctx, service, budget)
    start = parse_option(ctx, parse_date, start_date, "start date")
    end = parse_option(ctx, parse_date, end_date, "end date")

    presets = None
    if clear_presets:
        presets = []
    elif preset_ids:
        presets = list(preset_ids)

    try:
        service.update_budget(budget_id, name=name, start_date=start, end_date=end, preset_ids=presets)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    count = len(service.list_planned_expenses(budget_id))
    click.echo(f"Updated budget {budget_id} ({count} planned expense{'s' if count != 1 else ''})")


@budget_group.command("list")
@click.pass_context
def list_budgets(ctx) -> None:
    """List all budgets."""
    db = ctx.obj["db"]
    service = BudgetService(db)

    budgets = service.list_budgets()
    if not budgets:
        click.echo("No budgets found.")
        return

    click.echo("\nBudgets:")
    click.echo("-" * 70)
    for b in budgets:
        click.echo(
            f"ID: {b.id:3d} | {b.name[:20]:20s} | {b.start_date} to {b.end_date} | "
            f"{len(b.preset_ids)} preset{'s' if len(b.preset_ids) != 1 else ''}"
        )


@budget_group.command("show")
@click.argument("budget", metavar="BUDGET")
@click.pass_context
def show_budget(ctx, budget: str) -> None:
    """Show a budget's planned expenses.

    BUDGET can be a budget name or ID.
    """
    db = ctx.obj["db"]
    service = BudgetService(db)

    budget_id = _resolve_budget(ctx, service, budget)
    b = service.get_budget(budget_id)
    expenses = service.list_planned_expenses(budget_id)

    click.echo(f"\nBudget {b.id}: {b.name} ({b.start_date} to {b.end_date})")
    click.echo("-" * 60)
    if not expenses:
        click.echo("No planned expenses.")
        return
    click.echo(f"{'ID':>5}  {'Date':10}  {'Title':24}  {'Planned':>10}  {'Actual':>10}")
    for e in expenses:
        click.echo(
            f"{e.id:>5}  {e.expense_date.isoformat():10}  {e.title[:24]:24}  "
            f"{e.planned_amount:>10,.2f}  {e.actual_amount:>10,.2f}"
        )
    click.echo("-" * 60)
    click.echo(f"Planned total: {service.planned_total(budget_id):,.2f}")
    click.echo(f"Actual total: {service.actual_total(budget_id):,.2f}")


@budget_group.command("record")
@click.argument("expense_id", type=int)
@click.argument("amount")
@click.pass_context
def record_actual(ctx, expense_id: int, amount: str) -> None:
    """Record the actual amount spent on a planned expense.

    Spent expenses are kept when their preset is unlinked from the budget
    or falls outside its period. Recording 0 marks an expense as unspent.

    Examples:
        budgetseries budget record 7 1185.40
    """
    db = ctx.obj["db"]
    service = BudgetService(db)

    actual = parse_option(ctx, parse_amount, amount, "amount")

    try:
        expense = service.record_actual(expense_id, actual)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Recorded {expense.actual_amount:,.2f} on '{expense.title}' ({expense.expense_date}), "
        f"planned {expense.planned_amount:,.2f}"
    )


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
