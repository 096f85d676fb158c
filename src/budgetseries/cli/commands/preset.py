"""Preset management commands."""

import click

from budgetseries.cli.error_handling import handle_domain_error, parse_option
from budgetseries.cli.rule_options import build_rule, rule_options
from budgetseries.domain.budget import PresetService
from budgetseries.domain.entities import Frequency
from budgetseries.domain.recurrence import describe_schedule
from budgetseries.utils.amount_parser import parse_amount


@click.group()
def preset_group():
    """Manage recurring expense presets."""
    pass


@preset_group.command("create")
@click.argument("title")
@click.argument("amount")
@rule_options
@click.pass_context
def create_preset(
    ctx,
    title: str,
    amount: str,
    repeat: str | None,
    every: int | None,
    weekday: str | None,
    day: int | None,
    last_day: bool,
    month: str | None,
) -> None:
    """Create a preset: an expense planned on a recurring schedule.

    Presets repeat monthly unless --repeat says otherwise. Budgets linked to
    a preset get one planned expense per occurrence inside the budget period.

    Examples:
        budgetseries preset create "Rent" 1200 --day 1
        budgetseries preset create "Groceries" 90 --repeat weekly --weekday saturday
    """
    db = ctx.obj["db"]
    service = PresetService(db)

    planned_amount = parse_option(ctx, parse_amount, amount, "amount")
    rule = build_rule(
        ctx,
        repeat=repeat or Frequency.MONTHLY.value,
        every=every,
        weekday=weekday,
        day=day,
        last_day=last_day,
        month=month,
    )

    try:
        preset_id = service.create_preset(title=title, planned_amount=planned_amount, rule=rule)
        click.echo(f"Created preset '{title.strip()}' (ID: {preset_id}): {describe_schedule(rule)}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@preset_group.command("list")
@click.pass_context
def list_presets(ctx) -> None:
    """List all presets."""
    db = ctx.obj["db"]
    service = PresetService(db)

    presets = service.list_presets()
    if not presets:
        click.echo("No presets found.")
        return

    click.echo("\nPresets:")
    click.echo("-" * 70)
    for p in presets:
        click.echo(f"ID: {p.id:3d} | {p.title[:20]:20s} | {p.planned_amount:>10,.2f} | {describe_schedule(p.rule)}")


@preset_group.command("delete")
@click.argument("preset_id", type=int)
@click.pass_context
def delete_preset(ctx, preset_id: int) -> None:
    """Delete a preset.

    Planned expenses already generated from the preset are kept.
    """
    db = ctx.obj["db"]
    service = PresetService(db)

    preset = service.get_preset(preset_id)
    if preset is None:
        click.echo(f"Error: Preset {preset_id} not found", err=True)
        ctx.exit(1)
        return

    if not click.confirm(f"Are you sure you want to delete preset '{preset.title}' (ID: {preset_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_preset(preset_id)
        click.echo(f"Deleted preset '{preset.title}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register preset commands with main CLI."""
    cli.add_command(preset_group, name="preset")
