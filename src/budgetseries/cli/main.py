"""Main CLI entry point."""

import logging

import click
from budgetseries.database.factories import create_sqlite_database

# Import and register all commands at module level
from budgetseries.cli.commands import (
    budget,
    income,
    preset,
    schedule,
    series,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUDGETSERIES_DB_PATH environment variable)",
    envvar="BUDGETSERIES_DB_PATH",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, debug: bool):
    """Budgetseries - Recurring income and budget planning.

    Record incomes that repeat daily, weekly, monthly or yearly, edit one
    occurrence or the whole series, and materialize recurring expense presets
    into budgets.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
income.register_commands(cli)
series.register_commands(cli)
schedule.register_commands(cli)
preset.register_commands(cli)
budget.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
