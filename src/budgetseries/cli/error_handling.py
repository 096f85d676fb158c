"""CLI error handling helpers."""

from typing import Callable, Optional, TypeVar

import click

from budgetseries.domain.errors import DomainError

T = TypeVar("T")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def parse_option(ctx: click.Context, parser: Callable[[str], T], value: Optional[str], label: str) -> Optional[T]:
    """Parse an optional raw option value, exiting with an error on bad input.

    Args:
        ctx: Click context
        parser: One of the parse_* helpers from budgetseries.utils
        value: Raw option value; None is passed through
        label: Option description used in the error message (e.g. "start date")
    """
    if value is None:
        return None
    try:
        return parser(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
