"""Shared domain error messages and error types."""

from datetime import date


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DegenerateSplitError(DomainError):
    """A split would leave the earlier series ending before its own start.

    This is a soft condition: the edit coordinator catches it and collapses
    the earlier series to a single day instead of failing the edit.
    """


def income_not_found(income_id: int) -> str:
    """Return message for missing income."""
    return f"Income {income_id} not found"


def series_not_found(series_id: int) -> str:
    """Return message for missing income series."""
    return f"Income series {series_id} not found"


def preset_not_found(preset_id: int) -> str:
    """Return message for missing preset."""
    return f"Preset {preset_id} not found"


def budget_not_found(budget_id: int) -> str:
    return f"Budget {budget_id} not found"


def planned_expense_not_found(expense_id: int) -> str:
    return f"Planned expense {expense_id} not found"


def end_before_start(start_date: date, end_date: date) -> str:
    """Return message for inverted date bounds."""
    return f"End date {end_date.isoformat()} is before start date {start_date.isoformat()}"


def missing_end_date() -> str:
    """Return message when a repeating schedule has no end date."""
    return "A repeating schedule requires an end date"
