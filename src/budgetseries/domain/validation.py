"""Input validation shared by domain services.

Every check here runs before a service touches the database, so a failed
validation never leaves partially applied changes behind.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from budgetseries.domain.entities import IncomeDraft
from budgetseries.domain.errors import ValidationError, end_before_start, missing_end_date
from budgetseries.utils.date_helpers import to_day


def validate_text(value: str, label: str) -> str:
    """Return the stripped text, rejecting blank values."""
    stripped = (value or "").strip()
    if not stripped:
        raise ValidationError(f"{label} cannot be empty")
    return stripped


def validate_amount(amount: Decimal, label: str = "Amount") -> Decimal:
    if amount is None or amount <= 0:
        raise ValidationError(f"{label} must be greater than zero")
    return amount


def validate_bounds(start_date: date, end_date: Optional[date]) -> date:
    """Return the end day, rejecting a missing end or one before the start."""
    if end_date is None:
        raise ValidationError(missing_end_date())
    start_day, end_day = to_day(start_date), to_day(end_date)
    if end_day < start_day:
        raise ValidationError(end_before_start(start_day, end_day))
    return end_day


def validate_income_draft(draft: IncomeDraft, require_end_date: bool = False) -> None:
    """Validate form values for adding or editing an income.

    Args:
        draft: Values entered by the user
        require_end_date: Demand an end date even if the rule does not repeat

    Raises:
        ValidationError: If source is blank, amount is not positive, or a
            repeating schedule has a missing or inverted end date
    """
    validate_text(draft.source, "Source")
    validate_amount(draft.amount)
    if draft.rule.repeats or require_end_date:
        validate_bounds(draft.date, draft.end_date)
