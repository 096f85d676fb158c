"""Domain model entities for budgetseries.

These are pure data classes representing business concepts, independent of
database schema. Relationships are expressed as explicit id fields
(``Income.series_id``, ``PlannedExpense.source_preset_id``) and resolved by
lookup through the database layer.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Frequency(str, Enum):
    """How often a recurrence rule repeats."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def decode(cls, raw: Optional[str], default: "Frequency") -> "Frequency":
        """Decode a stored frequency value.

        Unrecognized values fall back to ``default`` so that rows written by an
        older or newer schema still load.
        """
        if raw is None:
            return default
        try:
            return cls(raw.strip().lower())
        except ValueError:
            logger.warning("Unrecognized frequency %r, using %s", raw, default.value)
            return default

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


@dataclass(frozen=True)
class RecurrenceRule:
    """Frequency, interval and anchors of a recurring schedule.

    Weekdays use 1 = Sunday through 7 = Saturday.
    """

    frequency: Frequency = Frequency.NONE
    interval: int = 1
    weekly_weekday: int = 6
    monthly_day_of_month: int = 15
    monthly_is_last_day: bool = False
    yearly_month: int = 1
    yearly_day_of_month: int = 15

    @property
    def repeats(self) -> bool:
        return self.frequency is not Frequency.NONE

    def clamped(self) -> "RecurrenceRule":
        """Return a copy with interval >= 1 and every anchor in range."""
        return replace(
            self,
            interval=max(1, self.interval),
            weekly_weekday=_clamp(self.weekly_weekday, 1, 7),
            monthly_day_of_month=_clamp(self.monthly_day_of_month, 1, 31),
            yearly_month=_clamp(self.yearly_month, 1, 12),
            yearly_day_of_month=_clamp(self.yearly_day_of_month, 1, 31),
        )


@dataclass(frozen=True)
class IncomeSeries:
    """Recurring income definition; owns the incomes generated from it."""

    id: int
    source: str
    amount: Decimal
    is_planned: bool
    rule: RecurrenceRule
    start_date: date
    end_date: date
    created_at: datetime


@dataclass(frozen=True)
class Income:
    """Income domain entity, either standalone or generated by a series."""

    id: int
    source: str
    amount: Decimal
    date: date
    is_planned: bool
    is_exception: bool
    series_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Preset:
    """Recurring expense template that budgets materialize into planned expenses."""

    id: int
    title: str
    planned_amount: Decimal
    rule: RecurrenceRule
    created_at: datetime


@dataclass(frozen=True)
class Budget:
    """Budget period with the presets linked to it."""

    id: int
    name: str
    start_date: date
    end_date: date
    created_at: datetime
    preset_ids: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class PlannedExpense:
    """Planned expense domain entity."""

    id: int
    title: str
    planned_amount: Decimal
    actual_amount: Decimal
    expense_date: date
    source_preset_id: Optional[int]
    source_budget_id: Optional[int]
    created_at: datetime

    @property
    def is_spent(self) -> bool:
        return self.actual_amount > 0


@dataclass(frozen=True)
class IncomeDraft:
    """Values entered for adding or editing an income.

    ``date`` is the (first) occurrence day. ``end_date`` is required whenever
    ``rule`` repeats.
    """

    source: str
    amount: Decimal
    date: date
    is_planned: bool = False
    rule: RecurrenceRule = field(default_factory=RecurrenceRule)
    end_date: Optional[date] = None
