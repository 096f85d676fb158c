"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the flattening of
``RecurrenceRule`` into columns and the decoding of stored frequency strings.
"""

from typing import Any

from budgetseries.domain import entities as domain
from budgetseries.database.models import (
    IncomeSeries as ORMIncomeSeries,
    Income as ORMIncome,
    Preset as ORMPreset,
    Budget as ORMBudget,
    PlannedExpense as ORMPlannedExpense,
)


def rule_to_columns(rule: domain.RecurrenceRule) -> dict[str, Any]:
    """Flatten a (clamped) recurrence rule into model column values."""
    rule = rule.clamped()
    return {
        "frequency": rule.frequency.value,
        "interval": rule.interval,
        "weekly_weekday": rule.weekly_weekday,
        "monthly_day_of_month": rule.monthly_day_of_month,
        "monthly_is_last_day": rule.monthly_is_last_day,
        "yearly_month": rule.yearly_month,
        "yearly_day_of_month": rule.yearly_day_of_month,
    }


def rule_from_columns(orm_obj: ORMIncomeSeries | ORMPreset, default: domain.Frequency) -> domain.RecurrenceRule:
    """Rebuild a recurrence rule from model columns."""
    return domain.RecurrenceRule(
        frequency=domain.Frequency.decode(orm_obj.frequency, default),
        interval=orm_obj.interval,
        weekly_weekday=orm_obj.weekly_weekday,
        monthly_day_of_month=orm_obj.monthly_day_of_month,
        monthly_is_last_day=orm_obj.monthly_is_last_day,
        yearly_month=orm_obj.yearly_month,
        yearly_day_of_month=orm_obj.yearly_day_of_month,
    ).clamped()


def income_series_to_domain(orm_series: ORMIncomeSeries) -> domain.IncomeSeries:
    """Convert SQLAlchemy IncomeSeries model to domain IncomeSeries entity."""
    return domain.IncomeSeries(
        id=orm_series.id,
        source=orm_series.source,
        amount=orm_series.amount,
        is_planned=orm_series.is_planned,
        rule=rule_from_columns(orm_series, domain.Frequency.NONE),
        start_date=orm_series.start_date,
        end_date=orm_series.end_date,
        created_at=orm_series.created_at,
    )


def income_to_domain(orm_income: ORMIncome) -> domain.Income:
    """Convert SQLAlchemy Income model to domain Income entity."""
    return domain.Income(
        id=orm_income.id,
        source=orm_income.source,
        amount=orm_income.amount,
        date=orm_income.date,
        is_planned=orm_income.is_planned,
        is_exception=orm_income.is_exception,
        series_id=orm_income.series_id,
        created_at=orm_income.created_at,
    )


def preset_to_domain(orm_preset: ORMPreset) -> domain.Preset:
    """Convert SQLAlchemy Preset model to domain Preset entity."""
    return domain.Preset(
        id=orm_preset.id,
        title=orm_preset.title,
        planned_amount=orm_preset.planned_amount,
        rule=rule_from_columns(orm_preset, domain.Frequency.MONTHLY),
        created_at=orm_preset.created_at,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        name=orm_budget.name,
        start_date=orm_budget.start_date,
        end_date=orm_budget.end_date,
        created_at=orm_budget.created_at,
        preset_ids=frozenset(link.preset_id for link in orm_budget.preset_links),
    )


def planned_expense_to_domain(orm_expense: ORMPlannedExpense) -> domain.PlannedExpense:
    """Convert SQLAlchemy PlannedExpense model to domain PlannedExpense entity."""
    return domain.PlannedExpense(
        id=orm_expense.id,
        title=orm_expense.title,
        planned_amount=orm_expense.planned_amount,
        actual_amount=orm_expense.actual_amount,
        expense_date=orm_expense.expense_date,
        source_preset_id=orm_expense.source_preset_id,
        source_budget_id=orm_expense.source_budget_id,
        created_at=orm_expense.created_at,
    )
