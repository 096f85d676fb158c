"""Preset and budget domain services.

Presets are recurring expense templates without bounds. A budget links a set
of presets and materializes each preset's occurrences inside the budget
period as planned expenses.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from budgetseries.database.base import Database
from budgetseries.domain.entities import (
    Budget as BudgetEntity,
    PlannedExpense as PlannedExpenseEntity,
    Preset as PresetEntity,
    RecurrenceRule,
)
from budgetseries.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    budget_not_found,
    planned_expense_not_found,
    preset_not_found,
)
from budgetseries.domain.recurrence import occurrences_in_window
from budgetseries.domain.validation import validate_amount, validate_bounds, validate_text
from budgetseries.utils.date_helpers import to_day

logger = logging.getLogger(__name__)


class PresetService:
    """Service for managing presets."""

    def __init__(self, db: Database):
        """Initialize preset service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_preset(self, title: str, planned_amount: Decimal, rule: RecurrenceRule) -> int:
        """Create a preset.

        Args:
            title: Preset title
            planned_amount: Amount planned per occurrence
            rule: Recurrence rule

        Returns:
            Preset ID

        Raises:
            ValidationError: If the title is blank or the amount is not positive
        """
        title = validate_text(title, "Title")
        validate_amount(planned_amount, "Planned amount")
        return self.db.create_preset(title=title, planned_amount=planned_amount, rule=rule.clamped())

    def get_preset(self, preset_id: int) -> Optional[PresetEntity]:
        return self.db.get_preset(preset_id)

    def list_presets(self) -> list[PresetEntity]:
        return self.db.list_presets()

    def delete_preset(self, preset_id: int) -> None:
        """Delete a preset, keeping the planned expenses it already generated.

        Raises:
            NotFoundError: If the preset doesn't exist
        """
        if self.db.get_preset(preset_id) is None:
            raise NotFoundError(preset_not_found(preset_id))
        self.db.delete_preset(preset_id)

    def occurrences_between(self, preset_id: int, start_date: date, end_date: date) -> list[date]:
        """Return the days a preset falls on inside [start_date, end_date]."""
        preset = self.db.get_preset(preset_id)
        if preset is None:
            raise NotFoundError(preset_not_found(preset_id))
        return occurrences_in_window(preset.rule, start_date, end_date)


class BudgetService:
    """Service for managing budgets and their planned expenses."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_budget(
        self,
        name: str,
        start_date: date,
        end_date: date,
        preset_ids: Iterable[int] = (),
    ) -> int:
        """Create a budget and materialize the planned expenses of its presets.

        Args:
            name: Budget name (unique)
            start_date: First day of the budget period
            end_date: Last day of the budget period
            preset_ids: Presets to link

        Returns:
            Budget ID

        Raises:
            ValidationError: If the name is blank or the period is inverted
            ConflictError: If a budget with the same name exists
            NotFoundError: If a preset doesn't exist
        """
        name = validate_text(name, "Budget name")
        start_day = to_day(start_date)
        end_day = validate_bounds(start_day, end_date)
        if self.db.get_budget_by_name(name) is not None:
            raise ConflictError(f"Budget with name '{name}' already exists")
        presets = self._require_presets(preset_ids)

        with self.db.transaction():
            budget_id = self.db.create_budget(name=name, start_date=start_day, end_date=end_day)
            self.db.set_budget_presets(budget_id, [p.id for p in presets])
            created = self._materialize(self.db.get_budget(budget_id), presets)

        logger.info("Created budget %d '%s' with %d planned expenses", budget_id, name, created)
        return budget_id

    def update_budget(
        self,
        budget_id: int,
        name: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        preset_ids: Optional[Iterable[int]] = None,
    ) -> None:
        """Update a budget and bring its planned expenses in line.

        Unspent planned expenses generated by presets that are no longer
        linked, or that now fall outside the period, are deleted. Expenses
        with an actual amount recorded are kept for review. Missing occurrences of
        linked presets are created. Existing (budget, preset, day) expenses are
        left untouched.

        Raises:
            NotFoundError: If the budget or a preset doesn't exist
            ValidationError: If the new name is blank or the period is inverted
            ConflictError: If the new name is taken by another budget
        """
        budget = self._require_budget(budget_id)

        if name is not None:
            name = validate_text(name, "Budget name")
            other = self.db.get_budget_by_name(name)
            if other is not None and other.id != budget_id:
                raise ConflictError(f"Budget with name '{name}' already exists")
        start_day = to_day(start_date) if start_date is not None else budget.start_date
        end_day = to_day(end_date) if end_date is not None else budget.end_date
        validate_bounds(start_day, end_day)
        if preset_ids is None:
            presets = self._require_presets(budget.preset_ids)
        else:
            presets = self._require_presets(preset_ids)

        with self.db.transaction():
            self.db.update_budget(budget_id, name=name, start_date=start_day, end_date=end_day)
            self.db.set_budget_presets(budget_id, [p.id for p in presets])
            budget = self.db.get_budget(budget_id)
            removed = self._prune(budget)
            created = self._materialize(budget, presets)

        logger.info("Updated budget %d: %d planned expenses removed, %d added", budget_id, removed, created)

    def get_budget(self, budget_id: int) -> Optional[BudgetEntity]:
        return self.db.get_budget(budget_id)

    def get_budget_by_name(self, name: str) -> Optional[BudgetEntity]:
        return self.db.get_budget_by_name(name)

    def list_budgets(self) -> list[BudgetEntity]:
        return self.db.list_budgets()

    def list_planned_expenses(self, budget_id: int) -> list[PlannedExpenseEntity]:
        """List planned expenses of a budget ordered by date."""
        self._require_budget(budget_id)
        return self.db.list_planned_expenses(budget_id=budget_id)

    def planned_total(self, budget_id: int) -> Decimal:
        """Sum the planned amounts of a budget's planned expenses."""
        return sum((e.planned_amount for e in self.list_planned_expenses(budget_id)), Decimal("0"))

    def actual_total(self, budget_id: int) -> Decimal:
        return sum((e.actual_amount for e in self.list_planned_expenses(budget_id)), Decimal("0"))

    def record_actual(self, expense_id: int, actual_amount: Decimal) -> PlannedExpenseEntity:
        """Record what was actually spent on a planned expense.

        An amount of zero marks the expense as unspent again.

        Returns:
            The updated planned expense

        Raises:
            NotFoundError: If the planned expense doesn't exist
            ValidationError: If the amount is negative
        """
        if self.db.get_planned_expense(expense_id) is None:
            raise NotFoundError(planned_expense_not_found(expense_id))
        if actual_amount is None or actual_amount < 0:
            raise ValidationError("Actual amount cannot be negative")

        self.db.update_planned_expense(expense_id, actual_amount=actual_amount)
        logger.debug("Recorded actual amount %s on planned expense %d", actual_amount, expense_id)
        return self.db.get_planned_expense(expense_id)

    def _require_budget(self, budget_id: int) -> BudgetEntity:
        budget = self.db.get_budget(budget_id)
        if budget is None:
            raise NotFoundError(budget_not_found(budget_id))
        return budget

    def _require_presets(self, preset_ids: Iterable[int]) -> list[PresetEntity]:
        presets = []
        for preset_id in sorted(set(preset_ids)):
            preset = self.db.get_preset(preset_id)
            if preset is None:
                raise NotFoundError(preset_not_found(preset_id))
            presets.append(preset)
        return presets

    def _prune(self, budget: BudgetEntity) -> int:
        removed = 0
        for expense in self.db.list_planned_expenses(budget_id=budget.id):
            # Expenses whose preset was deleted, or that were already spent,
            # are kept as-is.
            if expense.source_preset_id is None or expense.is_spent:
                continue
            linked = expense.source_preset_id in budget.preset_ids
            in_window = budget.start_date <= expense.expense_date <= budget.end_date
            if not linked or not in_window:
                self.db.delete_planned_expense(expense.id)
                removed += 1
        return removed

    def _materialize(self, budget: BudgetEntity, presets: list[PresetEntity]) -> int:
        created = 0
        for preset in presets:
            for day in occurrences_in_window(preset.rule, budget.start_date, budget.end_date):
                if self.db.planned_expense_exists(budget.id, preset.id, day):
                    continue
                self.db.create_planned_expense(
                    title=preset.title,
                    planned_amount=preset.planned_amount,
                    expense_date=day,
                    source_preset_id=preset.id,
                    source_budget_id=budget.id,
                )
                created += 1
        return created
