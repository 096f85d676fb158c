"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterable, Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from budgetseries.domain.entities import (
    Budget,
    Income,
    IncomeSeries,
    PlannedExpense,
    Preset,
    RecurrenceRule,
)


class Database(ABC):
    """Abstract database interface for budgetseries.

    Write methods stage their changes. Outside of ``transaction()`` each write
    is committed immediately; inside it, all writes are committed together
    when the outermost block exits, or rolled back if it raises.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Unit of work
    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Group writes into one atomic unit. Nested blocks join the outer one."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Commit staged writes."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged writes."""
        pass

    # Income series operations
    @abstractmethod
    def create_income_series(
        self,
        source: str,
        amount: Decimal,
        is_planned: bool,
        rule: RecurrenceRule,
        start_date: date,
        end_date: date,
    ) -> int:
        """Create an income series. Returns series ID."""
        pass

    @abstractmethod
    def get_income_series(self, series_id: int) -> Optional[IncomeSeries]:
        """Get income series by ID."""
        pass

    @abstractmethod
    def list_income_series(self) -> list[IncomeSeries]:
        """List all income series ordered by start date."""
        pass

    @abstractmethod
    def update_income_series(
        self,
        series_id: int,
        source: Optional[str] = None,
        amount: Optional[Decimal] = None,
        is_planned: Optional[bool] = None,
        rule: Optional[RecurrenceRule] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> None:
        """Update income series fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_income_series(self, series_id: int) -> None:
        """Delete an income series and every income it owns."""
        pass

    # Income operations
    @abstractmethod
    def create_income(
        self,
        source: str,
        amount: Decimal,
        date: date,
        is_planned: bool = False,
        is_exception: bool = False,
        series_id: Optional[int] = None,
    ) -> int:
        """Create an income. Returns income ID."""
        pass

    @abstractmethod
    def get_income(self, income_id: int) -> Optional[Income]:
        """Get income by ID."""
        pass

    @abstractmethod
    def list_incomes(
        self,
        series_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        standalone: bool = False,
    ) -> list[Income]:
        """List incomes ordered by date.

        Args:
            series_id: Optional owning series filter
            start_date: Optional inclusive start date filter
            end_date: Optional inclusive end date filter
            standalone: If True, only return incomes without a series
        """
        pass

    @abstractmethod
    def update_income(
        self,
        income_id: int,
        source: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        is_planned: Optional[bool] = None,
        is_exception: Optional[bool] = None,
        series_id: Optional[int] = None,
        update_series: bool = False,
    ) -> None:
        """Update income fields.

        Args:
            update_series: If True, update series_id even if it's None (to detach it)
        """
        pass

    @abstractmethod
    def delete_income(self, income_id: int) -> None:
        """Delete an income."""
        pass

    # Preset operations
    @abstractmethod
    def create_preset(self, title: str, planned_amount: Decimal, rule: RecurrenceRule) -> int:
        """Create a preset. Returns preset ID."""
        pass

    @abstractmethod
    def get_preset(self, preset_id: int) -> Optional[Preset]:
        """Get preset by ID."""
        pass

    @abstractmethod
    def list_presets(self) -> list[Preset]:
        """List all presets."""
        pass

    @abstractmethod
    def delete_preset(self, preset_id: int) -> None:
        """Delete a preset. Planned expenses it generated are kept but detached."""
        pass

    # Budget operations
    @abstractmethod
    def create_budget(self, name: str, start_date: date, end_date: date) -> int:
        """Create a budget. Returns budget ID."""
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def get_budget_by_name(self, name: str) -> Optional[Budget]:
        """Get budget by name."""
        pass

    @abstractmethod
    def list_budgets(self) -> list[Budget]:
        """List all budgets ordered by start date."""
        pass

    @abstractmethod
    def update_budget(
        self,
        budget_id: int,
        name: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> None:
        """Update budget fields."""
        pass

    @abstractmethod
    def set_budget_presets(self, budget_id: int, preset_ids: Iterable[int]) -> None:
        """Replace the set of presets linked to a budget."""
        pass

    # Planned expense operations
    @abstractmethod
    def create_planned_expense(
        self,
        title: str,
        planned_amount: Decimal,
        expense_date: date,
        source_preset_id: Optional[int] = None,
        source_budget_id: Optional[int] = None,
        actual_amount: Decimal = Decimal("0"),
    ) -> int:
        """Create a planned expense. Returns planned expense ID."""
        pass

    @abstractmethod
    def get_planned_expense(self, expense_id: int) -> Optional[PlannedExpense]:
        """Get planned expense by ID."""
        pass

    @abstractmethod
    def list_planned_expenses(
        self, budget_id: Optional[int] = None, preset_id: Optional[int] = None
    ) -> list[PlannedExpense]:
        """List planned expenses ordered by date, optionally filtered."""
        pass

    @abstractmethod
    def planned_expense_exists(self, budget_id: int, preset_id: int, expense_date: date) -> bool:
        """Check if a preset already generated an expense on a day in a budget."""
        pass

    @abstractmethod
    def update_planned_expense(self, expense_id: int, actual_amount: Optional[Decimal] = None) -> None:
        """Update planned expense fields."""
        pass

    @abstractmethod
    def delete_planned_expense(self, expense_id: int) -> None:
        """Delete a planned expense."""
        pass
