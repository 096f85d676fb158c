"""Income domain service."""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from budgetseries.database.base import Database
from budgetseries.domain.coordinator import SeriesEditCoordinator
from budgetseries.domain.entities import (
    Income as IncomeEntity,
    IncomeDraft,
    IncomeSeries as IncomeSeriesEntity,
)
from budgetseries.domain.errors import NotFoundError, income_not_found, series_not_found
from budgetseries.domain.recurrence import occurrences
from budgetseries.domain.validation import validate_income_draft
from budgetseries.utils.date_helpers import to_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddedIncome:
    """Result of adding an income: one standalone record or a whole series."""

    series_id: Optional[int]
    income_ids: list[int] = field(default_factory=list)


class IncomeService:
    """Service for managing incomes and income series."""

    def __init__(self, db: Database):
        """Initialize income service.

        Args:
            db: Database instance
        """
        self.db = db
        self.coordinator = SeriesEditCoordinator(db)

    def add_income(self, draft: IncomeDraft) -> AddedIncome:
        """Add an income.

        A draft without a repeat frequency creates one standalone income.
        Otherwise a series is created from the draft date to its end date and
        an income is generated for every occurrence.

        Args:
            draft: Values entered by the user

        Returns:
            AddedIncome with the series ID (None for a standalone income) and
            the IDs of the incomes created

        Raises:
            ValidationError: If the draft is invalid
        """
        validate_income_draft(draft)

        if not draft.rule.repeats:
            income_id = self.db.create_income(
                source=draft.source.strip(),
                amount=draft.amount,
                date=to_day(draft.date),
                is_planned=draft.is_planned,
            )
            logger.info("Added standalone income %d on %s", income_id, to_day(draft.date))
            return AddedIncome(series_id=None, income_ids=[income_id])

        series_id = self.coordinator.create_series(draft)
        income_ids = [i.id for i in self.db.list_incomes(series_id=series_id)]
        return AddedIncome(series_id=series_id, income_ids=income_ids)

    def get_income(self, income_id: int) -> Optional[IncomeEntity]:
        """Get income by ID.

        Args:
            income_id: Income ID

        Returns:
            Income entity or None if not found
        """
        return self.db.get_income(income_id)

    def get_series(self, series_id: int) -> Optional[IncomeSeriesEntity]:
        """Get income series by ID."""
        return self.db.get_income_series(series_id)

    def list_incomes(
        self,
        series_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        standalone: bool = False,
    ) -> list[IncomeEntity]:
        """List incomes ordered by date.

        Args:
            series_id: Optional series filter
            start_date: Optional start date filter
            end_date: Optional end date filter
            standalone: If True, only list incomes that belong to no series

        Returns:
            List of income entities
        """
        return self.db.list_incomes(
            series_id=series_id, start_date=start_date, end_date=end_date, standalone=standalone
        )

    def list_series(self) -> list[IncomeSeriesEntity]:
        """List all income series."""
        return self.db.list_income_series()

    def scheduled_dates(self, series_id: int) -> list[date]:
        """Return the dates a series' rule produces, regardless of stored incomes.

        Raises:
            NotFoundError: If the series doesn't exist
        """
        series = self.db.get_income_series(series_id)
        if series is None:
            raise NotFoundError(series_not_found(series_id))
        return occurrences(series)

    def total_income(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        planned: Optional[bool] = None,
    ) -> Decimal:
        """Sum incomes in a date range.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            planned: If set, only sum planned (True) or actual (False) incomes
        """
        incomes = self.db.list_incomes(start_date=start_date, end_date=end_date)
        return sum(
            (i.amount for i in incomes if planned is None or i.is_planned == planned),
            Decimal("0"),
        )

    def delete_income(self, income_id: int) -> None:
        """Delete a single income.

        Raises:
            NotFoundError: If the income doesn't exist
        """
        if self.db.get_income(income_id) is None:
            raise NotFoundError(income_not_found(income_id))
        self.db.delete_income(income_id)

    def delete_series(self, series_id: int) -> int:
        """Delete a series together with all of its incomes.

        Returns:
            Number of incomes deleted

        Raises:
            NotFoundError: If the series doesn't exist
        """
        if self.db.get_income_series(series_id) is None:
            raise NotFoundError(series_not_found(series_id))

        with self.db.transaction():
            count = len(self.db.list_incomes(series_id=series_id))
            self.db.delete_income_series(series_id)
        logger.info("Deleted income series %d and %d incomes", series_id, count)
        return count
