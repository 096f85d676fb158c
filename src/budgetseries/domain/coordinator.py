"""Series edit coordinator.

Reconciles edits to an income series, or to one of its incomes, against the
incomes already stored for it. Incomes flagged ``is_exception`` were edited
by hand and survive every regeneration.

Each public operation runs inside a single ``Database.transaction()``: either
all deletes and inserts of one reconciliation are committed, or none are.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from budgetseries.database.base import Database
from budgetseries.domain.entities import Income, IncomeDraft, IncomeSeries
from budgetseries.domain.errors import (
    DegenerateSplitError,
    NotFoundError,
    ValidationError,
    end_before_start,
    income_not_found,
    series_not_found,
)
from budgetseries.domain.recurrence import occurrences
from budgetseries.domain.validation import validate_income_draft
from budgetseries.utils.date_helpers import day_before, to_day

logger = logging.getLogger(__name__)


class EditScope(str, Enum):
    """Which incomes of a series an edit applies to."""

    JUST_THIS = "just_this"
    THIS_AND_FUTURE = "this_and_future"
    ALL_IN_SERIES = "all_in_series"


@dataclass(frozen=True)
class EditOutcome:
    """What an edit ended up doing.

    ``applied_scope`` is None for edits of a standalone income, and differs
    from the requested scope when a this-and-future edit had nothing in the
    future to split. ``series_id`` is the series now holding the edited
    values; ``past_series_id`` is the shortened original after a split, or
    None when the split started at the first occurrence and the original
    series was deleted.
    """

    applied_scope: Optional[EditScope]
    income_id: Optional[int] = None
    series_id: Optional[int] = None
    past_series_id: Optional[int] = None
    degenerate_split: bool = False


class SeriesEditCoordinator:
    """Create, regenerate, split and edit income series."""

    def __init__(self, db: Database):
        """Initialize series edit coordinator.

        Args:
            db: Database instance
        """
        self.db = db

    def create_series(self, draft: IncomeDraft) -> int:
        """Create a series starting on the draft date and generate its incomes.

        Returns:
            Series ID

        Raises:
            ValidationError: If the draft is invalid or does not repeat
        """
        validate_income_draft(draft, require_end_date=True)
        if not draft.rule.repeats:
            raise ValidationError("A series requires a repeat frequency")

        with self.db.transaction():
            series_id = self._insert_series(draft, to_day(draft.date))
            self._regenerate(self._require_series(series_id), preserve_exceptions=True)
        return series_id

    def regenerate(self, series_id: int, preserve_exceptions: bool = True) -> list[int]:
        """Rebuild the stored incomes of a series from its rule.

        Args:
            series_id: Series to regenerate
            preserve_exceptions: Keep incomes flagged as exceptions and skip
                generating their days

        Returns:
            IDs of the incomes created

        Raises:
            NotFoundError: If the series doesn't exist
        """
        with self.db.transaction():
            series = self._require_series(series_id)
            return self._regenerate(series, preserve_exceptions)

    def convert_single_to_series(self, income_id: int, draft: IncomeDraft) -> int:
        """Replace a standalone income by a new series built from the draft.

        Returns:
            ID of the new series

        Raises:
            NotFoundError: If the income doesn't exist
            ValidationError: If the income already belongs to a series or the
                draft does not describe a valid repeating schedule
        """
        income = self._require_income(income_id)
        if income.series_id is not None:
            raise ValidationError(f"Income {income_id} already belongs to series {income.series_id}")
        validate_income_draft(draft, require_end_date=True)
        if not draft.rule.repeats:
            raise ValidationError("A series requires a repeat frequency")

        with self.db.transaction():
            series_id = self._convert(income, draft)
        return series_id

    def apply_edit_scope(self, income_id: int, draft: IncomeDraft, scope: EditScope) -> EditOutcome:
        """Apply edited values to an income and, depending on scope, its series.

        Args:
            income_id: The income the user edited
            draft: The edited values; ``draft.date`` is the split day for
                ``THIS_AND_FUTURE``
            scope: Which incomes of the series the edit applies to

        Returns:
            EditOutcome describing what was changed

        Raises:
            NotFoundError: If the income or its series doesn't exist
            ValidationError: If the edited values are invalid; nothing is changed
        """
        income = self._require_income(income_id)
        validate_income_draft(draft)

        if income.series_id is None:
            with self.db.transaction():
                return self._apply_standalone(income, draft)

        series = self._require_series(income.series_id)
        if scope is not EditScope.JUST_THIS:
            self._validate_series_edit(series, draft, scope)

        with self.db.transaction():
            if scope is EditScope.JUST_THIS:
                return self._apply_just_this(income, draft)
            if scope is EditScope.ALL_IN_SERIES:
                return self._apply_all_in_series(income, series, draft)
            return self._apply_this_and_future(income, series, draft)

    # Lookups

    def _require_income(self, income_id: int) -> Income:
        income = self.db.get_income(income_id)
        if income is None:
            raise NotFoundError(income_not_found(income_id))
        return income

    def _require_series(self, series_id: int) -> IncomeSeries:
        series = self.db.get_income_series(series_id)
        if series is None:
            raise NotFoundError(series_not_found(series_id))
        return series

    def _validate_series_edit(self, series: IncomeSeries, draft: IncomeDraft, scope: EditScope) -> None:
        if not draft.rule.repeats:
            raise ValidationError(
                "Editing a whole series requires a repeat frequency; edit just this income instead"
            )
        if scope is EditScope.ALL_IN_SERIES and to_day(draft.end_date) < series.start_date:
            raise ValidationError(end_before_start(series.start_date, to_day(draft.end_date)))

    # Building blocks

    def _insert_series(self, draft: IncomeDraft, start_date: date) -> int:
        series_id = self.db.create_income_series(
            source=draft.source.strip(),
            amount=draft.amount,
            is_planned=draft.is_planned,
            rule=draft.rule.clamped(),
            start_date=start_date,
            end_date=to_day(draft.end_date),
        )
        logger.info("Created income series %d starting %s", series_id, start_date)
        return series_id

    def _regenerate(self, series: IncomeSeries, preserve_exceptions: bool) -> list[int]:
        existing = self.db.list_incomes(series_id=series.id)

        exception_days: set[date] = set()
        if preserve_exceptions:
            exception_days = {income.date for income in existing if income.is_exception}

        for income in existing:
            if preserve_exceptions and income.is_exception:
                continue
            self.db.delete_income(income.id)

        created = []
        for day in occurrences(series):
            if day in exception_days:
                continue
            created.append(
                self.db.create_income(
                    source=series.source,
                    amount=series.amount,
                    date=day,
                    is_planned=series.is_planned,
                    is_exception=False,
                    series_id=series.id,
                )
            )

        logger.info(
            "Regenerated series %d: %d incomes, %d exceptions kept",
            series.id,
            len(created),
            len(exception_days),
        )
        return created

    def _update_in_place(self, income: Income, draft: IncomeDraft, is_exception: bool) -> None:
        self.db.update_income(
            income.id,
            source=draft.source.strip(),
            amount=draft.amount,
            date=to_day(draft.date),
            is_planned=draft.is_planned,
            is_exception=is_exception,
        )

    def _convert(self, income: Income, draft: IncomeDraft) -> int:
        series_id = self._insert_series(draft, to_day(draft.date))
        self._regenerate(self._require_series(series_id), preserve_exceptions=True)
        self.db.delete_income(income.id)
        logger.info("Converted income %d into series %d", income.id, series_id)
        return series_id

    def _edited_income_id(self, income_id: int, series_id: int, day: date) -> Optional[int]:
        """Return the edited income, or the regenerated income replacing it."""
        if self.db.get_income(income_id) is not None:
            return income_id
        same_day = self.db.list_incomes(series_id=series_id, start_date=day, end_date=day)
        return same_day[0].id if same_day else None

    def _past_series_end(self, series: IncomeSeries, split_day: date) -> date:
        """Return the new end of the series being cut before split_day."""
        past_end = day_before(split_day)
        if past_end < series.start_date:
            raise DegenerateSplitError(
                f"Series {series.id} starts {series.start_date}, nothing remains before {split_day}"
            )
        return past_end

    # Scopes

    def _apply_standalone(self, income: Income, draft: IncomeDraft) -> EditOutcome:
        if draft.rule.repeats:
            series_id = self._convert(income, draft)
            return EditOutcome(applied_scope=None, series_id=series_id)

        self._update_in_place(income, draft, is_exception=income.is_exception)
        return EditOutcome(applied_scope=None, income_id=income.id)

    def _apply_just_this(self, income: Income, draft: IncomeDraft) -> EditOutcome:
        self._update_in_place(income, draft, is_exception=True)
        logger.debug("Income %d marked as exception of series %s", income.id, income.series_id)
        return EditOutcome(applied_scope=EditScope.JUST_THIS, income_id=income.id, series_id=income.series_id)

    def _apply_all_in_series(self, income: Income, series: IncomeSeries, draft: IncomeDraft) -> EditOutcome:
        # The start date is the historical anchor and is never moved here.
        self.db.update_income_series(
            series.id,
            source=draft.source.strip(),
            amount=draft.amount,
            is_planned=draft.is_planned,
            rule=draft.rule.clamped(),
            end_date=to_day(draft.end_date),
        )
        self._regenerate(self._require_series(series.id), preserve_exceptions=True)

        return EditOutcome(
            applied_scope=EditScope.ALL_IN_SERIES,
            income_id=self._edited_income_id(income.id, series.id, income.date),
            series_id=series.id,
        )

    def _apply_this_and_future(self, income: Income, series: IncomeSeries, draft: IncomeDraft) -> EditOutcome:
        split_day = to_day(draft.date)
        if split_day > series.end_date:
            logger.debug("Split day %s is after series %d end, editing just this income", split_day, series.id)
            return self._apply_just_this(income, draft)

        degenerate = False
        try:
            past_end = self._past_series_end(series, split_day)
        except DegenerateSplitError as e:
            logger.warning("%s; folding it into the new series", e)
            degenerate = True
        else:
            self.db.update_income_series(series.id, end_date=past_end)

        future_id = self._insert_series(draft, split_day)

        moved = 0
        for item in self.db.list_incomes(series_id=series.id, start_date=split_day):
            if item.is_exception:
                self.db.update_income(item.id, series_id=future_id)
                moved += 1
            else:
                self.db.delete_income(item.id)

        if degenerate:
            # Nothing of the original schedule remains before the split day;
            # any exception left behind was moved there by hand.
            for item in self.db.list_incomes(series_id=series.id):
                self.db.update_income(item.id, series_id=future_id)
                moved += 1
            self.db.delete_income_series(series.id)
        else:
            self._regenerate(self._require_series(series.id), preserve_exceptions=True)
        self._regenerate(self._require_series(future_id), preserve_exceptions=True)

        logger.info(
            "Split series %d at %s into %d (%d exceptions moved)",
            series.id,
            split_day,
            future_id,
            moved,
        )
        return EditOutcome(
            applied_scope=EditScope.THIS_AND_FUTURE,
            income_id=self._edited_income_id(income.id, future_id, split_day),
            series_id=future_id,
            past_series_id=None if degenerate else series.id,
            degenerate_split=degenerate,
        )
