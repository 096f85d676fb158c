"""Tests for SeriesEditCoordinator."""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from budgetseries.domain.coordinator import EditScope
from budgetseries.domain.entities import Frequency, IncomeDraft, RecurrenceRule
from budgetseries.domain.errors import NotFoundError, ValidationError
from budgetseries.domain.recurrence import occurrences

FIRST_OF_MONTH = RecurrenceRule(frequency=Frequency.MONTHLY, monthly_day_of_month=1)


def salary_draft(**overrides):
    values = dict(
        source="Salary",
        amount=Decimal("3000.00"),
        date=date(2026, 1, 1),
        rule=FIRST_OF_MONTH,
        end_date=date(2026, 12, 31),
    )
    values.update(overrides)
    return IncomeDraft(**values)


@pytest.fixture
def series(coordinator, temp_db):
    """Monthly on the 1st, 1 January through 31 December 2026."""
    series_id = coordinator.create_series(salary_draft())
    return temp_db.get_income_series(series_id)


def income_on(db, series_id, day):
    matches = db.list_incomes(series_id=series_id, start_date=day, end_date=day)
    assert len(matches) == 1
    return matches[0]


def all_dates(db, *series_ids):
    return sorted(i.date for sid in series_ids for i in db.list_incomes(series_id=sid))


class TestCreateSeries:
    """Tests for creating series."""

    def test_generates_one_income_per_occurrence(self, series, temp_db):
        incomes = temp_db.list_incomes(series_id=series.id)
        assert [i.date for i in incomes] == [date(2026, m, 1) for m in range(1, 13)]
        assert all(i.amount == Decimal("3000.00") for i in incomes)
        assert not any(i.is_exception for i in incomes)

    def test_series_starts_on_draft_date(self, series):
        assert series.start_date == date(2026, 1, 1)
        assert series.end_date == date(2026, 12, 31)

    def test_requires_end_date(self, coordinator, temp_db):
        with pytest.raises(ValidationError):
            coordinator.create_series(salary_draft(end_date=None))
        assert temp_db.list_income_series() == []

    def test_rejects_end_before_start(self, coordinator, temp_db):
        with pytest.raises(ValidationError):
            coordinator.create_series(salary_draft(end_date=date(2025, 12, 31)))
        assert temp_db.list_income_series() == []

    def test_rejects_non_repeating_rule(self, coordinator):
        with pytest.raises(ValidationError):
            coordinator.create_series(salary_draft(rule=RecurrenceRule()))


class TestRegenerate:
    """Tests for regenerating a series."""

    def test_regenerate_is_idempotent(self, coordinator, series, temp_db):
        before = all_dates(temp_db, series.id)
        coordinator.regenerate(series.id)
        coordinator.regenerate(series.id)
        assert all_dates(temp_db, series.id) == before

    def test_regenerate_preserves_exception(self, coordinator, series, temp_db):
        march = income_on(temp_db, series.id, date(2026, 3, 1))
        coordinator.apply_edit_scope(
            march.id,
            salary_draft(amount=Decimal("3500.00"), date=date(2026, 3, 1)),
            EditScope.JUST_THIS,
        )

        coordinator.regenerate(series.id)

        incomes = temp_db.list_incomes(series_id=series.id)
        assert len(incomes) == 12
        kept = income_on(temp_db, series.id, date(2026, 3, 1))
        assert kept.id == march.id
        assert kept.amount == Decimal("3500.00")
        assert kept.is_exception
        assert all(i.amount == Decimal("3000.00") for i in incomes if i.id != march.id)

    def test_regenerate_without_preserving_discards_exceptions(self, coordinator, series, temp_db):
        march = income_on(temp_db, series.id, date(2026, 3, 1))
        coordinator.apply_edit_scope(march.id, salary_draft(amount=Decimal("3500.00"), date=date(2026, 3, 1)), EditScope.JUST_THIS)

        coordinator.regenerate(series.id, preserve_exceptions=False)

        incomes = temp_db.list_incomes(series_id=series.id)
        assert len(incomes) == 12
        assert temp_db.get_income(march.id) is None
        assert all(i.amount == Decimal("3000.00") and not i.is_exception for i in incomes)

    def test_regenerate_missing_series(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.regenerate(9999)

    def test_failed_regeneration_is_rolled_back(self, coordinator, series, temp_db, monkeypatch):
        before = [(i.id, i.date) for i in temp_db.list_incomes(series_id=series.id)]
        original_create = temp_db.create_income
        calls = {"count": 0}

        def failing_create(*args, **kwargs):
            calls["count"] += 1
            if calls["count"] == 3:
                raise RuntimeError("disk full")
            return original_create(*args, **kwargs)

        monkeypatch.setattr(temp_db, "create_income", failing_create)

        with pytest.raises(RuntimeError):
            coordinator.regenerate(series.id)

        assert [(i.id, i.date) for i in temp_db.list_incomes(series_id=series.id)] == before


class TestJustThis:
    """Tests for editing a single income of a series."""

    def test_updates_only_the_target(self, coordinator, series, temp_db):
        may = income_on(temp_db, series.id, date(2026, 5, 1))
        outcome = coordinator.apply_edit_scope(
            may.id,
            salary_draft(source="Salary + bonus", amount=Decimal("4200.00"), date=date(2026, 5, 1)),
            EditScope.JUST_THIS,
        )

        assert outcome.applied_scope is EditScope.JUST_THIS
        assert outcome.income_id == may.id
        edited = temp_db.get_income(may.id)
        assert edited.source == "Salary + bonus"
        assert edited.amount == Decimal("4200.00")
        assert edited.is_exception
        assert edited.series_id == series.id

        unchanged = temp_db.get_income_series(series.id)
        assert unchanged == series
        assert sum(1 for i in temp_db.list_incomes(series_id=series.id) if i.is_exception) == 1


class TestAllInSeries:
    """Tests for editing a whole series."""

    def test_updates_every_income(self, coordinator, series, temp_db):
        june = income_on(temp_db, series.id, date(2026, 6, 1))
        outcome = coordinator.apply_edit_scope(
            june.id,
            salary_draft(amount=Decimal("3200.00"), date=date(2026, 6, 1)),
            EditScope.ALL_IN_SERIES,
        )

        assert outcome.applied_scope is EditScope.ALL_IN_SERIES
        assert outcome.series_id == series.id
        incomes = temp_db.list_incomes(series_id=series.id)
        assert len(incomes) == 12
        assert all(i.amount == Decimal("3200.00") for i in incomes)
        assert temp_db.get_income(outcome.income_id).date == date(2026, 6, 1)

    def test_keeps_start_date(self, coordinator, series, temp_db):
        june = income_on(temp_db, series.id, date(2026, 6, 1))
        coordinator.apply_edit_scope(
            june.id,
            salary_draft(date=date(2026, 6, 1), end_date=date(2026, 9, 30)),
            EditScope.ALL_IN_SERIES,
        )

        updated = temp_db.get_income_series(series.id)
        assert updated.start_date == date(2026, 1, 1)
        assert updated.end_date == date(2026, 9, 30)
        assert all_dates(temp_db, series.id) == [date(2026, m, 1) for m in range(1, 10)]

    def test_changes_rule_and_keeps_exceptions(self, coordinator, series, temp_db):
        march = income_on(temp_db, series.id, date(2026, 3, 1))
        coordinator.apply_edit_scope(march.id, salary_draft(amount=Decimal("10.00"), date=date(2026, 3, 1)), EditScope.JUST_THIS)
        june = income_on(temp_db, series.id, date(2026, 6, 1))

        rule = RecurrenceRule(frequency=Frequency.MONTHLY, monthly_is_last_day=True)
        coordinator.apply_edit_scope(june.id, salary_draft(date=date(2026, 6, 1), rule=rule), EditScope.ALL_IN_SERIES)

        incomes = temp_db.list_incomes(series_id=series.id)
        assert temp_db.get_income(march.id).amount == Decimal("10.00")
        generated = [i.date for i in incomes if not i.is_exception]
        assert generated == occurrences(temp_db.get_income_series(series.id))
        assert date(2026, 2, 28) in generated

    def test_end_before_series_start_is_rejected(self, coordinator, series, temp_db):
        june = income_on(temp_db, series.id, date(2026, 6, 1))
        draft = salary_draft(date=date(2025, 6, 1), end_date=date(2025, 12, 31))

        with pytest.raises(ValidationError):
            coordinator.apply_edit_scope(june.id, draft, EditScope.ALL_IN_SERIES)

        assert temp_db.get_income_series(series.id) == series
        assert len(temp_db.list_incomes(series_id=series.id)) == 12

    def test_non_repeating_draft_is_rejected(self, coordinator, series, temp_db):
        june = income_on(temp_db, series.id, date(2026, 6, 1))
        with pytest.raises(ValidationError):
            coordinator.apply_edit_scope(june.id, salary_draft(rule=RecurrenceRule()), EditScope.ALL_IN_SERIES)


class TestThisAndFuture:
    """Tests for splitting a series."""

    def test_split_preserves_every_date(self, coordinator, series, temp_db):
        july = income_on(temp_db, series.id, date(2026, 7, 1))
        original_dates = all_dates(temp_db, series.id)

        outcome = coordinator.apply_edit_scope(
            july.id,
            salary_draft(amount=Decimal("3500.00"), date=date(2026, 7, 1)),
            EditScope.THIS_AND_FUTURE,
        )

        assert outcome.applied_scope is EditScope.THIS_AND_FUTURE
        assert outcome.past_series_id == series.id
        assert not outcome.degenerate_split

        past = temp_db.get_income_series(series.id)
        future = temp_db.get_income_series(outcome.series_id)
        assert past.start_date == date(2026, 1, 1)
        assert past.end_date == date(2026, 6, 30)
        assert future.start_date == date(2026, 7, 1)
        assert future.end_date == date(2026, 12, 31)

        past_dates = all_dates(temp_db, past.id)
        future_dates = all_dates(temp_db, future.id)
        assert past_dates == [date(2026, m, 1) for m in range(1, 7)]
        assert future_dates == [date(2026, m, 1) for m in range(7, 13)]
        assert sorted(past_dates + future_dates) == original_dates

        assert all(i.amount == Decimal("3000.00") for i in temp_db.list_incomes(series_id=past.id))
        assert all(i.amount == Decimal("3500.00") for i in temp_db.list_incomes(series_id=future.id))
        assert temp_db.get_income(outcome.income_id).date == date(2026, 7, 1)

    def test_split_moves_future_exceptions(self, coordinator, series, temp_db):
        september = income_on(temp_db, series.id, date(2026, 9, 1))
        march = income_on(temp_db, series.id, date(2026, 3, 1))
        for income in (september, march):
            coordinator.apply_edit_scope(
                income.id, salary_draft(amount=Decimal("5000.00"), date=income.date), EditScope.JUST_THIS
            )
        july = income_on(temp_db, series.id, date(2026, 7, 1))

        outcome = coordinator.apply_edit_scope(
            july.id,
            salary_draft(amount=Decimal("3500.00"), date=date(2026, 7, 1)),
            EditScope.THIS_AND_FUTURE,
        )

        moved = temp_db.get_income(september.id)
        assert moved.series_id == outcome.series_id
        assert moved.amount == Decimal("5000.00")
        assert moved.is_exception

        stayed = temp_db.get_income(march.id)
        assert stayed.series_id == series.id
        assert stayed.amount == Decimal("5000.00")

        assert len(temp_db.list_incomes(series_id=series.id)) == 6
        assert len(temp_db.list_incomes(series_id=outcome.series_id)) == 6

    def test_split_at_first_income_replaces_series(self, coordinator, series, temp_db):
        january = income_on(temp_db, series.id, date(2026, 1, 1))

        outcome = coordinator.apply_edit_scope(
            january.id,
            salary_draft(amount=Decimal("3100.00"), date=date(2026, 1, 1)),
            EditScope.THIS_AND_FUTURE,
        )

        assert outcome.degenerate_split
        assert outcome.past_series_id is None
        assert temp_db.get_income_series(series.id) is None
        assert [s.id for s in temp_db.list_income_series()] == [outcome.series_id]

        future_incomes = temp_db.list_incomes(series_id=outcome.series_id)
        assert [i.date for i in future_incomes] == [date(2026, m, 1) for m in range(1, 13)]
        assert all(i.amount == Decimal("3100.00") for i in future_incomes)

    def test_split_at_first_income_then_regenerate_keeps_one_income_per_day(self, coordinator, series, temp_db):
        january = income_on(temp_db, series.id, date(2026, 1, 1))

        outcome = coordinator.apply_edit_scope(
            january.id,
            salary_draft(amount=Decimal("3100.00"), date=date(2026, 1, 1)),
            EditScope.THIS_AND_FUTURE,
        )
        for s in temp_db.list_income_series():
            coordinator.regenerate(s.id)

        on_split_day = temp_db.list_incomes(start_date=date(2026, 1, 1), end_date=date(2026, 1, 1))
        assert len(on_split_day) == 1
        assert on_split_day[0].series_id == outcome.series_id
        assert len(temp_db.list_incomes()) == 12

    def test_split_at_first_income_keeps_exception_moved_earlier(self, coordinator, series, temp_db):
        january = income_on(temp_db, series.id, date(2026, 1, 1))
        coordinator.apply_edit_scope(
            january.id,
            salary_draft(date=date(2025, 12, 30), rule=RecurrenceRule(), end_date=None),
            EditScope.JUST_THIS,
        )
        february = income_on(temp_db, series.id, date(2026, 2, 1))

        outcome = coordinator.apply_edit_scope(
            february.id,
            salary_draft(amount=Decimal("3100.00"), date=date(2026, 1, 1)),
            EditScope.THIS_AND_FUTURE,
        )

        assert outcome.degenerate_split
        kept = temp_db.get_income(january.id)
        assert kept.series_id == outcome.series_id
        assert kept.date == date(2025, 12, 30)
        assert kept.is_exception
        assert len(temp_db.list_incomes()) == 13

    def test_split_after_series_end_edits_just_this(self, coordinator, temp_db):
        series_id = coordinator.create_series(salary_draft(end_date=date(2026, 6, 30)))
        june = income_on(temp_db, series_id, date(2026, 6, 1))

        outcome = coordinator.apply_edit_scope(
            june.id,
            salary_draft(date=date(2026, 7, 15), end_date=date(2026, 12, 31)),
            EditScope.THIS_AND_FUTURE,
        )

        assert outcome.applied_scope is EditScope.JUST_THIS
        assert len(temp_db.list_income_series()) == 1
        edited = temp_db.get_income(june.id)
        assert edited.date == date(2026, 7, 15)
        assert edited.is_exception

    def test_invalid_end_date_leaves_series_untouched(self, coordinator, series, temp_db):
        july = income_on(temp_db, series.id, date(2026, 7, 1))
        before = [(i.id, i.date, i.amount) for i in temp_db.list_incomes(series_id=series.id)]

        with pytest.raises(ValidationError):
            coordinator.apply_edit_scope(
                july.id,
                salary_draft(date=date(2026, 7, 1), end_date=date(2026, 6, 1)),
                EditScope.THIS_AND_FUTURE,
            )
        with pytest.raises(ValidationError):
            coordinator.apply_edit_scope(
                july.id,
                salary_draft(date=date(2026, 7, 1), end_date=None),
                EditScope.THIS_AND_FUTURE,
            )

        assert temp_db.get_income_series(series.id) == series
        assert len(temp_db.list_income_series()) == 1
        assert [(i.id, i.date, i.amount) for i in temp_db.list_incomes(series_id=series.id)] == before


class TestStandaloneIncome:
    """Tests for edits of incomes that belong to no series."""

    @pytest.fixture
    def standalone(self, temp_db):
        income_id = temp_db.create_income(source="Gift", amount=Decimal("200.00"), date=date(2026, 3, 1))
        return temp_db.get_income(income_id)

    def test_edit_in_place(self, coordinator, standalone, temp_db):
        outcome = coordinator.apply_edit_scope(
            standalone.id,
            IncomeDraft(source="Birthday gift", amount=Decimal("250.00"), date=date(2026, 3, 2)),
            EditScope.ALL_IN_SERIES,
        )

        assert outcome.applied_scope is None
        assert outcome.income_id == standalone.id
        edited = temp_db.get_income(standalone.id)
        assert edited.source == "Birthday gift"
        assert edited.date == date(2026, 3, 2)
        assert edited.series_id is None
        assert not edited.is_exception

    def test_convert_single_to_series(self, coordinator, standalone, temp_db):
        draft = salary_draft(date=date(2026, 3, 1), end_date=date(2026, 6, 30))
        series_id = coordinator.convert_single_to_series(standalone.id, draft)

        assert temp_db.get_income(standalone.id) is None
        assert all_dates(temp_db, series_id) == [date(2026, m, 1) for m in range(3, 7)]
        assert temp_db.list_incomes(standalone=True) == []

    def test_repeating_edit_converts(self, coordinator, standalone, temp_db):
        draft = salary_draft(date=date(2026, 3, 1), end_date=date(2026, 4, 30))
        outcome = coordinator.apply_edit_scope(standalone.id, draft, EditScope.JUST_THIS)

        assert outcome.applied_scope is None
        assert outcome.series_id is not None
        assert all_dates(temp_db, outcome.series_id) == [date(2026, 3, 1), date(2026, 4, 1)]

    def test_convert_income_already_in_series(self, coordinator, series, temp_db):
        march = income_on(temp_db, series.id, date(2026, 3, 1))
        with pytest.raises(ValidationError):
            coordinator.convert_single_to_series(march.id, salary_draft())

    def test_missing_income(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.apply_edit_scope(9999, salary_draft(), EditScope.JUST_THIS)

    def test_invalid_draft_changes_nothing(self, coordinator, standalone, temp_db):
        with pytest.raises(ValidationError):
            coordinator.apply_edit_scope(standalone.id, replace(salary_draft(), source="  "), EditScope.JUST_THIS)
        assert temp_db.get_income(standalone.id) == standalone
