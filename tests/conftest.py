"""Shared pytest fixtures for budgetseries tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from budgetseries.database.factories import create_sqlite_database
from budgetseries.domain.budget import BudgetService, PresetService
from budgetseries.domain.coordinator import SeriesEditCoordinator
from budgetseries.domain.entities import Frequency, IncomeDraft, RecurrenceRule
from budgetseries.domain.income import IncomeService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def income_service(temp_db):
    """Create an IncomeService with a temporary database."""
    return IncomeService(temp_db)


@pytest.fixture
def coordinator(temp_db):
    """Create a SeriesEditCoordinator with a temporary database."""
    return SeriesEditCoordinator(temp_db)


@pytest.fixture
def preset_service(temp_db):
    """Create a PresetService with a temporary database."""
    return PresetService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db)


@pytest.fixture
def monthly_rule():
    """Monthly on the 15th."""
    return RecurrenceRule(frequency=Frequency.MONTHLY, monthly_day_of_month=15)


@pytest.fixture
def monthly_series(coordinator, temp_db, monthly_rule):
    """A monthly 'Salary' series on the 15th, January through December 2026."""
    draft = IncomeDraft(
        source="Salary",
        amount=Decimal("3000.00"),
        date=date(2026, 1, 15),
        rule=monthly_rule,
        end_date=date(2026, 12, 31),
    )
    series_id = coordinator.create_series(draft)
    return temp_db.get_income_series(series_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
