"""SQLAlchemy models for budgetseries database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class IncomeSeries(Base):
    """Recurring income series model."""

    __tablename__ = "income_series"

    id = Column(Integer, primary_key=True)
    source = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    is_planned = Column(Boolean, default=False, nullable=False)

    # Frequency is stored as its string value and decoded with a fallback
    frequency = Column(String, default="none", nullable=False)
    interval = Column(Integer, default=1, nullable=False)
    weekly_weekday = Column(Integer, default=6, nullable=False)
    monthly_day_of_month = Column(Integer, default=15, nullable=False)
    monthly_is_last_day = Column(Boolean, default=False, nullable=False)
    yearly_month = Column(Integer, default=1, nullable=False)
    yearly_day_of_month = Column(Integer, default=15, nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    incomes = relationship("Income", back_populates="series", cascade="all, delete")


class Income(Base):
    """Income model."""

    __tablename__ = "incomes"

    id = Column(Integer, primary_key=True)
    source = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    date = Column(Date, nullable=False)
    is_planned = Column(Boolean, default=False, nullable=False)
    is_exception = Column(Boolean, default=False, nullable=False)
    series_id = Column(Integer, ForeignKey("income_series.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    series = relationship("IncomeSeries", back_populates="incomes")


class Preset(Base):
    """Recurring expense preset model."""

    __tablename__ = "presets"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    planned_amount = Column(Numeric(10, 2), nullable=False)

    frequency = Column(String, default="monthly", nullable=False)
    interval = Column(Integer, default=1, nullable=False)
    weekly_weekday = Column(Integer, default=6, nullable=False)
    monthly_day_of_month = Column(Integer, default=15, nullable=False)
    monthly_is_last_day = Column(Boolean, default=False, nullable=False)
    yearly_month = Column(Integer, default=1, nullable=False)
    yearly_day_of_month = Column(Integer, default=15, nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    budget_links = relationship("BudgetPresetLink", back_populates="preset", cascade="all, delete-orphan")


class Budget(Base):
    """Budget period model."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    preset_links = relationship("BudgetPresetLink", back_populates="budget", cascade="all, delete-orphan")


class BudgetPresetLink(Base):
    """Link between a budget and a preset it materializes."""

    __tablename__ = "budget_preset_links"

    id = Column(Integer, primary_key=True)
    budget_id = Column(Integer, ForeignKey("budgets.id"), nullable=False)
    preset_id = Column(Integer, ForeignKey("presets.id"), nullable=False)

    __table_args__ = (UniqueConstraint("budget_id", "preset_id", name="uq_budget_preset"),)

    # Relationships
    budget = relationship("Budget", back_populates="preset_links")
    preset = relationship("Preset", back_populates="budget_links")


class PlannedExpense(Base):
    """Planned expense model."""

    __tablename__ = "planned_expenses"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    planned_amount = Column(Numeric(10, 2), nullable=False)
    actual_amount = Column(Numeric(10, 2), default=0, nullable=False)
    expense_date = Column(Date, nullable=False)
    source_preset_id = Column(Integer, ForeignKey("presets.id"), nullable=True)
    source_budget_id = Column(Integer, ForeignKey("budgets.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
