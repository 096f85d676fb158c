"""Database layer for budgetseries application."""

from budgetseries.database.base import Database
from budgetseries.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
