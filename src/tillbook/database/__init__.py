"""Database layer for tillbook application."""

from tillbook.database.base import Database, UnitOfWork
from tillbook.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "UnitOfWork", "create_database", "create_sqlite_database"]
