"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from tillbook.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "TILLBOOK_DB_PATH"
DATABASE_URL_ENV = "TILLBOOK_DATABASE_URL"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks TILLBOOK_DB_PATH
            environment variable, then defaults to ~/.tillbook/tillbook.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        db_dir = Path.home() / ".tillbook"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "tillbook.db")

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> SQLAlchemyDatabase:
    """Create a database from a SQLAlchemy URL, falling back to SQLite.

    Resolution order: explicit URL, TILLBOOK_DATABASE_URL, then the SQLite
    file rules of create_sqlite_database.
    """
    if database_url is None and database_path is None:
        database_url = os.environ.get(DATABASE_URL_ENV)
    if database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path)
