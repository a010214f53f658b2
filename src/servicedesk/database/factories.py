"""Database factory functions for creating database instances."""

import os
from typing import Optional

from servicedesk.config import DEFAULT_DB_FILE, get_home_dir
from servicedesk.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks SERVICEDESK_DB_PATH
            environment variable, then defaults to ~/.servicedesk/servicedesk.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("SERVICEDESK_DB_PATH")

    if database_path is None:
        database_path = str(get_home_dir() / DEFAULT_DB_FILE)

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
