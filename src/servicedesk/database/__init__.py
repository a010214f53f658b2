"""Database layer for servicedesk application."""

from servicedesk.database.base import Database
from servicedesk.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
