"""Database layer for freelancedesk application."""

from freelancedesk.database.base import Database
from freelancedesk.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
