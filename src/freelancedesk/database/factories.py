"""Database factory functions for creating database instances."""

from pathlib import Path
from typing import Optional

from freelancedesk.config import get_settings
from freelancedesk.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FREELANCEDESK_DB_PATH
            environment variable, then defaults to ~/.freelancedesk/freelancedesk.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = get_settings().db_path

    # Create the parent directory for the default location on first use
    Path(database_path).expanduser().parent.mkdir(parents=True, exist_ok=True)

    database_url = f"sqlite:///{Path(database_path).expanduser()}"
    return SQLAlchemyDatabase(database_url)
