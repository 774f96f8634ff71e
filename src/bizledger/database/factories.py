"""Database factory functions for creating database instances."""

from typing import Optional

from bizledger.config.settings import Settings
from bizledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_database(settings: Settings, database_url: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database instance from settings.

    Args:
        settings: Process settings
        database_url: Optional URL or SQLite path that overrides the settings

    Returns:
        SQLAlchemyDatabase instance
    """
    return SQLAlchemyDatabase(settings.database_url_for(database_url))


def create_sqlite_database(database_path: str) -> SQLAlchemyDatabase:
    """Create a SQLite database instance for a file path.

    Args:
        database_path: Path to SQLite database file

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
