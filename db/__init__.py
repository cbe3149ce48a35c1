"""
Database package for the typing test backend.
This package contains all database related functionality.
"""
from .database_manager import DatabaseManager

__all__ = ["DatabaseManager", "init_db"]


def init_db(db_path: str) -> DatabaseManager:
    """Open the database at ``db_path`` and create all required tables."""
    db_manager = DatabaseManager(db_path)
    db_manager.init_tables()
    return db_manager
