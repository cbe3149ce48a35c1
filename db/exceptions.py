"""
Database exceptions raised by :class:`db.database_manager.DatabaseManager`.

sqlite3 errors never escape the manager; they are translated into one of these,
keeping the offending statement for logging.
"""

from typing import Optional


class DatabaseError(Exception):
    """Base class for all database-related exceptions.

    Attributes:
        query: The SQL statement that failed, when known.
    """

    def __init__(self, message: str, query: Optional[str] = None) -> None:
        self.message = message
        self.query = query.strip() if query else None
        super().__init__(message)


class DBConnectionError(DatabaseError):
    """Raised when the SQLite file cannot be opened."""


class ForeignKeyError(DatabaseError):
    """Raised when a row references a user or text that does not exist."""


class ConstraintError(DatabaseError):
    """Raised on UNIQUE, NOT NULL or CHECK violations."""


class IntegrityError(DatabaseError):
    """Raised for any other integrity violation."""


class SchemaError(DatabaseError):
    """Raised when a statement names a missing column or is malformed."""


class TableNotFoundError(DatabaseError):
    """Raised when a statement names a table that has not been created."""
