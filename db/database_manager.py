"""Central database manager for the typing test backend.

Provides connection, query, and schema management with specific exception handling.
All request handlers and managers go through this class so that sqlite3 errors are
translated into the exceptions in :mod:`db.exceptions`.
"""

import logging
import sqlite3
from typing import Any, List, Optional, Tuple

from helpers.debug_util import DebugUtil

from .exceptions import (
    ConstraintError,
    DatabaseError,
    DBConnectionError,
    ForeignKeyError,
    IntegrityError,
    SchemaError,
    TableNotFoundError,
)

logger = logging.getLogger(__name__)

SCHEMA: Tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id TEXT PRIMARY KEY,
        username TEXT NOT NULL UNIQUE,
        email_address TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS texts (
        text_id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        content TEXT NOT NULL,
        created_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS results (
        result_id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        text_id TEXT NOT NULL,
        wpm REAL NOT NULL,
        accuracy REAL NOT NULL,
        created_at TEXT NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users (user_id) ON DELETE CASCADE,
        FOREIGN KEY (text_id) REFERENCES texts (text_id)
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_results_user_created
        ON results (user_id, created_at);
    """,
    """
    CREATE TABLE IF NOT EXISTS revoked_tokens (
        jti TEXT PRIMARY KEY,
        expires_at TEXT NOT NULL
    );
    """,
)


class DatabaseManager:
    """Centralized manager for the SQLite connection and queries.

    Rows are returned as ``sqlite3.Row`` objects so callers can index by column
    name. Every write is committed immediately; the backend has no multi-statement
    transactions.
    """

    def __init__(self, db_path: Optional[str] = None, debug_util: Optional[DebugUtil] = None) -> None:
        """Open a connection to the given SQLite file.

        Args:
            db_path: Path to the SQLite database file, or ":memory:". Defaults to ":memory:".
            debug_util: Optional DebugUtil instance for handling debug output.

        Raises:
            DBConnectionError: If the database connection cannot be established.
        """
        self.db_path: str = db_path or ":memory:"
        self.debug_util = debug_util or DebugUtil()
        try:
            self.conn: sqlite3.Connection = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise DBConnectionError(f"Failed to open database at {self.db_path}: {e}") from e
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self._debug_message(f"Connected to SQLite database at {self.db_path}")

    def _debug_message(self, *args: object) -> None:
        self.debug_util.debugMessage(*args)

    def init_tables(self) -> None:
        """Create all application tables if they do not exist."""
        for statement in SCHEMA:
            self.execute(statement)
        self._debug_message("Database tables initialized")

    def list_tables(self) -> List[str]:
        """Return the names of all user tables in the database."""
        rows = self.fetchall(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
            "ORDER BY name"
        )
        return [str(row["name"]) for row in rows]

    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists in the database."""
        row = self.fetchone(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (table_name,)
        )
        return row is not None

    def _translate_error(self, error: sqlite3.Error, query: str) -> DatabaseError:
        message = str(error)
        lowered = message.lower()
        if isinstance(error, sqlite3.IntegrityError):
            if "foreign key" in lowered:
                return ForeignKeyError(message, query)
            if "unique" in lowered or "not null" in lowered or "check" in lowered:
                return ConstraintError(message, query)
            return IntegrityError(message, query)
        if isinstance(error, sqlite3.OperationalError):
            if "no such table" in lowered:
                return TableNotFoundError(message, query)
            if "no such column" in lowered or "syntax error" in lowered:
                return SchemaError(message, query)
        logger.error("Database error for query %r: %s", query.strip(), message)
        return DatabaseError(message, query)

    def execute(self, query: str, params: Tuple[Any, ...] = ()) -> sqlite3.Cursor:
        """Execute a statement and commit.

        Raises:
            DatabaseError: Or one of its subclasses, translated from sqlite3.
        """
        try:
            cursor = self.conn.execute(query, params)
            self.conn.commit()
            return cursor
        except sqlite3.Error as e:
            self.conn.rollback()
            raise self._translate_error(e, query) from e

    def fetchone(self, query: str, params: Tuple[Any, ...] = ()) -> Optional[sqlite3.Row]:
        """
        Execute a query and return the first row, or None if no results.
        Args:
            query: SQL query string (parameterized)
            params: Query parameters
        Returns:
            The first sqlite3.Row or None
        """
        try:
            return self.conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise self._translate_error(e, query) from e

    def fetchall(self, query: str, params: Tuple[Any, ...] = ()) -> List[sqlite3.Row]:
        """
        Execute a query and return all rows as a list.
        Args:
            query: SQL query string (parameterized)
            params: Query parameters
        Returns:
            A list of sqlite3.Row objects.
        """
        try:
            return self.conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise self._translate_error(e, query) from e

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
