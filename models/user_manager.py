"""User Manager for CRUD operations and credential checks.

Handles all DB access for users. Password hashes never leave this module.
"""

import logging
import sqlite3
from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from db.database_manager import DatabaseManager
from helpers.error_utils import InvalidCredential
from models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

_USER_COLUMNS = "user_id, username, email_address, created_at"


class UserValidationError(Exception):
    """Raised when a user record fails validation checks."""

    def __init__(self, message: str = "User validation failed") -> None:
        """Initialize the exception with an optional message."""
        self.message = message
        super().__init__(self.message)


class UserAlreadyExists(UserValidationError):
    """Raised when the email address or username is already registered."""


class UserNotFound(Exception):
    """Raised when a requested user cannot be found in the database."""

    def __init__(self, message: str = "User not found") -> None:
        """Initialize the exception with an optional message."""
        self.message = message
        super().__init__(self.message)


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        user_id=str(row["user_id"]),
        username=str(row["username"]),
        email_address=str(row["email_address"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


class UserManager:
    """CRUD operations and queries for `User` objects via `DatabaseManager`."""

    def __init__(self, *, db_manager: DatabaseManager) -> None:
        """Create a new `UserManager` bound to the given database manager."""
        self.db_manager: DatabaseManager = db_manager

    @staticmethod
    def _validate_password(password: str) -> None:
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise UserValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        if len(password) > MAX_PASSWORD_LENGTH:
            raise UserValidationError(
                f"Password must be at most {MAX_PASSWORD_LENGTH} characters."
            )

    def _validate_uniqueness(self, *, user: User) -> None:
        """Ensure no other user has the same email address or username.

        Both checks are case-insensitive and exclude the user's own row.
        """
        row = self.db_manager.fetchone(
            "SELECT 1 FROM users WHERE LOWER(email_address) = LOWER(?) AND user_id != ?",
            (user.email_address, user.user_id),
        )
        if row:
            raise UserAlreadyExists(f"Email address '{user.email_address}' must be unique.")
        row = self.db_manager.fetchone(
            "SELECT 1 FROM users WHERE LOWER(username) = LOWER(?) AND user_id != ?",
            (user.username, user.user_id),
        )
        if row:
            raise UserAlreadyExists(f"Username '{user.username}' must be unique.")

    def register_user(self, *, user: User, password: str) -> User:
        """Insert a new user with a hashed password and return it.

        Raises:
            UserValidationError: If the password is too short or too long.
            UserAlreadyExists: If the email address or username is taken.
        """
        self._validate_password(password)
        self._validate_uniqueness(user=user)
        created_at = user.created_at.isoformat() if user.created_at else None
        self.db_manager.execute(
            "INSERT INTO users (user_id, username, email_address, password_hash, created_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                user.user_id,
                user.username,
                user.email_address.lower(),
                generate_password_hash(password),
                created_at,
            ),
        )
        logger.info("Registered user %s", user.user_id)
        return user

    def authenticate(self, *, email_address: str, password: str) -> User:
        """Return the user whose credentials match or raise `InvalidCredential`.

        Unknown email addresses and wrong passwords produce the same error.
        """
        row = self.db_manager.fetchone(
            f"SELECT {_USER_COLUMNS}, password_hash FROM users "
            "WHERE LOWER(email_address) = LOWER(?)",
            (email_address.strip(),),
        )
        if not row or not check_password_hash(str(row["password_hash"]), password):
            raise InvalidCredential("Invalid email address or password.")
        return _row_to_user(row)

    def get_user_by_id(self, *, user_id: str) -> User:
        """Return a `User` by its UUID string or raise `UserNotFound`."""
        row = self.db_manager.fetchone(
            f"SELECT {_USER_COLUMNS} FROM users WHERE user_id = ?",
            (user_id,),
        )
        if not row:
            raise UserNotFound(f"User with ID {user_id} not found.")
        return _row_to_user(row)
