"""
Error taxonomy for the typing test application.

Shared by the backend and the client, so this module must not depend on Flask.
"""

from typing import Any


class TypingTestError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str = "Typing test error") -> None:
        self.message = message
        super().__init__(self.message)


class NetworkFailure(TypingTestError):
    """Raised when the backend cannot be reached or returns a server error."""


class InvalidCredential(TypingTestError):
    """Raised when a login or bearer token is rejected."""


class ExpiredToken(InvalidCredential):
    """Raised when a bearer token is past its expiry time."""


class ValidationFailure(TypingTestError):
    """Raised when submitted data fails validation.

    Attributes:
        details: Optional structured detail (e.g. pydantic error list) for display.
    """

    def __init__(self, message: str = "Validation failed", details: Any = None) -> None:
        super().__init__(message)
        self.details = details
