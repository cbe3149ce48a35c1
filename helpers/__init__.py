"""Helper utilities for the typing test application.

This package contains the debug output helper and the shared error taxonomy.
"""

from .error_utils import (  # noqa: F401
    ExpiredToken,
    InvalidCredential,
    NetworkFailure,
    TypingTestError,
    ValidationFailure,
)
