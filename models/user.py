"""User data model."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator, model_validator

USERNAME_ALLOWED_PUNCTUATION = "_-."


class User(BaseModel):
    """User data model with validation.

    Attributes:
        user_id: Unique identifier for the user (UUID string).
        username: Display name (ASCII letters, digits, '_', '-', '.'; 3-32 chars).
        email_address: User's email address, normalized by email-validator.
        created_at: When the account was registered (UTC).
    """

    user_id: str | None = None
    username: str = Field(...)
    email_address: str = Field(...)
    created_at: datetime | None = None

    model_config = {
        "frozen": True,  # Make the model immutable after creation
    }

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        r"""Validate username format.

        Usernames must:
        - Not be empty or whitespace only
        - Be 3-32 characters long
        - Be ASCII-only
        - Only contain letters, digits, underscores, hyphens, and dots
        - Start with a letter or digit

        Raises:
            ValueError: If the username is invalid
        """
        if not v or not v.strip():
            raise ValueError("Username cannot be blank.")

        stripped_v = v.strip()

        if len(stripped_v) < 3 or len(stripped_v) > 32:
            raise ValueError("Username must be 3-32 characters.")

        if not all(ord(c) < 128 for c in stripped_v):
            raise ValueError("Username must be ASCII-only.")

        if not all(c.isalnum() or c in USERNAME_ALLOWED_PUNCTUATION for c in stripped_v):
            raise ValueError("Username contains invalid characters.")

        if not stripped_v[0].isalnum():
            raise ValueError("Username must start with a letter or digit.")

        return stripped_v

    @field_validator("email_address")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate and normalize the email address using email-validator."""
        if not v or not v.strip():
            raise ValueError("Email address cannot be blank.")

        stripped_v = v.strip()

        if len(stripped_v) < 5 or len(stripped_v) > 128:
            raise ValueError("Email address must be 5-128 characters.")

        if not all(ord(c) < 128 for c in stripped_v):
            raise ValueError("Email address must be ASCII-only.")

        try:
            email_info = validate_email(
                stripped_v,
                check_deliverability=False,  # Don't check if domain actually exists
                allow_smtputf8=False,
            )
        except EmailNotValidError as e:
            raise ValueError(str(e)) from e
        return email_info.normalized.lower()

    @model_validator(mode="before")
    @classmethod
    def ensure_defaults(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        """Generate `user_id` and `created_at` when they are missing or None."""
        if not isinstance(values, dict):
            return values
        values = dict(values)
        # Only generate a default UUID if user_id is None (not provided)
        # NOT if it's an empty string (explicitly provided as empty)
        if values.get("user_id") is None:
            values["user_id"] = str(uuid4())
        if values.get("created_at") is None:
            values["created_at"] = datetime.now(timezone.utc)
        return values

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        """Validate that `user_id` is a non-empty valid UUID string."""
        if not v:
            raise ValueError("user_id must not be empty")
        try:
            UUID(v)
        except ValueError as err:
            raise ValueError("user_id must be a valid UUID string") from err
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready dict (datetimes as ISO strings)."""
        return self.model_dump(mode="json")
