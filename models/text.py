"""
Text Pydantic model: a passage offered to the user for a typing test.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

MAX_CONTENT_LENGTH = 5000
_WHITESPACE_RUN = re.compile(r"\s+")


def validate_non_empty(value: str) -> str:
    """Validate that a string is not empty or just whitespace."""
    if not value or not value.strip():
        raise ValueError("Value cannot be empty or whitespace")
    return value.strip()


class Text(BaseModel):
    """A source text for typing practice.

    Content is normalized to single spaces because the typing test compares
    characters one by one and line breaks cannot be typed in a single-line input.
    """

    text_id: str | None = None
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)
    created_at: datetime | None = None

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def ensure_defaults(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(values, dict):
            return values
        values = dict(values)
        if values.get("text_id") is None:
            values["text_id"] = str(uuid4())
        if values.get("created_at") is None:
            values["created_at"] = datetime.now(timezone.utc)
        return values

    @field_validator("text_id")
    @classmethod
    def validate_text_id(cls, v: str) -> str:
        try:
            UUID(v)
        except (TypeError, ValueError) as err:
            raise ValueError("text_id must be a valid UUID string") from err
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return validate_non_empty(v)

    @field_validator("content")
    @classmethod
    def normalize_content(cls, v: str) -> str:
        return _WHITESPACE_RUN.sub(" ", validate_non_empty(v))

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
