"""Result data model: one completed typing test, owned by the backend store."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class Result(BaseModel):
    """Pydantic model for a result record, matching the results table.

    Records are immutable once created.
    """

    result_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    text_id: str
    wpm: float = Field(ge=0, allow_inf_nan=False)
    accuracy: float = Field(ge=0, le=100, allow_inf_nan=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("result_id", "user_id", "text_id")
    @classmethod
    def validate_uuid(cls, v: str) -> str:
        """Validate that the provided value is a valid UUID string."""
        uuid.UUID(v)
        return v

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ResultStats(BaseModel):
    """Aggregate figures over a user's history."""

    count: int = 0
    best_wpm: float = 0.0
    average_wpm: float = 0.0
    average_accuracy: float = 0.0
