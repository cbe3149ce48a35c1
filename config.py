"""Environment-driven configuration for the backend and the client.

Values are read once via :meth:`Settings.from_env`; nothing else in the code base
reads the environment directly except the debug-mode switch in
:mod:`helpers.debug_util`.
"""

import os
from datetime import timedelta
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_PORT = 10000
DEFAULT_DATABASE = "typing_test.db"
DEFAULT_SECRET_KEY = "dev-secret-change-me"
DEFAULT_TOKEN_TTL_MINUTES = 7 * 24 * 60
DEFAULT_BACKEND_URL = "http://localhost:10000"
DEFAULT_TOKEN_FILE = str(Path.home() / ".typetest" / "session.json")


class ConfigError(Exception):
    """Raised when an environment variable holds an unusable value."""


class Settings(BaseModel):
    """Backend and client settings."""

    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    database: str = DEFAULT_DATABASE
    secret_key: str = Field(default=DEFAULT_SECRET_KEY, min_length=1)
    token_ttl_minutes: int = Field(default=DEFAULT_TOKEN_TTL_MINUTES, gt=0)
    backend_url: str = DEFAULT_BACKEND_URL
    token_file: str = DEFAULT_TOKEN_FILE

    model_config = {"frozen": True}

    @field_validator("backend_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("backend_url must start with http:// or https://")
        return v.rstrip("/")

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(minutes=self.token_ttl_minutes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables, falling back to defaults.

        Raises:
            ConfigError: If a variable is present but invalid.
        """
        env = os.environ if environ is None else environ
        mapping = {
            "port": "PORT",
            "database": "TYPETEST_DATABASE",
            "secret_key": "TYPETEST_SECRET_KEY",
            "token_ttl_minutes": "TYPETEST_TOKEN_TTL_MINUTES",
            "backend_url": "TYPETEST_BACKEND_URL",
            "token_file": "TYPETEST_TOKEN_FILE",
        }
        values = {field: env[var] for field, var in mapping.items() if env.get(var)}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
