"""Service initialization module.

Factory helpers to create and wire services with their dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from db.database_manager import DatabaseManager
from models.result_manager import ResultManager
from models.text_manager import TextManager
from models.user_manager import UserManager
from services.token_service import TokenService


@dataclass
class Services:
    """The managers one backend instance works with."""

    db_manager: DatabaseManager
    users: UserManager
    texts: TextManager
    results: ResultManager
    tokens: TokenService


def init_services(db_path: str, *, secret_key: str, token_ttl: timedelta) -> Services:
    """Initialize and return core service instances.

    Example:
        services = init_services("typing_test.db", secret_key="s3cret", token_ttl=timedelta(days=1))
    """
    db_manager = DatabaseManager(db_path)
    try:
        db_manager.init_tables()
        return Services(
            db_manager=db_manager,
            users=UserManager(db_manager=db_manager),
            texts=TextManager(db_manager),
            results=ResultManager(db_manager),
            tokens=TokenService(secret_key=secret_key, db_manager=db_manager, ttl=token_ttl),
        )
    except Exception:
        # Close the database connection if initialization fails
        db_manager.close()
        raise
