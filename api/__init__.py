"""REST API blueprints for the typing test backend."""

from typing import Optional

from flask import current_app, request

from services import Services

SERVICES_EXTENSION = "typetest_services"


def get_services() -> Services:
    """Return the services wired into the current Flask app by ``create_app``."""
    return current_app.extensions[SERVICES_EXTENSION]


def parse_limit(default: int, maximum: int = 200) -> Optional[int]:
    """Read the ``limit`` query parameter; None means it was present but invalid."""
    raw = request.args.get("limit")
    if raw is None:
        return default
    try:
        limit = int(raw)
    except ValueError:
        return None
    if limit < 1 or limit > maximum:
        return None
    return limit


def json_body() -> dict:
    """Return the request's JSON object, or an empty dict for missing/non-object bodies."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
