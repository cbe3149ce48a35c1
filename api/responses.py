"""JSON error responses shared by every endpoint."""

import logging
from typing import Any, Optional

from flask import Response, jsonify

logger = logging.getLogger(__name__)


def validation_details(error: Any) -> list[dict[str, Any]]:
    """Reduce a pydantic ValidationError to JSON-safe ``{"loc", "msg"}`` entries."""
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in error.errors()
    ]


def error_response(
    message: str,
    status: int,
    details: Optional[Any] = None,
) -> tuple[Response, int]:
    """Build a JSON error response in the shape every endpoint uses.

    Args:
        message: Human-readable error message
        status: HTTP status code
        details: Optional structured detail to include

    Returns:
        A (response, status) tuple for Flask to return.
    """
    if status >= 500:
        logger.error("Request failed with %s: %s", status, message)
    else:
        logger.info("Request rejected with %s: %s", status, message)
    body: dict[str, Any] = {"success": False, "message": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status
