"""
Bearer-token authentication for API routes.

This module provides :func:`require_auth`, a decorator used to protect Flask
routes that need an authenticated user:

.. code-block:: python

   @result_api.route("/api/results", methods=["POST"])
   @require_auth
   def create_result():
       user = g.user
       ...

When the decorated route function is called...

- If the request has no ``Authorization: Bearer <token>`` header, a 401 response
  is returned.
- The token is verified (signature, expiry, revocation). Expired and invalid
  tokens both produce a 401 response.
- The user named by the token is loaded; a token for a deleted user is a 401.
- The user and the verified claims are stored on ``flask.g`` as ``g.user`` and
  ``g.token_claims``.
- Finally, the route is called with the original parameters.
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar, cast

from flask import g, request

from api import get_services
from api.responses import error_response
from helpers.error_utils import ExpiredToken, InvalidCredential
from models.user_manager import UserNotFound

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


def bearer_token_from_request() -> Optional[str]:
    """Extract the token from the Authorization header, or None if absent/malformed."""
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def require_auth(view: F) -> F:
    """Reject the request with 401 unless it carries a valid bearer token."""

    @wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        token = bearer_token_from_request()
        if token is None:
            return error_response("Missing bearer token", 401)
        services = get_services()
        try:
            claims = services.tokens.verify(token)
        except ExpiredToken as e:
            return error_response(e.message, 401)
        except InvalidCredential as e:
            return error_response(e.message, 401)
        try:
            user = services.users.get_user_by_id(user_id=claims.user_id)
        except UserNotFound:
            logger.warning("Token %s refers to missing user %s", claims.jti, claims.user_id)
            return error_response("Not a valid token", 401)
        g.user = user
        g.token_claims = claims
        return view(*args, **kwargs)

    return cast(F, wrapper)
