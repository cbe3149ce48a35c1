"""
API client for the typing test backend.

Wraps ``requests`` with the backend's endpoints, parses responses into the shared
pydantic models, and maps transport and HTTP failures onto the error taxonomy in
:mod:`helpers.error_utils`. Credentials are passed to every authenticated call
explicitly; the client never keeps a default Authorization header.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests
from pydantic import ValidationError

from helpers.error_utils import (
    ExpiredToken,
    InvalidCredential,
    NetworkFailure,
    ValidationFailure,
)
from models.result import Result, ResultStats
from models.text import Text
from models.user import User

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10  # seconds
EXPIRED_TOKEN_MESSAGE = "Token has expired"


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"


def _error_details(response: requests.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("details") if isinstance(body, dict) else None


class ApiClient:
    """Typed access to the backend's REST endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Args:
            base_url: Backend root, e.g. "http://localhost:10000"
            timeout: Request timeout in seconds
            session: Optional requests.Session (or compatible object) to send requests with
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @staticmethod
    def build_headers(token: Optional[str] = None) -> Dict[str, str]:
        """Return a fresh header dict, stamped with the bearer token when one is given."""
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self.build_headers(token),
                json=json,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkFailure(f"Could not reach the server: {e}") from e
        if response.status_code >= 500:
            raise NetworkFailure(f"Server error: {_error_message(response)}")
        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise NetworkFailure("Malformed response from server") from e

    @staticmethod
    def _raise_for_auth(response: requests.Response) -> None:
        if response.status_code == 401:
            message = _error_message(response)
            if message == EXPIRED_TOKEN_MESSAGE:
                raise ExpiredToken(message)
            raise InvalidCredential(message)

    def _raise_for_status(self, response: requests.Response) -> None:
        self._raise_for_auth(response)
        if response.status_code in (400, 409, 422):
            raise ValidationFailure(_error_message(response), _error_details(response))
        if response.status_code == 404:
            raise ValidationFailure(_error_message(response))
        if not response.ok:
            raise NetworkFailure(f"Unexpected response: HTTP {response.status_code}")

    def _session_payload(self, response: requests.Response) -> Tuple[User, str]:
        self._raise_for_status(response)
        body = self._json(response)
        try:
            return User.model_validate(body["user"]), str(body["token"])
        except (KeyError, TypeError, ValidationError) as e:
            raise NetworkFailure("Malformed login response from server") from e

    def login(self, email_address: str, password: str) -> Tuple[User, str]:
        """POST /api/users/login; returns the user and a new token."""
        response = self._request(
            "POST",
            "/api/users/login",
            json={"email_address": email_address, "password": password},
        )
        return self._session_payload(response)

    def register(self, username: str, email_address: str, password: str) -> Tuple[User, str]:
        """POST /api/users/register; returns the new user and a token."""
        response = self._request(
            "POST",
            "/api/users/register",
            json={"username": username, "email_address": email_address, "password": password},
        )
        return self._session_payload(response)

    def fetch_profile(self, token: str) -> User:
        """GET /api/users/profile with the given credential."""
        response = self._request("GET", "/api/users/profile", token=token)
        self._raise_for_status(response)
        try:
            return User.model_validate(self._json(response))
        except ValidationError as e:
            raise NetworkFailure("Malformed profile from server") from e

    def logout(self, token: str) -> None:
        """POST /api/users/logout; revokes the token server-side."""
        response = self._request("POST", "/api/users/logout", token=token)
        self._raise_for_status(response)

    def list_texts(self, *, random_pick: bool = False, limit: Optional[int] = None) -> List[Text]:
        """GET /api/texts."""
        params: Dict[str, Any] = {}
        if random_pick:
            params["random"] = "true"
        if limit is not None:
            params["limit"] = limit
        response = self._request("GET", "/api/texts", params=params or None)
        self._raise_for_status(response)
        try:
            return [Text.model_validate(item) for item in self._json(response)]
        except (TypeError, ValidationError) as e:
            raise NetworkFailure("Malformed text list from server") from e

    def submit_result(self, token: str, *, text_id: str, wpm: float, accuracy: float) -> Result:
        """POST /api/results.

        Raises:
            ValidationFailure: When the server rejects the submission; safe to retry after fixing.
            InvalidCredential: When the token is no longer accepted.
            NetworkFailure: When the server cannot be reached.
        """
        response = self._request(
            "POST",
            "/api/results",
            token=token,
            json={"text_id": text_id, "wpm": wpm, "accuracy": accuracy},
        )
        self._raise_for_status(response)
        try:
            return Result.model_validate(self._json(response))
        except ValidationError as e:
            raise NetworkFailure("Malformed result from server") from e

    def list_results(self, token: str, *, limit: Optional[int] = None) -> List[Result]:
        """GET /api/results (the caller's history, newest first)."""
        params = {"limit": limit} if limit is not None else None
        response = self._request("GET", "/api/results", token=token, params=params)
        self._raise_for_status(response)
        try:
            return [Result.model_validate(item) for item in self._json(response)]
        except (TypeError, ValidationError) as e:
            raise NetworkFailure("Malformed history from server") from e

    def result_stats(self, token: str) -> ResultStats:
        response = self._request("GET", "/api/results/stats", token=token)
        self._raise_for_status(response)
        try:
            return ResultStats.model_validate(self._json(response))
        except ValidationError as e:
            raise NetworkFailure("Malformed stats from server") from e
