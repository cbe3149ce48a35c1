"""Pytest configuration for the test suite."""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional
from urllib.parse import urlsplit

import pytest
from flask import Flask
from flask.testing import FlaskClient

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from app import create_app
from client.api_client import ApiClient
from db.database_manager import DatabaseManager

TEST_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
TEST_PASSWORD = "correct horse battery"
TEST_USER = {
    "username": "alice",
    "email_address": "alice@example.com",
    "password": TEST_PASSWORD,
}


@pytest.fixture(scope="function")
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "typing_test.db")


@pytest.fixture(scope="function")
def db_manager(db_path: str) -> Generator[DatabaseManager, None, None]:
    """A fresh database manager with no tables."""
    manager = DatabaseManager(db_path)
    yield manager
    manager.close()


@pytest.fixture(scope="function")
def db_with_tables(db_manager: DatabaseManager) -> DatabaseManager:
    """A fresh database manager with the application schema in place."""
    db_manager.init_tables()
    return db_manager


@pytest.fixture(scope="function")
def app(db_path: str) -> Generator[Flask, None, None]:
    app = create_app(
        {
            "TESTING": True,
            "DATABASE": db_path,
            "SECRET_KEY": TEST_SECRET_KEY,
            "TOKEN_TTL_MINUTES": 60,
        }
    )
    yield app
    app.extensions["typetest_services"].db_manager.close()


@pytest.fixture(scope="function")
def client(app: Flask) -> Generator[FlaskClient, None, None]:
    with app.test_client() as client:
        yield client


@pytest.fixture(scope="function")
def registered_user(client: FlaskClient) -> Dict[str, Any]:
    """Register the default user; returns the response body plus the password."""
    rv = client.post("/api/users/register", json=TEST_USER)
    assert rv.status_code == 201, rv.get_json()
    body = rv.get_json()
    body["password"] = TEST_PASSWORD
    return body


@pytest.fixture(scope="function")
def auth_headers(registered_user: Dict[str, Any]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {registered_user['token']}"}


class FlaskResponse:
    """The subset of ``requests.Response`` that ApiClient reads."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.text = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        return json.loads(self.text)


class FlaskTransport:
    """Stands in for ``requests.Session`` and sends requests to a Flask test client.

    Every call is recorded in ``calls`` so tests can inspect the headers sent.
    """

    def __init__(self, client: FlaskClient) -> None:
        self.client = client
        self.calls: List[Dict[str, Any]] = []

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> FlaskResponse:
        self.calls.append({"method": method, "url": url, "headers": dict(headers or {})})
        rv = self.client.open(
            urlsplit(url).path,
            method=method,
            headers=headers,
            json=json,
            query_string=params,
        )
        return FlaskResponse(rv.status_code, rv.get_data(as_text=True))


@pytest.fixture(scope="function")
def transport(client: FlaskClient) -> FlaskTransport:
    return FlaskTransport(client)


@pytest.fixture(scope="function")
def api_client(transport: FlaskTransport) -> ApiClient:
    return ApiClient("http://testserver", session=transport)
