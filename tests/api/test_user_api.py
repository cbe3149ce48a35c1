"""Tests for the registration, login, profile and logout endpoints."""

from datetime import timedelta
from typing import Any, Dict

from flask import Flask
from flask.testing import FlaskClient


def test_register_returns_user_and_token(client: FlaskClient) -> None:
    rv = client.post(
        "/api/users/register",
        json={"username": "bob", "email_address": "Bob@Example.com", "password": "password123"},
    )
    assert rv.status_code == 201
    body = rv.get_json()
    assert body["success"] is True
    assert body["user"]["username"] == "bob"
    assert body["user"]["email_address"] == "bob@example.com"
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]
    assert body["token"]


def test_register_duplicate_email_conflicts(
    client: FlaskClient, registered_user: Dict[str, Any]
) -> None:
    rv = client.post(
        "/api/users/register",
        json={"username": "alice2", "email_address": "ALICE@example.com", "password": "password123"},
    )
    assert rv.status_code == 409
    assert rv.get_json()["success"] is False


def test_register_duplicate_username_conflicts(
    client: FlaskClient, registered_user: Dict[str, Any]
) -> None:
    rv = client.post(
        "/api/users/register",
        json={"username": "Alice", "email_address": "other@example.com", "password": "password123"},
    )
    assert rv.status_code == 409


def test_register_invalid_data(client: FlaskClient) -> None:
    rv = client.post(
        "/api/users/register",
        json={"username": "x", "email_address": "not-an-email", "password": "password123"},
    )
    assert rv.status_code == 400
    body = rv.get_json()
    assert body["success"] is False
    assert body["details"]


def test_register_short_password(client: FlaskClient) -> None:
    rv = client.post(
        "/api/users/register",
        json={"username": "carol", "email_address": "carol@example.com", "password": "short"},
    )
    assert rv.status_code == 400


def test_register_non_object_body(client: FlaskClient) -> None:
    rv = client.post("/api/users/register", json=["not", "an", "object"])
    assert rv.status_code == 400


def test_login_success(client: FlaskClient, registered_user: Dict[str, Any]) -> None:
    rv = client.post(
        "/api/users/login",
        json={"email_address": "alice@example.com", "password": registered_user["password"]},
    )
    assert rv.status_code == 200
    body = rv.get_json()
    assert body["user"]["user_id"] == registered_user["user"]["user_id"]
    assert body["token"]


def test_login_wrong_password(client: FlaskClient, registered_user: Dict[str, Any]) -> None:
    rv = client.post(
        "/api/users/login",
        json={"email_address": "alice@example.com", "password": "wrong-password"},
    )
    assert rv.status_code == 401
    assert rv.get_json()["success"] is False


def test_login_unknown_email(client: FlaskClient) -> None:
    rv = client.post(
        "/api/users/login",
        json={"email_address": "nobody@example.com", "password": "password123"},
    )
    assert rv.status_code == 401


def test_login_missing_fields(client: FlaskClient) -> None:
    rv = client.post("/api/users/login", json={"email_address": "alice@example.com"})
    assert rv.status_code == 400


def test_profile_requires_token(client: FlaskClient) -> None:
    rv = client.get("/api/users/profile")
    assert rv.status_code == 401


def test_profile_rejects_garbage_token(client: FlaskClient) -> None:
    rv = client.get("/api/users/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert rv.status_code == 401
    assert rv.get_json()["message"] == "Not a valid token"


def test_profile_rejects_expired_token(
    app: Flask, client: FlaskClient, registered_user: Dict[str, Any]
) -> None:
    tokens = app.extensions["typetest_services"].tokens
    expired = tokens.issue(registered_user["user"]["user_id"], ttl=timedelta(seconds=-10))
    rv = client.get("/api/users/profile", headers={"Authorization": f"Bearer {expired}"})
    assert rv.status_code == 401
    assert rv.get_json()["message"] == "Token has expired"


def test_profile_returns_user(
    client: FlaskClient, registered_user: Dict[str, Any], auth_headers: Dict[str, str]
) -> None:
    rv = client.get("/api/users/profile", headers=auth_headers)
    assert rv.status_code == 200
    assert rv.get_json() == registered_user["user"]


def test_logout_revokes_token(client: FlaskClient, auth_headers: Dict[str, str]) -> None:
    rv = client.post("/api/users/logout", headers=auth_headers)
    assert rv.status_code == 200
    assert rv.get_json()["success"] is True

    rv = client.get("/api/users/profile", headers=auth_headers)
    assert rv.status_code == 401
    assert rv.get_json()["message"] == "Token has been revoked"


def test_logout_leaves_other_tokens_valid(
    client: FlaskClient, registered_user: Dict[str, Any], auth_headers: Dict[str, str]
) -> None:
    rv = client.post(
        "/api/users/login",
        json={"email_address": "alice@example.com", "password": registered_user["password"]},
    )
    second = {"Authorization": f"Bearer {rv.get_json()['token']}"}
    client.post("/api/users/logout", headers=auth_headers)
    assert client.get("/api/users/profile", headers=second).status_code == 200


def test_token_for_deleted_user_rejected(
    app: Flask, client: FlaskClient, registered_user: Dict[str, Any], auth_headers: Dict[str, str]
) -> None:
    db = app.extensions["typetest_services"].db_manager
    db.execute("DELETE FROM users WHERE user_id = ?", (registered_user["user"]["user_id"],))
    rv = client.get("/api/users/profile", headers=auth_headers)
    assert rv.status_code == 401


def test_health_check(client: FlaskClient) -> None:
    rv = client.get("/")
    assert rv.status_code == 200
    assert rv.get_json() == {"success": True, "message": "Server is running successfully"}


def test_unknown_route_returns_json_error(client: FlaskClient) -> None:
    rv = client.get("/api/nope")
    assert rv.status_code == 404
    assert rv.get_json()["success"] is False
