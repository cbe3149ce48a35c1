"""API endpoints for registration, login, profile and logout."""

from flask import Blueprint, Response, g, jsonify
from pydantic import BaseModel, Field, ValidationError

from api import get_services, json_body
from api.auth import require_auth
from api.responses import error_response, validation_details
from helpers.error_utils import InvalidCredential
from models.user import User
from models.user_manager import UserAlreadyExists, UserValidationError

user_api = Blueprint("user_api", __name__)


class RegisterRequest(BaseModel):
    username: str
    email_address: str
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email_address: str = Field(min_length=1)
    password: str = Field(min_length=1)


@user_api.route("/api/users/register", methods=["POST"])
def register() -> tuple[Response, int]:
    """Create an account and return the new user with a session token."""
    try:
        model = RegisterRequest(**json_body())
        user = User(username=model.username, email_address=model.email_address)
    except ValidationError as e:
        return error_response("Invalid registration data", 400, validation_details(e))

    services = get_services()
    try:
        services.users.register_user(user=user, password=model.password)
    except UserAlreadyExists as e:
        return error_response(e.message, 409)
    except UserValidationError as e:
        return error_response(e.message, 400)

    token = services.tokens.issue(str(user.user_id))
    return jsonify({"success": True, "user": user.to_dict(), "token": token}), 201


@user_api.route("/api/users/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """Exchange an email address and password for a session token."""
    try:
        model = LoginRequest(**json_body())
    except ValidationError as e:
        return error_response("Invalid login data", 400, validation_details(e))

    services = get_services()
    try:
        user = services.users.authenticate(
            email_address=model.email_address, password=model.password
        )
    except InvalidCredential as e:
        return error_response(e.message, 401)

    token = services.tokens.issue(str(user.user_id))
    return jsonify({"success": True, "user": user.to_dict(), "token": token}), 200


@user_api.route("/api/users/profile", methods=["GET"])
@require_auth
def profile() -> tuple[Response, int]:
    """Return the authenticated user's profile."""
    return jsonify(g.user.to_dict()), 200


@user_api.route("/api/users/logout", methods=["POST"])
@require_auth
def logout() -> tuple[Response, int]:
    """Revoke the presented token."""
    get_services().tokens.revoke(g.token_claims)
    return jsonify({"success": True, "message": "Logged out"}), 200
