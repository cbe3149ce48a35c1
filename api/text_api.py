"""API endpoints for the source texts offered in typing tests."""

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from api import get_services, json_body, parse_limit
from api.auth import require_auth
from api.responses import error_response, validation_details
from models.text import Text
from models.text_manager import TextManager

text_api = Blueprint("text_api", __name__)


class TextCreateRequest(BaseModel):
    title: str
    content: str


@text_api.route("/api/texts", methods=["GET"])
def list_texts() -> tuple[Response, int]:
    """Return text candidates for a new test.

    Query Parameters:
        random: When "true", return a single randomly chosen text (still as a list)
        limit: Maximum number of texts to return (1-200, default 50)
    """
    limit = parse_limit(TextManager.DEFAULT_LIST_LIMIT)
    if limit is None:
        return error_response("limit must be an integer between 1 and 200", 400)

    texts = get_services().texts
    if request.args.get("random", "").lower() in ("1", "true", "yes"):
        chosen = texts.random_text()
        return jsonify([chosen.to_dict()] if chosen else []), 200
    return jsonify([text.to_dict() for text in texts.list_texts(limit=limit)]), 200


@text_api.route("/api/texts/<string:text_id>", methods=["GET"])
def get_text(text_id: str) -> tuple[Response, int]:
    text = get_services().texts.get_text_by_id(text_id)
    if text is None:
        return error_response("Text not found", 404)
    return jsonify(text.to_dict()), 200


@text_api.route("/api/texts", methods=["POST"])
@require_auth
def create_text() -> tuple[Response, int]:
    """Add a new text to the library."""
    try:
        model = TextCreateRequest(**json_body())
        text = Text(title=model.title, content=model.content)
    except ValidationError as e:
        return error_response("Invalid text data", 400, validation_details(e))
    get_services().texts.save_text(text)
    return jsonify(text.to_dict()), 201
