"""API endpoints for submitting typing-test results and reading history."""

from flask import Blueprint, Response, g, jsonify
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from api import get_services, json_body, parse_limit
from api.auth import require_auth
from api.responses import error_response, validation_details
from models.result import Result
from models.result_manager import ResultManager, ResultValidationError

result_api = Blueprint("result_api", __name__)

MAX_PLAUSIBLE_WPM = 400.0


class ResultCreateRequest(BaseModel):
    text_id: str = Field(validation_alias=AliasChoices("text_id", "textRef"))
    wpm: float = Field(ge=0, le=MAX_PLAUSIBLE_WPM, allow_inf_nan=False)
    accuracy: float = Field(ge=0, le=100, allow_inf_nan=False)


@result_api.route("/api/results", methods=["POST"])
@require_auth
def create_result() -> tuple[Response, int]:
    """Persist the result of a completed typing test for the current user."""
    try:
        model = ResultCreateRequest(**json_body())
    except ValidationError as e:
        return error_response("Invalid result data", 400, validation_details(e))

    services = get_services()
    if services.texts.get_text_by_id(model.text_id) is None:
        return error_response(f"Unknown text '{model.text_id}'", 400)
    try:
        result = Result(
            user_id=str(g.user.user_id),
            text_id=model.text_id,
            wpm=round(model.wpm, 2),
            accuracy=round(model.accuracy, 2),
        )
        services.results.save_result(result)
    except ValidationError as e:
        return error_response("Invalid result data", 400, validation_details(e))
    except ResultValidationError as e:
        return error_response(e.message, 400)
    return jsonify(result.to_dict()), 201


@result_api.route("/api/results", methods=["GET"])
@require_auth
def list_results() -> tuple[Response, int]:
    """Return the current user's history, newest first."""
    limit = parse_limit(ResultManager.DEFAULT_HISTORY_LIMIT)
    if limit is None:
        return error_response("limit must be an integer between 1 and 200", 400)
    results = get_services().results.list_results_for_user(
        user_id=str(g.user.user_id), limit=limit
    )
    return jsonify([result.to_dict() for result in results]), 200


@result_api.route("/api/results/stats", methods=["GET"])
@require_auth
def result_stats() -> tuple[Response, int]:
    stats = get_services().results.stats_for_user(user_id=str(g.user.user_id))
    return jsonify(stats.model_dump()), 200


@result_api.route("/api/results/<string:result_id>", methods=["GET"])
@require_auth
def get_result(result_id: str) -> tuple[Response, int]:
    result = get_services().results.get_result_for_user(
        result_id=result_id, user_id=str(g.user.user_id)
    )
    if result is None:
        return error_response("Result not found", 404)
    return jsonify(result.to_dict()), 200
