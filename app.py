"""
Main Flask application for the typing test backend.
Wires the database, managers and API blueprints together.
"""
import logging
from datetime import timedelta
from typing import Any

import flask  # for type hints
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from api import SERVICES_EXTENSION
from api.responses import error_response
from api.result_api import result_api
from api.text_api import text_api
from api.user_api import user_api
from config import Settings
from db.exceptions import DatabaseError
from helpers.debug_util import DebugUtil
from services import init_services

logger = logging.getLogger(__name__)


def create_app(config: dict[str, Any] | None = None) -> flask.Flask:
    """Factory to create and configure the Flask app.

    Recognised config keys: DATABASE, SECRET_KEY, TOKEN_TTL_MINUTES, SEED_TEXTS, TESTING.
    Missing keys are filled from :class:`config.Settings` (i.e. the environment).
    """
    settings = Settings.from_env()
    app = Flask(__name__)
    app.config.update(
        DATABASE=settings.database,
        SECRET_KEY=settings.secret_key,
        TOKEN_TTL_MINUTES=settings.token_ttl_minutes,
        SEED_TEXTS=True,
    )
    # Apply external configuration if provided
    if config:
        app.config.update(config)

    debug_util = DebugUtil()
    services = init_services(
        app.config["DATABASE"],
        secret_key=app.config["SECRET_KEY"],
        token_ttl=timedelta(minutes=int(app.config["TOKEN_TTL_MINUTES"])),
    )
    if app.config.get("SEED_TEXTS", True):
        services.texts.ensure_default_texts()
    app.extensions[SERVICES_EXTENSION] = services
    debug_util.debugMessage(f"Backend initialized with database {app.config['DATABASE']}")

    app.register_blueprint(user_api)
    app.register_blueprint(text_api)
    app.register_blueprint(result_api)

    @app.errorhandler(DatabaseError)
    def handle_database_error(error: DatabaseError) -> tuple[flask.Response, int]:
        logger.exception("Unhandled database error")
        return error_response(f"Database error: {error}", 500)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException) -> tuple[flask.Response, int]:
        return error_response(error.description or error.name, error.code or 500)

    @app.route("/")
    def index() -> flask.Response:
        """Health check."""
        return jsonify({"success": True, "message": "Server is running successfully"})

    return app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = Settings.from_env()
    app = create_app()
    logger.info("Server is listening on port %s", settings.port)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
