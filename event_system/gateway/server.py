"""
API gateway: combines the auth, events and participants blueprints.
This is the entrypoint for both development and deployment.
"""

import logging
import sys
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from event_system.config import Config
from event_system.database.db_connection import Database
from event_system.errors import APIError
from event_system.gateway.container import EXTENSION_KEY, AppServices, build_services

API_PREFIX = "/api"


def create_app(config: Optional[Config] = None, services: Optional[AppServices] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        config (Config, optional): Defaults to `Config.from_env()`.
        services (AppServices, optional): Pre-built services, mainly for tests.
            When omitted they are wired against a pooled PostgreSQL database.

    Returns:
        Flask: The configured Flask application.
    """
    if config is None:
        config = services.config if services is not None else Config.from_env()

    # Basic console logging during API requests
    logging.basicConfig(level=config.log_level, format="[%(levelname)s] %(asctime)s - %(message)s")
    config.warn_if_insecure()

    app = Flask(__name__)
    CORS(app, resources={
        r"/api/*": {
            "origins": list(config.cors_origins),
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Origin", "Content-Type", "Accept", "Authorization"],
        }
    })

    if services is None:
        services = build_services(config, Database(config))
    app.extensions[EXTENSION_KEY] = services

    # --- REGISTER BLUEPRINTS ---
    from event_system.auth_service.routes import auth_bp
    from event_system.events_service.routes import events_bp
    from event_system.participants_service.routes import participants_bp

    app.register_blueprint(auth_bp, url_prefix=f"{API_PREFIX}/auth")
    app.register_blueprint(events_bp, url_prefix=f"{API_PREFIX}/events")
    app.register_blueprint(participants_bp, url_prefix=f"{API_PREFIX}/events")
    logging.info("All blueprints registered successfully.")

    register_request_logging(app)
    register_error_handlers(app)

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health():
        """
        Health check endpoint.
        """
        return jsonify({"status": "ok"}), 200

    return app


def register_request_logging(app: Flask) -> None:
    @app.before_request
    def before_request() -> None:
        # Headers are left out, they carry bearer tokens
        logging.info(f"[API] Incoming {request.method} {request.path}")

    @app.after_request
    def after_request(response: Response) -> Response:
        logging.info(f"[API] {request.method} {request.path} -> {response.status}")
        return response


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(APIError)
    def handle_api_error(error: APIError) -> Tuple[Response, int]:
        if error.status_code >= 500:
            logging.error(f"[API] {request.method} {request.path} failed: {error.message}")
        else:
            logging.info(f"[API] {request.method} {request.path} rejected: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException) -> Tuple[Response, int]:
        code = error.code or 500
        return jsonify({
            "error": True,
            "message": error.description or error.name,
            "code": error.name.lower().replace(" ", "_"),
        }), code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception) -> Tuple[Response, int]:
        logging.exception(f"[API] Unhandled error on {request.method} {request.path}: {error}")
        return jsonify({
            "error": True,
            "message": "Internal server error",
            "code": "internal_error",
        }), 500


def main() -> None:
    from event_system.database.init_db import create_tables

    config = Config.from_env()
    app = create_app(config)
    services: AppServices = app.extensions[EXTENSION_KEY]

    try:
        create_tables(services.db)
    except Exception as e:
        logging.error(f"Failed to create tables: {e}")
        sys.exit(1)

    logging.info(f"Server starting on port {config.port}")
    app.run(host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
