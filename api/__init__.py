"""Flask application factory for the Draftpad local API."""

import sys

from flask import Flask, current_app
from flask_cors import CORS

from api.middleware import register_error_handlers, register_request_logging
from core.services import SettingsServices
from database.connection import health_check

EXTENSION_KEY = "draftpad"


def get_services() -> SettingsServices:
    """Services attached to the running app."""
    return current_app.extensions[EXTENSION_KEY]


def create_app(services: SettingsServices) -> Flask:
    """Create and configure the Flask application around ``services``."""
    app = Flask(
        __name__,
        static_folder="../static",
        static_url_path="/static",
    )

    # Configuration
    app.config["DEBUG"] = services.config.flask.debug
    app.config["JSON_SORT_KEYS"] = False
    app.extensions[EXTENSION_KEY] = services

    # The UI is served from the same loopback origin
    CORS(app, origins=[f"http://{services.config.flask.host}:{services.config.flask.port}"])

    register_error_handlers(app)
    register_request_logging(app)

    # Register blueprints
    from api.routes.settings import settings_bp

    app.register_blueprint(settings_bp, url_prefix="/api/settings")

    # Root route serves the frontend
    @app.route("/")
    def index():
        return app.send_static_file("index.html")

    # Health check
    @app.route("/api/health")
    def health():
        healthy = health_check(services.engine)
        return {"status": "ok" if healthy else "degraded", "database": healthy}, (200 if healthy else 503)

    @app.route("/api/app/info")
    def app_info():
        return {
            "name": services.config.app.name,
            "version": services.config.app.version,
            "platform": sys.platform,
        }

    return app
