import logging
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from shopfront.core.config import Config
from shopfront.core.dependencies import CONTAINER_EXTENSION, DependencyContainer, build_container, get_config
from shopfront.core.exceptions import BaseAPIException, UnknownRouteError
from shopfront.routes import auth_bp, products_bp

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


def create_app(config: Optional[Config] = None, container: Optional[DependencyContainer] = None) -> Flask:
    """
    Application factory.

    Stores, security primitives and flows are built once here and shared
    by every request; tests pass a config with the in-memory backend (or
    a prepared container) to get a fully isolated instance.
    """
    config = config or get_config()
    configure_logging(config.app.log_level)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.upload.max_upload_bytes
    app.extensions[CONTAINER_EXTENSION] = container or build_container(config)

    # ------------------------------------------------------------------ #
    # Blueprints                                                          #
    # ------------------------------------------------------------------ #
    app.register_blueprint(auth_bp)
    app.register_blueprint(products_bp, url_prefix="/product")

    # ------------------------------------------------------------------ #
    # Error handlers: every failure renders as {"errorMessage": ...}     #
    # ------------------------------------------------------------------ #
    @app.errorhandler(BaseAPIException)
    def api_error(e: BaseAPIException):
        if e.status_code >= 500:
            logger.error(f"{e.error_code}: {e.internal_message}")
        else:
            logger.warning(f"{e.error_code} on {request.method} {request.path}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    @app.errorhandler(405)
    def unknown_route(e):
        error = UnknownRouteError(request.method, request.path)
        logger.info(error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"errorMessage": f"Request body exceeds {config.upload.max_upload_mb}MB"}), 413

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jsonify({"errorMessage": str(e.description)}), e.code

    @app.errorhandler(Exception)
    def internal_error(e: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({"errorMessage": "Internal Server Error"}), 500

    return app


if __name__ == "__main__":
    application = create_app()
    settings = get_config().app
    application.run(debug=settings.debug, host=settings.host, port=settings.port)
