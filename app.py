"""Application factory."""

import json
import os
import uuid

from flask import Flask, jsonify, g, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from models.user import User
from routes.admin import admin_bp
from routes.auth import auth_bp
from routes.contact import contact_bp
from routes.invitation import invitation_bp
from routes.manager import manager_bp
from routes.messages import messages_bp
from routes.verification import verification_admin_bp, verification_bp
from utils.mailer import LogMailer

migrate = Migrate()
jwt = JWTManager()


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting; one limiter per app so test apps never share counters
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "60 per minute")],
        storage_uri=app.config.get("RATELIMIT_STORAGE_URI", "memory://"),
        headers_enabled=app.config.get("RATELIMIT_HEADERS_ENABLED", True),
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Ensure uploads directory exists
    upload_dir = app.config.get("UPLOAD_DIR")
    if upload_dir:
        os.makedirs(upload_dir, exist_ok=True)

    app.extensions["mailer"] = LogMailer(
        sender=app.config.get("MAIL_SENDER", "noreply@fokushub360.com"),
        logger=app.logger,
    )

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(verification_admin_bp, url_prefix="/api/admin/verification")
    app.register_blueprint(invitation_bp, url_prefix="/api/invitation")
    app.register_blueprint(contact_bp, url_prefix="/api/contact")
    app.register_blueprint(verification_bp, url_prefix="/api/verification")
    app.register_blueprint(messages_bp, url_prefix="/api/messages")
    app.register_blueprint(manager_bp, url_prefix="/api/manager")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _error_response(status_code: int, name: str, detail: str, **extra):
    request_id = g.get("request_id") or str(uuid.uuid4())
    payload = {"error": name, "detail": detail, "request_id": request_id}
    payload.update(extra)
    response = jsonify(payload)
    response.status_code = status_code
    response.headers.setdefault("X-Request-ID", request_id)
    return response


@jwt.user_lookup_loader
def _load_user(_jwt_header, jwt_data):
    """Resolve the token subject; deactivated or banned users fail lookup."""
    try:
        user_id = int(jwt_data["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    user = db.session.get(User, user_id)
    if user is None or not user.can_authenticate:
        return None
    return user


# Every token failure is a 401 so clients can tear down the session on it.
@jwt.unauthorized_loader
def _missing_token(reason: str):
    return _error_response(401, "Unauthorized", reason)


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return _error_response(401, "Unauthorized", reason)


@jwt.expired_token_loader
def _expired_token(_jwt_header, _jwt_data):
    return _error_response(401, "Unauthorized", "Token has expired.")


@jwt.user_lookup_error_loader
def _unknown_user(_jwt_header, _jwt_data):
    return _error_response(401, "Unauthorized", "Session is no longer valid.")


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = error.get_response()
        payload = {
            "error": getattr(error, "name", "Error"),
            "detail": error.description,
            "request_id": request_id,
        }
        payload.update(getattr(error, "payload", None) or {})
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        app.logger.exception("Unhandled application error", exc_info=error)
        db.session.rollback()
        return _error_response(
            500, "Internal Server Error", "An unexpected error occurred."
        )


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
