# Future annotations for forward reference typing compatibility
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

# Flask primitives for creating the app and request-scoped utilities
from flask import Flask, request
from werkzeug.exceptions import HTTPException

# Enable Cross-Origin Resource Sharing for API and Socket.IO
from flask_cors import CORS

# Import configuration object
from .config import Config

# Import the shared Socket.IO extension
from .extensions import socketio

from .dispatcher import Dispatcher
from .helpers.ws import DISPATCHER_KEY, SocketIOEmitter, make_background_spawner
from .lib.rate_limit import AIRequestBudget
from .models import ROOM_CATALOG
from .services.ai_gateway import AIGateway
from .stores import ConnectionRegistry, HistoryStore, RoomDirectory

# Configure a standard log format for console handlers
log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Create a logger specific to this module
logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    # Initialize base logging; a no-op when the root logger is already configured
    logging.basicConfig(level=level, format=log_format)
    logging.getLogger().setLevel(level)
    # Reduce noisy third-party loggers so we only see our explicit INFO logs and exceptions
    for _noisy_name in (
        "engineio",
        "engineio.server",
        "socketio",
        "socketio.server",
        "socketio.client",
    ):
        logging.getLogger(_noisy_name).setLevel(logging.WARNING)


def build_dispatcher(app: Flask) -> Dispatcher:
    """Create the in-memory stores and wire them into a dispatcher for this app."""
    registry = ConnectionRegistry()
    directory = RoomDirectory(registry, ROOM_CATALOG)
    history = HistoryStore(spec.id for spec in ROOM_CATALOG)
    return Dispatcher(
        registry,
        directory,
        history,
        AIRequestBudget.from_config(app.config),
        AIGateway.from_config(app.config),
        SocketIOEmitter(),
        admin_usernames=app.config.get("ADMIN_USERNAMES", ()),
        spawn=make_background_spawner(app),
    )


# Application factory returning a configured Flask app
def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    # Create the Flask app instance
    app = Flask(__name__)
    # Load configuration from the Config class, then apply any explicit overrides
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Resolve allowed origins from configuration for both Flask and Socket.IO
    origins_cfg = app.config["CORS_ORIGINS"]
    # A single '*' means allow all origins
    if origins_cfg.strip() == "*":
        allowed_origins = "*"
    else:
        # Split comma-separated list into an array of origins
        allowed_origins = [o.strip() for o in origins_cfg.split(",") if o.strip()]
    # Enable CORS for all routes using the allowed origins
    CORS(app, resources={r"/*": {"origins": allowed_origins}})
    # Socket handlers must be registered before init_app so every server instance picks them up
    from .views.ws import register_socket_handlers

    register_socket_handlers()
    # Initialize Socket.IO with the same CORS policy
    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins,
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE") or "gevent",
        ping_timeout=30,
        ping_interval=10,
    )
    app.logger.info("SocketIO configured: async_mode=%s", socketio.async_mode)

    app.extensions[DISPATCHER_KEY] = build_dispatcher(app)

    # Register HTTP routes
    register_routes(app)

    # Return the fully configured application
    return app


# Helper to bind routes and error handlers
def register_routes(app: Flask) -> None:
    # Global error handler to ensure stacktraces get logged
    @app.errorhandler(Exception)
    def _log_unhandled_error(e):
        # HTTP errors (404, 405, ...) already carry their response
        if isinstance(e, HTTPException):
            return e
        logger.exception("UNHANDLED %s %s", request.method, request.path)
        # Re-raise after logging to let Flask generate the default 500
        raise e

    from .views.http import http_bp

    app.register_blueprint(http_bp)
