"""
Application Factory

Creates and configures the Flask application with all dependencies.
Configuration is passed in explicitly so tests can build isolated apps.
"""

import logging
from typing import Callable, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from pastebox.api.routes import error_text_response, pastes_bp
from pastebox.api.v1 import api_v1_bp
from pastebox.application.dependency_container import DependencyContainer
from pastebox.application.event_publisher import EventPublisher
from pastebox.application.expiration_sweeper import ExpirationSweeper
from pastebox.application.paste_service import PasteService
from pastebox.config.settings import ServiceConfig, load_config, resolve_config_path
from pastebox.domain.access.services import TokenAuthorizer
from pastebox.domain.errors import ErrorCategory
from pastebox.domain.events import DomainEvent
from pastebox.domain.object_storage.repositories import IObjectStorageRepository
from pastebox.domain.object_storage.services import NameGenerator, ObjectStore
from pastebox.domain.rendering.classifier import IContentClassifier
from pastebox.domain.rendering.services import RenderDecisionEngine
from pastebox.infrastructure.content_classifier import MimeSniffingClassifier
from pastebox.infrastructure.event_handlers import LoggingEventHandler
from pastebox.infrastructure.local_object_storage_repository import LocalObjectStorageRepository
from pastebox.infrastructure.syntax_highlighter import PygmentsHighlighter

logger = logging.getLogger(__name__)

SWEEPER_EXTENSION = "pastebox.sweeper"


def create_app(
    config: Optional[ServiceConfig] = None,
    start_sweeper: bool = False,
    on_fatal: Optional[Callable[[Exception], None]] = None,
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Service configuration, loaded from the default path if None
        start_sweeper: Start the background expiration sweeper
        on_fatal: Handler for a fatal sweeper error, terminates the process by default

    Returns:
        Configured Flask application
    """
    if config is None:
        config = load_config(resolve_config_path())

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_content_length

    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": "*",
                "methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "max_age": 3600,
            }
        },
    )

    container = _initialize_services(config, on_fatal)
    app.container = container
    app.extensions[SWEEPER_EXTENSION] = container.resolve(ExpirationSweeper)

    _register_blueprints(app)
    _register_error_handlers(app)
    _register_health_endpoint(app)

    if start_sweeper:
        app.extensions[SWEEPER_EXTENSION].start()

    return app


def _initialize_services(
    config: ServiceConfig,
    on_fatal: Optional[Callable[[Exception], None]],
) -> DependencyContainer:
    """
    Build every service and register it in a DependencyContainer.

    Order: infrastructure adapters, domain services, application services.
    """
    container = DependencyContainer()
    container.register_singleton(ServiceConfig, config)

    event_publisher = EventPublisher()
    event_publisher.subscribe(
        DomainEvent, LoggingEventHandler(logging.getLogger("pastebox")).handle
    )
    container.register_singleton(EventPublisher, event_publisher)

    repository = LocalObjectStorageRepository(config.upload_path)
    classifier = MimeSniffingClassifier()
    highlighter = PygmentsHighlighter(config.highlight_style, config.highlight_formatter)
    container.register_singleton(IObjectStorageRepository, repository)
    container.register_singleton(IContentClassifier, classifier)
    container.register_singleton(PygmentsHighlighter, highlighter)

    store = ObjectStore(
        repository,
        NameGenerator(),
        name_length=config.name_length,
        publish=event_publisher.publish,
    )
    authorizer = TokenAuthorizer(config.tokens)
    engine = RenderDecisionEngine(store, classifier)
    container.register_singleton(ObjectStore, store)
    container.register_singleton(TokenAuthorizer, authorizer)
    container.register_singleton(RenderDecisionEngine, engine)

    sweeper = ExpirationSweeper(
        repository,
        config.retention,
        interval_seconds=config.sweep_interval.total_seconds(),
        publish=event_publisher.publish,
        on_fatal=on_fatal,
    )
    paste_service = PasteService(store, authorizer, engine, highlighter, config.domain)
    container.register_singleton(ExpirationSweeper, sweeper)
    container.register_singleton(PasteService, paste_service)

    logger.info(
        f"Services initialized - storage: {repository.base_path}, "
        f"lifetime: {config.retention.lifetime}, tokens: {len(authorizer.tokens)}"
    )
    return container


def _register_blueprints(app: Flask) -> None:
    app.register_blueprint(pastes_bp)
    app.register_blueprint(api_v1_bp)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(RequestEntityTooLarge)
    def handle_file_too_large(error):
        return error_text_response(ErrorCategory.FILE_TOO_LARGE)


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Health of the storage root and the sweeper.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    repository = app.container.resolve(IObjectStorageRepository)
    sweeper = app.extensions[SWEEPER_EXTENSION]

    health_status = {
        "status": "ok",
        "storage": "available",
        "sweeper": "running" if sweeper.is_running else "stopped",
        "sweeper_state": sweeper.state.value,
        "last_sweep": sweeper.last_result.to_dict() if sweeper.last_result else None,
    }

    try:
        repository.list_entries()
    except Exception as e:
        health_status["storage"] = f"error: {e}"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    @app.route("/health", methods=["GET"])
    def health():
        """Overall health of the service."""
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
