from flask import Flask, g, request
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import DBStorage
from models.seed import seed_payment_methods
from services import build_services
from utils.logging import CORRELATION_HEADER, configure_logging, normalize_correlation_id

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Bookstore Catalog API",
        "version": "1.0.0",
        "description": "REST API for the bookstore catalog: subjects, authors, payment methods, books and reports.",
    },
    "basePath": "/",  # Blueprints are mounted under /api/v1
    "schemes": ["http"],
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, storage: DBStorage | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    `storage` may be passed in (tests share one in-memory database with the
    services they call directly); otherwise one is built from DATABASE_URL.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))

    if app.config.get("CONFIGURE_LOGGING", True):
        configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
         expose_headers=[CORRELATION_HEADER, "Retry-After"])

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    if storage is None:
        storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("SQLALCHEMY_ECHO", False))
        storage.reload()
    if app.config.get("SEED_REFERENCE_DATA", False):
        seed_payment_methods(storage)

    app.extensions["storage"] = storage
    app.extensions["catalog"] = build_services(storage)

    @app.before_request
    def assign_correlation_id():
        g.correlation_id = normalize_correlation_id(request.headers.get(CORRELATION_HEADER))

    @app.after_request
    def echo_correlation_id(response):
        correlation_id = getattr(g, "correlation_id", None)
        if correlation_id:
            response.headers[CORRELATION_HEADER] = correlation_id
        return response

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    from .health import bp as health_bp
    from .subjects import bp as subjects_bp
    from .authors import bp as authors_bp
    from .payment_methods import bp as payment_methods_bp
    from .books import bp as books_bp
    from .reports import bp as reports_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(subjects_bp, url_prefix="/api/v1")
    app.register_blueprint(authors_bp, url_prefix="/api/v1")
    app.register_blueprint(payment_methods_bp, url_prefix="/api/v1")
    app.register_blueprint(books_bp, url_prefix="/api/v1")
    app.register_blueprint(reports_bp, url_prefix="/api/v1")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to the Bookstore Catalog API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
