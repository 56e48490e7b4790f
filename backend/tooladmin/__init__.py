# backend/tooladmin/__init__.py
from flask import Flask, request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from .config import Config
from .extensions import db, migrate


MEMORY_DATABASE_URI = "sqlite:///:memory:"


def _engine_options(uri: str, timeout_ms: int) -> dict:
    """Pool options with a per-connection statement timeout."""
    options = {"pool_pre_ping": True}
    if uri.startswith("postgresql"):
        options["connect_args"] = {"options": f"-c statement_timeout={timeout_ms}"}
    elif uri.startswith("sqlite"):
        # sqlite3 has no statement timeout; this bounds lock waits instead
        options["connect_args"] = {"timeout": timeout_ms / 1000}
    return options


def _check_database(uri: str, options: dict) -> None:
    """Open one connection and run SELECT 1; raises on failure."""
    engine = create_engine(uri, **options)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    finally:
        engine.dispose()


def _configure_storage(app: Flask) -> None:
    """
    Decide which database the app runs on, before it accepts traffic.

    If the configured database is unreachable:
    - STORAGE_FALLBACK="memory": run on an in-memory SQLite database and mark
      the app degraded (visible on /health)
    - STORAGE_FALLBACK="none": refuse to start
    """
    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    timeout_ms = app.config["STATEMENT_TIMEOUT_MS"]
    options = _engine_options(uri, timeout_ms)

    try:
        _check_database(uri, options)
    except (SQLAlchemyError, ImportError) as exc:
        if app.config["STORAGE_FALLBACK"] != "memory":
            raise RuntimeError(f"Database unreachable at startup: {exc}") from exc
        app.logger.warning(
            "Database unreachable at startup (%s); running on in-memory storage. "
            "Data will not survive a restart.", exc.__class__.__name__,
        )
        uri = MEMORY_DATABASE_URI
        options = _engine_options(uri, timeout_ms)
        app.config["SQLALCHEMY_DATABASE_URI"] = uri
        app.config["STORAGE_DEGRADED"] = True

    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = options


def create_app(config_object=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)
    app.config.setdefault("STORAGE_DEGRADED", False)

    _configure_storage(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.dashboard import dashboard_bp
    from .routes.customers import customers_bp
    from .routes.categories import categories_bp
    from .routes.products import products_bp
    from .routes.variants import variants_bp
    from .routes.ratings import ratings_bp
    from .routes.reviews import reviews_bp
    from .routes.inventory import inventory_bp
    from .routes.orders import orders_bp
    from .routes.warranties import warranties_bp
    from .routes.vendors import vendors_bp
    from .routes.suppliers import suppliers_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(variants_bp)
    app.register_blueprint(ratings_bp)
    app.register_blueprint(reviews_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(warranties_bp)
    app.register_blueprint(vendors_bp)
    app.register_blueprint(suppliers_bp)

    from .errors import register_error_handlers
    register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:4173",
            "http://127.0.0.1:4173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    if app.config["STORAGE_DEGRADED"] or app.config.get("AUTO_CREATE_SCHEMA"):
        from .services.user_service import ensure_default_admin
        with app.app_context():
            db.create_all()
            if app.config["STORAGE_DEGRADED"]:
                ensure_default_admin()

    return app
