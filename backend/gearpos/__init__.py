# backend/gearpos/__init__.py
import logging

from flask import Flask

from .config import Config
from .extensions import db, migrate


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger("gearpos").setLevel(level)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Access gate runs once per request, before any blueprint
    from .decorators import enforce_basic_auth, add_security_headers
    app.before_request(enforce_basic_auth)
    app.after_request(add_security_headers)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.settings import settings_bp
    from .routes.products import products_bp
    from .routes.customers import customers_bp
    from .routes.cart import cart_bp
    from .routes.sales import sales_bp
    from .routes.reports import reports_bp
    from .routes.sync import sync_bp
    from .routes.backup import backup_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(sync_bp)
    app.register_blueprint(backup_bp)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
