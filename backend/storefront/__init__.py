# backend/storefront/__init__.py
from flask import Flask, request

from .config import Config
from .extensions import db, migrate
from .formatting import format_date, format_datetime, format_price, text_to_html



def create_app(config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config:
        # Overrides must land before extensions read the config
        app.config.update(config)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    from .services.notification_service import EmailDispatcher
    EmailDispatcher(app)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.cart import cart_bp
    from .routes.orders import orders_bp
    from .routes.products import products_bp
    from .routes.categories import categories_bp
    from .routes.geo import geo_bp
    from .routes.uploads import uploads_bp
    from .routes.admin import admin_bp  # Server-rendered back-office pages

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(geo_bp)
    app.register_blueprint(uploads_bp)
    app.register_blueprint(admin_bp)

    app.add_template_filter(format_price, "price")
    app.add_template_filter(format_date, "date")
    app.add_template_filter(format_datetime, "datetime")
    app.add_template_filter(text_to_html, "text_to_html")

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:4321",
            "http://127.0.0.1:4321",
            app.config["SITE_URL"],
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
