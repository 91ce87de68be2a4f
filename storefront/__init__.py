"""
SneakZone Storefront - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os
import sqlite3

from flask import Flask
from sqlalchemy import event
from sqlalchemy.engine import Engine

from storefront.config import Config
from storefront.extensions import db, login_manager, csrf as csrf_protect, limiter

logger = logging.getLogger(__name__)


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless asked per connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    from storefront.logging_config import configure_logging
    configure_logging(
        level=app.config['LOG_LEVEL'],
        log_dir=app.config['LOG_DIR'],
        to_file=app.config['LOG_TO_FILE'],
    )

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)

    from storefront.sessions import init_sessions
    from storefront.ratelimit import init_rate_limits
    from storefront.errors import register_error_handlers, error_response, AuthenticationRequired

    init_sessions(app)
    # Throttling runs before the CSRF check, as its hooks are installed first
    init_rate_limits(app, limiter)
    csrf_protect.init_app(app)
    register_error_handlers(app)

    # User loader for Flask-Login: disabled accounts resolve to nobody
    @login_manager.user_loader
    def load_user(user_id):
        from storefront.models import User
        try:
            user = db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None
        if user is None or not user.is_active:
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response(AuthenticationRequired())

    # Register blueprints
    from storefront.auth import auth_bp
    from storefront.users import users_bp
    from storefront.admin import admin_bp
    from storefront.catalog import catalog_bp
    from storefront.csrf import csrf_bp

    app.register_blueprint(catalog_bp, url_prefix='/api')
    app.register_blueprint(csrf_bp, url_prefix='/api')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.route('/')
    def index():
        """Single-page application shell"""
        return app.send_static_file('index.html')

    from storefront.cli import register_commands
    register_commands(app)

    # Create database tables
    with app.app_context():
        uri = app.config['SQLALCHEMY_DATABASE_URI']
        if uri.startswith('sqlite:///') and ':memory:' not in uri:
            os.makedirs(os.path.dirname(os.path.abspath(uri[len('sqlite:///'):])), exist_ok=True)
        db.create_all()
        if app.config['SEED_DEFAULT_DATA']:
            ensure_default_data(app)

    return app


def ensure_default_data(app):
    """Ensure the default administrator and catalog exist."""
    from storefront.services.admin import ensure_admin
    from storefront.services.catalog import ensure_default_products

    email = app.config['DEFAULT_ADMIN_EMAIL']
    _, created = ensure_admin(email, app.config['DEFAULT_ADMIN_PASSWORD'])
    if created:
        logger.info('Created default administrator %s', email)

    created = ensure_default_products()
    if created:
        logger.info('Created %d default products', created)
