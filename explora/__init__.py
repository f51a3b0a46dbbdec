"""
Explora Tours - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

from flask import Flask
from explora.extensions import db, login_manager
from explora.config import Config, AuthSettings


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    _configure_logging(app)

    # Auth values are read once here and injected everywhere else
    app.extensions['explora_auth'] = AuthSettings.from_mapping(app.config)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.signin'

    # Register blueprints
    from explora.auth import auth_bp
    from explora.admin import admin_bp
    from explora.api import api_bp
    from explora.dashboard import dashboard_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_bp, url_prefix='/api/admin')
    app.register_blueprint(dashboard_bp)

    from explora import gatekeeper
    gatekeeper.install(app)

    # Context processor for the session token and admin flag
    @app.context_processor
    def inject_session_token():
        from explora.services.tokens import current_session_token, has_admin_capability
        token = current_session_token()
        return dict(session_token=token, is_admin=has_admin_capability(token))

    # User loader for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        from explora.models import User
        from explora.services.tokens import SENTINEL_ID, SystemAdmin
        if user_id == SENTINEL_ID:
            return SystemAdmin()
        return db.session.get(User, user_id)

    # Create database tables
    with app.app_context():
        _ensure_sqlite_dir(app.config['SQLALCHEMY_DATABASE_URI'])
        db.create_all()

    if not app.extensions['explora_auth'].admin_password_hash:
        app.logger.warning('ADMIN_PASSWORD_HASH is not set; admin login will fail')

    return app


def _configure_logging(app):
    level_name = str(app.config.get('LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    logging.getLogger('explora').setLevel(level)


def _ensure_sqlite_dir(uri):
    prefix = 'sqlite:///'
    if uri.startswith(prefix) and ':memory:' not in uri:
        directory = os.path.dirname(uri[len(prefix):])
        if directory:
            os.makedirs(directory, exist_ok=True)
