"""
Configuration settings for the Explora tours site
"""
import os
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app


class Config:
    """Flask application configuration"""

    # Flask secret key for sessions
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'

    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'explora.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Admin Credentials (master password, separate from user auth)
    ADMIN_PASSWORD_HASH = os.environ.get('ADMIN_PASSWORD_HASH') or ''
    JWT_SECRET = os.environ.get('JWT_SECRET') or os.environ.get('NEXTAUTH_SECRET') or 'your-jwt-secret'
    ADMIN_TOKEN_LIFETIME = timedelta(hours=8)

    VERIFICATION_TOKEN_LIFETIME = timedelta(hours=24)


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET = 'test-jwt-secret'
    LOG_LEVEL = 'DEBUG'


@dataclass(frozen=True)
class AuthSettings:
    """Read-only auth values captured once when the app is created."""

    admin_password_hash: str
    jwt_secret: str
    admin_token_lifetime: timedelta = timedelta(hours=8)
    algorithm: str = 'HS256'

    @classmethod
    def from_mapping(cls, config):
        return cls(
            admin_password_hash=(config.get('ADMIN_PASSWORD_HASH') or '').strip(),
            jwt_secret=config['JWT_SECRET'],
            admin_token_lifetime=config.get('ADMIN_TOKEN_LIFETIME', timedelta(hours=8)),
        )


def current_auth_settings():
    """AuthSettings of the running application."""
    return current_app.extensions['explora_auth']
