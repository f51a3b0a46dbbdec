"""
Auth Blueprint

User sign-in, registration and email verification.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from explora.auth import routes  # noqa: E402, F401
