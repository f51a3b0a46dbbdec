"""
Admin API Blueprint

JSON endpoints under /api/admin. Only /auth is open; every other endpoint
verifies the admin bearer token itself.
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__)

from explora.api import routes  # noqa: E402, F401
