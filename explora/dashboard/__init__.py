"""
Dashboard Blueprint

Landing page and the per-role dashboards.
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__)

from explora.dashboard import routes  # noqa: E402, F401
