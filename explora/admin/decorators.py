"""
Admin Decorators

Admin pages are gated by the admin token kept in the session; admin API
endpoints re-verify the bearer token on every call.
"""

from functools import wraps
from flask import jsonify, render_template, request, session

from explora.admin.guard import AdminTokenStore
from explora.config import current_auth_settings
from explora.services.tokens import is_valid_admin_token, verify_admin_token


def admin_token_store():
    return AdminTokenStore(session, current_auth_settings().admin_token_lifetime)


def admin_session_required(f):
    """Render the admin login form unless an unexpired admin token is stored."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not admin_token_store().restore():
            return render_template('admin/login.html', next_url=request.path)
        return f(*args, **kwargs)
    return wrapper


def admin_token_required(f):
    """Reject API calls that do not carry a valid admin token.

    Besides the request itself, the admin session opened through
    /admin/login is accepted.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        settings = current_auth_settings()
        if not (verify_admin_token(request, settings)
                or is_valid_admin_token(admin_token_store().token, settings)):
            return jsonify({'error': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return wrapper
