"""
Request Gatekeeper

Path-based access rules applied before any view runs. `evaluate` is a pure
function of the request path and the session token so the rules can be
tested without a request; `install` wires it into a Flask app.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from flask import jsonify, redirect, request

from explora.models import Role
from explora.services.tokens import current_session_token, has_admin_capability

logger = logging.getLogger(__name__)

ADMIN_LOGIN = '/admin/login'
USER_LOGIN = '/auth/signin'
LOGIN_PAGES = ('/auth/signin', '/login')

ADMIN_PREFIXES = ('/dashboard/admin', '/admin')
GUIDE_PREFIXES = ('/dashboard/guia', '/guia')
MODERATOR_PREFIXES = ('/dashboard/moderator', '/moderator')

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.svg', '.webp', '.ico')

# Never evaluated at all. /api/admin endpoints check the admin bearer token.
EXCLUDED_PREFIXES = (
    '/api/auth',
    '/api/admin',
    '/_next/static',
    '/_next/image',
    '/static/',
    '/icons/',
    '/screenshots/',
)
EXCLUDED_PATHS = ('/favicon.ico', '/manifest.json', '/sw.js')

PUBLIC_PATHS = ('/', '/login', ADMIN_LOGIN, '/manifest.json', '/sw.js')
PUBLIC_PREFIXES = (
    '/auth',
    '/api/auth',
    '/checkout',
    '/blog',
    '/debug',
    '/_next',
    '/favicon',
    '/workbox-',
    '/icons/',
    '/screenshots/',
)
PUBLIC_SEGMENTS = ('/images/', '/static/')


ALLOW = 'allow'
REDIRECT = 'redirect'


@dataclass(frozen=True)
class Decision:
    action: str
    location: Optional[str] = None
    reason: str = ''

    @property
    def allowed(self):
        return self.action == ALLOW


def _allow(reason=''):
    return Decision(ALLOW, reason=reason)


def _redirect(location, reason):
    return Decision(REDIRECT, location=location, reason=reason)


def _under(path, prefixes):
    """Prefix match on whole path segments: /admin matches /admin/x, not /administrator."""
    return any(path == p or path.startswith(p + '/') for p in prefixes)


def in_role_area(path):
    return _under(path, ADMIN_PREFIXES + GUIDE_PREFIXES + MODERATOR_PREFIXES)


def is_excluded(path):
    return (
        path in EXCLUDED_PATHS
        or path.startswith(EXCLUDED_PREFIXES)
        or (path.lower().endswith(IMAGE_EXTENSIONS) and not in_role_area(path))
    )


def is_public(path):
    """Allow-list check. Role areas are never public apart from the login pages listed by name."""
    if path in PUBLIC_PATHS:
        return True
    if in_role_area(path):
        return False
    return (
        path.startswith(PUBLIC_PREFIXES)
        or any(segment in path for segment in PUBLIC_SEGMENTS)
        or path.lower().endswith(IMAGE_EXTENSIONS)
    )


def is_admin_path(path):
    return _under(path, ADMIN_PREFIXES)


def login_page_for(path):
    return ADMIN_LOGIN if is_admin_path(path) else USER_LOGIN


def dashboard_for(token):
    if has_admin_capability(token):
        return '/dashboard/admin'
    if token.role == Role.GUIA:
        return '/dashboard/guia'
    return '/dashboard'


def evaluate(path, token):
    """Decide whether a request for `path` may proceed.

    `token` is the caller's SessionToken or None when anonymous.
    """
    if is_excluded(path):
        return _allow('excluded')

    if token is not None and path in LOGIN_PAGES:
        return _redirect(dashboard_for(token), 'already signed in')

    if is_public(path):
        return _allow('public')

    if token is None:
        query = urlencode({'callbackUrl': path})
        return _redirect(f'{login_page_for(path)}?{query}', 'not signed in')

    if is_admin_path(path):
        if not has_admin_capability(token):
            return _redirect(ADMIN_LOGIN, 'admin capability required')
    elif _under(path, GUIDE_PREFIXES):
        if token.role != Role.GUIA:
            return _redirect(USER_LOGIN, 'guide role required')
    elif _under(path, MODERATOR_PREFIXES):
        if token.role not in (Role.MODERATOR, Role.ADMIN) and not has_admin_capability(token):
            return _redirect(USER_LOGIN, 'moderator role required')

    return _allow()


def _enforce():
    path = request.path
    decision = evaluate(path, current_session_token())
    if decision.allowed:
        return None

    logger.debug('Gatekeeper redirect %s -> %s (%s)', path, decision.location, decision.reason)
    if path.startswith('/api/'):
        return jsonify({'error': 'Unauthorized'}), 401
    return redirect(decision.location)


def install(app):
    """Run the gatekeeper in front of every request to `app`."""
    app.before_request(_enforce)


def safe_callback(url):
    """Only same-site absolute paths are honoured as post-login targets."""
    if not url or not url.startswith('/') or url.startswith('//') or '\\' in url:
        return None
    return url
