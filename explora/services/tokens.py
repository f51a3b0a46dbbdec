"""
Token Service

Session tokens describe the signed-in user on every request; admin tokens
are short-lived JWTs minted by the master-password endpoint and checked
again by every admin API call.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional

from flask_login import UserMixin, current_user
from jose import jwt, JWTError

from explora.models import Role

logger = logging.getLogger(__name__)

# Fixed identity of a master-password sign-in; it has no database row.
SENTINEL_ID = 'admin-system'

ADMIN_TOKEN_COOKIE = 'admin_token'


@dataclass(frozen=True)
class SessionToken:
    id: str
    role: Optional[str] = None
    email_verified: Optional[datetime] = None
    access_token: Optional[str] = None

    @classmethod
    def from_user(cls, user):
        return cls(
            id=str(user.get_id()),
            role=getattr(user, 'role', None),
            email_verified=getattr(user, 'email_verified', None),
        )

    def to_dict(self):
        data = asdict(self)
        if self.email_verified is not None:
            data['email_verified'] = self.email_verified.isoformat()
        return data


class SystemAdmin(UserMixin):
    """Session identity for whoever proved knowledge of the master password."""

    id = SENTINEL_ID
    role = Role.ADMIN
    email = 'admin@system.local'
    name = 'System Administrator'
    email_verified = None

    def __repr__(self):
        return '<SystemAdmin>'


def has_admin_capability(token):
    """Single check for admin rights: the ADMIN role or the sentinel identity."""
    if token is None:
        return False
    return token.role == Role.ADMIN or token.id == SENTINEL_ID


def current_session_token():
    """Session token for the current request, or None when anonymous."""
    if not current_user or not current_user.is_authenticated:
        return None
    return SessionToken.from_user(current_user)


def _utcnow():
    return datetime.now(timezone.utc)


def issue_admin_token(settings, now=None):
    """Sign a token asserting admin capability, valid for the configured lifetime."""
    now = now or _utcnow()
    claims = {
        'isAdmin': True,
        'timestamp': int(now.timestamp() * 1000),
        'iat': now,
        'exp': now + settings.admin_token_lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.algorithm)


def decode_admin_token(token, settings):
    """Decode and validate signature and expiry. Raises JWTError on failure."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.algorithm])


def is_valid_admin_token(token, settings):
    if not token:
        return False
    try:
        claims = decode_admin_token(token, settings)
    except JWTError:
        return False
    return claims.get('isAdmin') is True


def admin_token_from_request(request):
    auth = request.headers.get('Authorization', '')
    if auth.startswith('Bearer '):
        token = auth[len('Bearer '):].strip()
        if token:
            return token
    return request.cookies.get(ADMIN_TOKEN_COOKIE)


def verify_admin_token(request, settings):
    """True when the request carries a valid admin token.

    Every failure collapses to False so callers cannot tell a bad signature
    from an expired or missing token.
    """
    return is_valid_admin_token(admin_token_from_request(request), settings)
