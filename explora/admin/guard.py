"""
Admin Token Store

Keeps the admin token and its absolute expiry in session-scoped storage
(the signed session cookie for browser requests). Expiry is checked when
an admin page loads; admin API calls verify the token itself on the server.
"""

import logging
import time
from datetime import timedelta

logger = logging.getLogger(__name__)

TOKEN_KEY = 'admin_token'
EXPIRY_KEY = 'admin_token_expiry'


def now_ms():
    return int(time.time() * 1000)


class AdminTokenStore:
    """Two-key view over any mutable mapping."""

    def __init__(self, storage, lifetime=timedelta(hours=8)):
        self.storage = storage
        self.lifetime = lifetime

    @property
    def token(self):
        return self.storage.get(TOKEN_KEY)

    @property
    def expires_at(self):
        try:
            return int(self.storage.get(EXPIRY_KEY))
        except (TypeError, ValueError):
            return None

    def restore(self, now=None):
        """True if a token with a future expiry is stored; otherwise clear it."""
        now = now_ms() if now is None else now
        expiry = self.expires_at
        if self.token and expiry is not None and now < expiry:
            return True
        if TOKEN_KEY in self.storage or EXPIRY_KEY in self.storage:
            logger.debug('Discarding expired admin token')
            self.clear()
        return False

    def persist(self, token, now=None):
        now = now_ms() if now is None else now
        expiry = now + int(self.lifetime.total_seconds() * 1000)
        self.storage[TOKEN_KEY] = token
        self.storage[EXPIRY_KEY] = str(expiry)
        return expiry

    def clear(self):
        self.storage.pop(TOKEN_KEY, None)
        self.storage.pop(EXPIRY_KEY, None)
