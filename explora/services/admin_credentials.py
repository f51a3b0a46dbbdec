"""
Admin Credential Service

Verifies the master admin password against a bcrypt hash taken from the
environment and mints an admin token on success.
"""

import logging

import bcrypt

from explora.services.tokens import issue_admin_token

logger = logging.getLogger(__name__)

BCRYPT_PREFIXES = ('$2a$', '$2b$')
DEFAULT_ROUNDS = 12


class AdminAuthError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class MissingPassword(AdminAuthError):
    status_code = 400
    message = 'Password required'


class InvalidAdminPassword(AdminAuthError):
    status_code = 401
    message = 'Incorrect password'


class AdminHashNotConfigured(AdminAuthError):
    status_code = 500
    message = 'Admin password hash not configured'


class AdminHashMalformed(AdminAuthError):
    status_code = 500
    message = 'Admin password hash is malformed'


class PasswordCheckFailed(AdminAuthError):
    status_code = 500
    message = 'Error verifying password'


def _normalize_password(password):
    """bcrypt only looks at the first 72 bytes."""
    return password.encode('utf-8')[:72]


def hash_admin_password(password, rounds=DEFAULT_ROUNDS):
    """Hash a master password in the format ADMIN_PASSWORD_HASH expects."""
    return bcrypt.hashpw(_normalize_password(password), bcrypt.gensalt(rounds)).decode('ascii')


class AdminCredentialService:
    """Master-password check bound to one set of auth settings."""

    def __init__(self, settings):
        self.settings = settings

    def check_configuration(self):
        stored = self.settings.admin_password_hash
        if not stored:
            logger.error('ADMIN_PASSWORD_HASH is not set')
            raise AdminHashNotConfigured()
        if not stored.startswith(BCRYPT_PREFIXES):
            logger.error('ADMIN_PASSWORD_HASH is not a bcrypt hash (expected %s prefix)',
                         ' or '.join(BCRYPT_PREFIXES))
            raise AdminHashMalformed()
        return stored

    def verify(self, password):
        if not password:
            raise MissingPassword()
        stored = self.check_configuration()
        try:
            matched = bcrypt.checkpw(_normalize_password(password), stored.encode('ascii'))
        except ValueError:
            logger.exception('bcrypt rejected the configured admin hash')
            raise PasswordCheckFailed()
        logger.info('Admin password check %s', 'succeeded' if matched else 'failed')
        return matched

    def authenticate(self, password, now=None):
        """Return a signed admin token or raise an AdminAuthError."""
        if not self.verify(password):
            raise InvalidAdminPassword()
        return issue_admin_token(self.settings, now=now)
