"""
Account Service

Credential sign-in, registration, email verification and password changes
for site users.
"""

import logging
import re
import secrets
from datetime import datetime, timedelta

from werkzeug.security import generate_password_hash, check_password_hash

from explora.extensions import db
from explora.models import User, LoginAttempt, Role, UserStatus, VerificationToken

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MIN_PASSWORD_LENGTH = 6


class SignInError(Exception):
    code = 'CredentialsSignin'
    message = 'Invalid email or password.'

    def __str__(self):
        return self.message


class InvalidCredentials(SignInError):
    pass


class EmailNotVerified(SignInError):
    code = 'EMAIL_NOT_VERIFIED'
    message = 'Please verify your email address before signing in.'


class AccountSuspended(SignInError):
    code = 'ACCOUNT_SUSPENDED'
    message = 'This account has been suspended.'


class RegistrationError(Exception):
    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class VerificationError(Exception):
    """Carries one of MissingToken, TokenExpired, UserNotFound."""

    def __init__(self, code):
        super().__init__(code)
        self.code = code


class AccountError(Exception):
    """Rejected account change; `status_code` is the HTTP status to answer with."""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _record_attempt(email, success, ip, user_agent):
    db.session.add(LoginAttempt(email=email, success=success, ip=ip, user_agent=user_agent))


def authenticate_user(email, password, ip='unknown', user_agent='unknown'):
    """Check email and password and return the matching active, verified user."""
    email = (email or '').strip().lower()
    if not email or not password or not EMAIL_RE.match(email):
        raise InvalidCredentials()

    user = User.query.filter_by(email=email).first()
    if not user or not user.hashed_password:
        raise InvalidCredentials()

    if not user.email_verified:
        raise EmailNotVerified()

    if user.is_blocked:
        raise AccountSuspended()

    if not check_password_hash(user.hashed_password, password):
        _record_attempt(email, False, ip, user_agent)
        db.session.commit()
        logger.info('Failed sign-in for user %s', user.id)
        raise InvalidCredentials()

    _record_attempt(email, True, ip, user_agent)
    user.last_login = datetime.utcnow()
    db.session.commit()
    logger.info('User %s signed in', user.id)
    return user


def register_user(email, password, name):
    email = (email or '').strip().lower()
    name = (name or '').strip()

    details = {}
    if not EMAIL_RE.match(email):
        details['email'] = 'Invalid email address.'
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        details['password'] = f'Password must be at least {MIN_PASSWORD_LENGTH} characters long.'
    if not name:
        details['name'] = 'Name is required.'
    if details:
        raise RegistrationError('Invalid data', details)

    if User.query.filter_by(email=email).first():
        raise RegistrationError('This email is already registered')

    user = User(
        email=email,
        name=name,
        hashed_password=generate_password_hash(password, method='pbkdf2:sha256'),
        role=Role.USER,
        status=UserStatus.ACTIVE,
    )
    try:
        db.session.add(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info('Registered user %s', user.id)
    return user


def issue_verification_token(email, lifetime=timedelta(hours=24)):
    """Replace any earlier token for the address with a fresh one."""
    VerificationToken.query.filter_by(identifier=email).delete()
    token = VerificationToken(
        identifier=email,
        token=secrets.token_hex(32),
        expires=datetime.utcnow() + lifetime,
    )
    db.session.add(token)
    db.session.commit()
    logger.info('Issued verification token for %s', email)
    return token


def verify_email(email, token, now=None):
    email = (email or '').strip().lower()
    if not email or not token:
        raise VerificationError('MissingToken')

    now = now or datetime.utcnow()
    record = VerificationToken.query.filter(
        VerificationToken.identifier == email,
        VerificationToken.token == token,
        VerificationToken.expires > now,
    ).first()
    if record is None:
        raise VerificationError('TokenExpired')

    user = User.query.filter_by(email=email).first()
    if user is None:
        raise VerificationError('UserNotFound')

    user.email_verified = now
    db.session.delete(record)
    db.session.commit()
    logger.info('Verified email for user %s', user.id)
    return user


def resend_verification(email, lifetime=timedelta(hours=24)):
    """Issue a new verification token for an account that is not yet verified."""
    email = (email or '').strip().lower()
    if not EMAIL_RE.match(email):
        raise AccountError('Invalid email address.')

    user = User.query.filter_by(email=email).first()
    if user is None:
        raise AccountError('User not found.', 404)
    if user.email_verified:
        raise AccountError('This email is already verified.')

    return issue_verification_token(email, lifetime)


def change_password(user, current_password, new_password):
    current_password = (current_password or '').strip()
    new_password = (new_password or '').strip()

    if not current_password or not new_password:
        raise AccountError('Current and new password are required.')
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise AccountError(f'New password must be at least {MIN_PASSWORD_LENGTH} characters long.')
    if current_password == new_password:
        raise AccountError('New password must be different from the current one.')
    if not user.hashed_password:
        raise AccountError('No password is set for this account.')
    if not check_password_hash(user.hashed_password, current_password):
        raise AccountError('Current password is incorrect.')

    user.hashed_password = generate_password_hash(new_password, method='pbkdf2:sha256')
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info('Password changed for user %s', user.id)
    return user
