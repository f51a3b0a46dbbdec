"""
Services Package

Exports all services for easy importing.
"""

from explora.services.tokens import (
    SENTINEL_ID,
    SessionToken,
    SystemAdmin,
    current_session_token,
    has_admin_capability,
    issue_admin_token,
    is_valid_admin_token,
    verify_admin_token,
)
from explora.services.admin_credentials import (
    AdminAuthError,
    AdminCredentialService,
    hash_admin_password,
)
from explora.services.accounts import (
    AccountError,
    SignInError,
    RegistrationError,
    VerificationError,
    authenticate_user,
    register_user,
    issue_verification_token,
    verify_email,
    resend_verification,
    change_password,
)

__all__ = [
    'SENTINEL_ID',
    'SessionToken',
    'SystemAdmin',
    'current_session_token',
    'has_admin_capability',
    'issue_admin_token',
    'is_valid_admin_token',
    'verify_admin_token',
    'AdminAuthError',
    'AdminCredentialService',
    'hash_admin_password',
    'AccountError',
    'SignInError',
    'RegistrationError',
    'VerificationError',
    'authenticate_user',
    'register_user',
    'issue_verification_token',
    'verify_email',
    'resend_verification',
    'change_password',
]
