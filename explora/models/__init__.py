"""
Models Package

Exports all models for easy importing.
"""

from explora.models.user import User, LoginAttempt, Role, UserStatus
from explora.models.verification import VerificationToken

__all__ = ['User', 'LoginAttempt', 'Role', 'UserStatus', 'VerificationToken']
