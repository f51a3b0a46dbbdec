"""
User Model
"""

import uuid
from datetime import datetime

from flask_login import UserMixin

from explora.extensions import db


class Role:
    USER = 'USER'
    GUIA = 'GUIA'
    MODERATOR = 'MODERATOR'
    ADMIN = 'ADMIN'

    ALL = (USER, GUIA, MODERATOR, ADMIN)


class UserStatus:
    ACTIVE = 'ACTIVE'
    SUSPENDED = 'SUSPENDED'
    DELETED = 'DELETED'

    BLOCKED = (SUSPENDED, DELETED)


def _new_id():
    return uuid.uuid4().hex


class User(UserMixin, db.Model):
    """Site account for travellers, guides, moderators and admins"""
    __tablename__ = 'users'

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120))
    hashed_password = db.Column(db.String(255))
    role = db.Column(db.String(20), default=Role.USER, nullable=False)
    status = db.Column(db.String(20), default=UserStatus.ACTIVE, nullable=False)
    email_verified = db.Column(db.DateTime)
    last_login = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_blocked(self):
        return self.status in UserStatus.BLOCKED

    def __repr__(self):
        return f'<User {self.email} {self.role}>'


class LoginAttempt(db.Model):
    """Audit row written for every credential sign-in attempt"""
    __tablename__ = 'login_attempts'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    success = db.Column(db.Boolean, default=False, nullable=False)
    ip = db.Column(db.String(64), default='unknown')
    user_agent = db.Column(db.String(255), default='unknown')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<LoginAttempt {self.email} success={self.success}>'
