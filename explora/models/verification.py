"""
Email Verification Token Model
"""

from explora.extensions import db


class VerificationToken(db.Model):
    """One-time token mailed to a new account to confirm its address"""
    __tablename__ = 'verification_tokens'

    id = db.Column(db.Integer, primary_key=True)
    identifier = db.Column(db.String(255), nullable=False, index=True)
    token = db.Column(db.String(128), unique=True, nullable=False)
    expires = db.Column(db.DateTime, nullable=False)

    __table_args__ = (db.UniqueConstraint('identifier', 'token'),)

    def __repr__(self):
        return f'<VerificationToken {self.identifier} expires={self.expires}>'
