"""
Flask Extensions

Admin authentication is token-based and kept apart from the Flask-Login
user session; the two only meet in the gatekeeper.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Database instance
db = SQLAlchemy()

# Login manager for user sessions (NOT for the admin token)
login_manager = LoginManager()
