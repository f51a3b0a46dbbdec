"""
Admin Blueprint

Master-password login for the admin panel. It is independent of user
accounts: a correct password yields an admin token plus the system admin
session identity.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from explora.admin import routes  # noqa: E402, F401
