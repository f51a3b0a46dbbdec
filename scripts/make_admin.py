"""Set the role of an existing account.

Usage: python scripts/make_admin.py user@example.com [ROLE]
"""
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from explora import create_app
from explora.extensions import db
from explora.models import User, Role

if len(sys.argv) < 2:
    print(__doc__)
    sys.exit(2)

email = sys.argv[1].strip().lower()
role = sys.argv[2].upper() if len(sys.argv) > 2 else Role.ADMIN

if role not in Role.ALL:
    print(f"Unknown role {role}; expected one of {', '.join(Role.ALL)}")
    sys.exit(2)

app = create_app()

with app.app_context():
    user = User.query.filter_by(email=email).first()

    if not user:
        print(f"No user with email {email}")
        sys.exit(1)

    user.role = role
    db.session.commit()
    print(f"{email} is now {role}")
