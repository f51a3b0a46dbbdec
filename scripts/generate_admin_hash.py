"""Print a bcrypt hash for the ADMIN_PASSWORD_HASH environment variable.

Usage: python scripts/generate_admin_hash.py [password]
(prompts when no password is given)
"""
import getpass
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from explora.services.admin_credentials import BCRYPT_PREFIXES, hash_admin_password

password = sys.argv[1] if len(sys.argv) > 1 else getpass.getpass('Admin password: ')
if not password:
    print('Password must not be empty')
    sys.exit(2)

hashed = hash_admin_password(password)
assert hashed.startswith(BCRYPT_PREFIXES)

print(hashed)
print()
print('Add it to your .env in single quotes so the $ signs survive:')
print(f"ADMIN_PASSWORD_HASH='{hashed}'")
