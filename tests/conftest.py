from datetime import datetime
from urllib.parse import urlparse, parse_qs

import pytest
from werkzeug.security import generate_password_hash

from explora import create_app
from explora.config import TestConfig
from explora.extensions import db
from explora.models import User, Role, UserStatus
from explora.services.admin_credentials import hash_admin_password

MASTER_PASSWORD = 'AdminExplore2024!'


@pytest.fixture(scope='session')
def master_hash():
    # few rounds keep the suite fast; the format is the same
    return hash_admin_password(MASTER_PASSWORD, rounds=4)


def make_app(admin_hash):
    class Config(TestConfig):
        ADMIN_PASSWORD_HASH = admin_hash
    return create_app(Config)


@pytest.fixture()
def app(master_hash):
    return make_app(master_hash)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def auth_settings(app):
    return app.extensions['explora_auth']


@pytest.fixture()
def make_user(app):
    def _make_user(email, password='secret123', role=Role.USER, verified=True,
                   status=UserStatus.ACTIVE, name=None):
        with app.app_context():
            user = User(
                email=email,
                name=name or email.split('@')[0],
                hashed_password=generate_password_hash(password),
                role=role,
                status=status,
                email_verified=datetime.utcnow() if verified else None,
            )
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make_user


def sign_in(client, email, password='secret123', **extra):
    data = {'email': email, 'password': password}
    data.update(extra)
    return client.post('/auth/signin', data=data)


def location(response):
    return urlparse(response.headers['Location'])


def location_query(response):
    return parse_qs(location(response).query)
