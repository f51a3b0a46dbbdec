from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from explora.config import AuthSettings
from explora.models import Role
from explora.services.admin_credentials import (
    AdminCredentialService,
    AdminHashMalformed,
    AdminHashNotConfigured,
    InvalidAdminPassword,
    MissingPassword,
)
from explora.services.tokens import decode_admin_token, issue_admin_token, is_valid_admin_token

from conftest import MASTER_PASSWORD, make_app, sign_in


def settings_for(admin_hash):
    return AuthSettings(admin_password_hash=admin_hash, jwt_secret='unit-secret')


def admin_token(client):
    r = client.post('/api/admin/auth', json={'password': MASTER_PASSWORD})
    assert r.status_code == 200
    return r.get_json()['token']


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


# -- credential service ---------------------------------------------------

def test_correct_password_yields_eight_hour_admin_token(master_hash):
    settings = settings_for(master_hash)
    before = datetime.now(timezone.utc)

    token = AdminCredentialService(settings).authenticate(MASTER_PASSWORD)

    claims = decode_admin_token(token, settings)
    assert claims['isAdmin'] is True
    assert claims['exp'] - claims['iat'] == 8 * 3600
    expected_exp = (before + timedelta(hours=8)).timestamp()
    assert abs(claims['exp'] - expected_exp) < 5
    assert abs(claims['timestamp'] / 1000 - before.timestamp()) < 5


def test_wrong_password_is_rejected(master_hash):
    with pytest.raises(InvalidAdminPassword):
        AdminCredentialService(settings_for(master_hash)).authenticate('wrong')


@pytest.mark.parametrize('password', [None, ''])
def test_missing_password_is_a_client_error(master_hash, password):
    with pytest.raises(MissingPassword) as exc:
        AdminCredentialService(settings_for(master_hash)).authenticate(password)
    assert exc.value.status_code == 400


def test_missing_password_is_reported_before_configuration():
    with pytest.raises(MissingPassword):
        AdminCredentialService(settings_for('')).authenticate('')


def test_unset_hash_is_a_server_error():
    with pytest.raises(AdminHashNotConfigured) as exc:
        AdminCredentialService(settings_for('')).authenticate(MASTER_PASSWORD)
    assert exc.value.status_code == 500


@pytest.mark.parametrize('stored', [MASTER_PASSWORD, '2b$12$abcdefghijklmnopqrstuv', '$argon2id$v=19$m=65536'])
def test_hash_without_bcrypt_prefix_is_malformed(stored):
    with pytest.raises(AdminHashMalformed):
        AdminCredentialService(settings_for(stored)).authenticate(MASTER_PASSWORD)


def test_failed_attempts_do_not_lock_or_change_the_hash(master_hash):
    settings = settings_for(master_hash)
    service = AdminCredentialService(settings)
    for _ in range(10):
        with pytest.raises(InvalidAdminPassword):
            service.authenticate('wrong')
    assert settings.admin_password_hash == master_hash
    assert service.authenticate(MASTER_PASSWORD)


def test_token_signed_with_other_secret_is_invalid(master_hash):
    token = issue_admin_token(settings_for(master_hash))
    other = AuthSettings(admin_password_hash=master_hash, jwt_secret='another-secret')
    assert is_valid_admin_token(token, settings_for(master_hash))
    assert not is_valid_admin_token(token, other)


def test_expired_token_is_invalid(master_hash):
    settings = settings_for(master_hash)
    token = issue_admin_token(settings, now=datetime.now(timezone.utc) - timedelta(hours=9))
    assert not is_valid_admin_token(token, settings)


@pytest.mark.parametrize('token', [None, '', 'not-a-jwt'])
def test_garbage_tokens_are_invalid(master_hash, token):
    assert not is_valid_admin_token(token, settings_for(master_hash))


# -- POST /api/admin/auth -------------------------------------------------

def test_endpoint_accepts_master_password(client):
    r = client.post('/api/admin/auth', json={'password': MASTER_PASSWORD})
    assert r.status_code == 200
    assert r.get_json()['token']


def test_endpoint_rejects_wrong_password(client):
    r = client.post('/api/admin/auth', json={'password': 'wrong'})
    assert r.status_code == 401
    assert 'token' not in r.get_json()


@pytest.mark.parametrize('kwargs', [
    {'json': {}},
    {'json': {'password': ''}},
    {'json': {'password': 123}},
    {'data': 'password=x'},
])
def test_endpoint_requires_password(client, kwargs):
    r = client.post('/api/admin/auth', **kwargs)
    assert r.status_code == 400
    assert r.get_json()['error']


@pytest.mark.parametrize('admin_hash', ['', 'plain-text-password'])
def test_endpoint_misconfigured_hash_is_500(admin_hash):
    client = make_app(admin_hash).test_client()
    r = client.post('/api/admin/auth', json={'password': MASTER_PASSWORD})
    assert r.status_code == 500
    assert r.get_json()['error']
    assert 'plain-text-password' not in r.get_data(as_text=True)


def test_endpoint_needs_no_user_session(client):
    # reachable while anonymous: admin login is independent of user sign-in
    r = client.post('/api/admin/auth', json={'password': MASTER_PASSWORD})
    assert r.status_code == 200


# -- bearer-protected admin API -------------------------------------------

def test_stats_requires_admin_token(client):
    r = client.get('/api/admin/stats')
    assert r.status_code == 401
    assert r.get_json() == {'error': 'Unauthorized'}


def test_stats_with_admin_token(client, make_user):
    make_user('ana@example.com')
    make_user('guia@example.com', role=Role.GUIA)
    token = admin_token(client)

    r = client.get('/api/admin/stats', headers=bearer(token))
    assert r.status_code == 200
    data = r.get_json()
    assert data['total_users'] == 2
    assert data['users_by_role'][Role.GUIA] == 1
    assert data['users_by_role'][Role.ADMIN] == 0
    assert data['login_attempts']['total'] == 0


def test_admin_token_accepted_from_cookie(client):
    client.set_cookie('admin_token', admin_token(client))
    r = client.get('/api/admin/stats')
    assert r.status_code == 200


def test_expired_bearer_token_is_rejected(client, auth_settings):
    token = issue_admin_token(auth_settings, now=datetime.now(timezone.utc) - timedelta(hours=9))
    r = client.get('/api/admin/stats', headers=bearer(token))
    assert r.status_code == 401


def test_token_without_admin_claim_is_rejected(client, auth_settings):
    token = jwt.encode(
        {'isAdmin': False, 'exp': datetime.now(timezone.utc) + timedelta(hours=1)},
        auth_settings.jwt_secret,
        algorithm='HS256',
    )
    r = client.get('/api/admin/stats', headers=bearer(token))
    assert r.status_code == 401


def test_user_session_alone_does_not_open_admin_api(client, make_user):
    make_user('boss@example.com', role=Role.ADMIN)
    sign_in(client, 'boss@example.com')
    r = client.get('/api/admin/stats')
    assert r.status_code == 401


def test_list_and_filter_users(client, make_user):
    make_user('ana@example.com')
    make_user('guia@example.com', role=Role.GUIA)
    headers = bearer(admin_token(client))

    r = client.get('/api/admin/users', headers=headers)
    assert r.status_code == 200
    assert {u['email'] for u in r.get_json()} == {'ana@example.com', 'guia@example.com'}

    r = client.get('/api/admin/users?role=GUIA', headers=headers)
    assert [u['email'] for u in r.get_json()] == ['guia@example.com']

    r = client.get('/api/admin/users?role=PILOT', headers=headers)
    assert r.status_code == 400


def test_change_user_role(client, make_user):
    user_id = make_user('ana@example.com')
    headers = bearer(admin_token(client))

    r = client.patch(f'/api/admin/users/{user_id}/role', json={'role': Role.GUIA}, headers=headers)
    assert r.status_code == 200
    assert r.get_json()['role'] == Role.GUIA

    r = client.patch(f'/api/admin/users/{user_id}/role', json={'role': 'PILOT'}, headers=headers)
    assert r.status_code == 400

    r = client.patch('/api/admin/users/missing/role', json={'role': Role.GUIA}, headers=headers)
    assert r.status_code == 404


def test_change_role_requires_admin_token(client, make_user):
    user_id = make_user('ana@example.com')
    r = client.patch(f'/api/admin/users/{user_id}/role', json={'role': Role.ADMIN})
    assert r.status_code == 401
