from datetime import timedelta

from flask_jwt_extended import create_access_token

from conftest import create_user
from marketplace import db
from marketplace.models import User


def register(client, **overrides):
    data = {
        'email': 'Dana@Mail.com',
        'password': 'supersecret',
        'firstName': 'Dana',
        'lastName': 'Seller',
    }
    data.update(overrides)
    return client.post('/api/auth/register', json=data)


def test_register_returns_token_and_lowercases_email(client):
    resp = register(client)
    assert resp.status_code == 201

    body = resp.get_json()
    assert body['email'] == 'dana@mail.com'
    assert body['firstName'] == 'Dana'
    assert body['lastName'] == 'Seller'
    assert body['token']


def test_register_duplicate_email_is_rejected(client):
    register(client)
    resp = register(client, email='dana@mail.com')

    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'User already exists'


def test_register_validation_errors(client):
    resp = register(client, email='not-an-email', password='short', firstName='')

    assert resp.status_code == 400
    body = resp.get_json()
    assert body['message'] == 'Validation failed'
    assert {e['field'] for e in body['errors']} == {'email', 'password', 'firstName'}


def test_login_and_profile(client):
    register(client)

    resp = client.post('/api/auth/login', json={'email': 'DANA@mail.com', 'password': 'supersecret'})
    assert resp.status_code == 200
    token = resp.get_json()['token']

    profile = client.get('/api/auth/profile', headers={'Authorization': f'Bearer {token}'})
    assert profile.status_code == 200
    body = profile.get_json()
    assert body['email'] == 'dana@mail.com'
    assert 'password' not in body
    assert 'passwordHash' not in body


def test_login_with_wrong_password(client):
    register(client)
    resp = client.post('/api/auth/login', json={'email': 'dana@mail.com', 'password': 'wrong-password'})

    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Invalid credentials'


def test_login_with_unknown_email(client):
    resp = client.post('/api/auth/login', json={'email': 'ghost@mail.com', 'password': 'whatever1'})
    assert resp.status_code == 401


def test_login_requires_credentials(client):
    assert client.post('/api/auth/login', json={}).status_code == 400


def test_profile_requires_token(client):
    resp = client.get('/api/auth/profile')

    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'No token, authorization denied'


def test_profile_rejects_invalid_token(client):
    resp = client.get('/api/auth/profile', headers={'Authorization': 'Bearer not.a.token'})

    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Token is not valid'


def test_profile_rejects_expired_token(app, client, alice):
    with app.app_context():
        token = create_access_token(identity=str(alice['id']), expires_delta=timedelta(seconds=-1))

    resp = client.get('/api/auth/profile', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 401


def test_profile_for_deleted_user_is_not_found(app, client):
    with app.app_context():
        token = create_access_token(identity='4242', additional_claims={'email': 'gone@mail.com'})

    resp = client.get('/api/auth/profile', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 404


def test_tokens_expire_after_thirty_days(app):
    assert app.config['JWT_ACCESS_TOKEN_EXPIRES'] == timedelta(days=30)


def test_unknown_route_returns_json_message(client):
    resp = client.get('/api/nowhere')

    assert resp.status_code == 404
    assert 'message' in resp.get_json()


class MissingRowQuery:
    """Query stand-in whose lookups find nothing, as if another request had not committed yet"""

    def filter_by(self, **kwargs):
        return self

    def first(self):
        return None


def test_concurrent_duplicate_registration_is_rejected(app, client, monkeypatch):
    create_user(app, 'dana@mail.com')
    monkeypatch.setattr(User, 'query', MissingRowQuery())

    resp = register(client)

    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'User already exists'
    with app.app_context():
        assert db.session.query(User).filter_by(email='dana@mail.com').count() == 1
