import fakeredis
import pytest
from flask_jwt_extended import create_access_token

from marketplace import create_app, db
from marketplace.models import User

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'SQLALCHEMY_ENGINE_OPTIONS': {},
    'REDIS_URL': '',
    'RATELIMIT_ENABLED': False,
    'JWT_SECRET_KEY': 'test-jwt-secret-key-that-is-long-enough',
    'SECRET_KEY': 'test-secret-key',
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    app.extensions['response_cache'] = fakeredis.FakeRedis(decode_responses=True)

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def redis_store(app):
    return app.extensions['response_cache']


def create_user(app, email, first_name='Test', last_name='User', password='password123'):
    with app.app_context():
        user = User(email=email, first_name=first_name, last_name=last_name)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return {'id': user.id, 'email': user.email}


def auth_headers(app, user):
    with app.app_context():
        token = create_access_token(identity=str(user['id']), additional_claims={'email': user['email']})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def alice(app):
    user = create_user(app, 'alice@mail.com', 'Alice', 'Owner')
    user['headers'] = auth_headers(app, user)
    return user


@pytest.fixture
def bob(app):
    user = create_user(app, 'bob@mail.com', 'Bob', 'Buyer')
    user['headers'] = auth_headers(app, user)
    return user


@pytest.fixture
def carol(app):
    user = create_user(app, 'carol@mail.com', 'Carol', 'Stranger')
    user['headers'] = auth_headers(app, user)
    return user


def property_payload(**overrides):
    data = {
        'title': 'Sunny 2BHK near the park',
        'type': 'Apartment',
        'price': 150,
        'state': 'Karnataka',
        'city': 'Bengaluru',
        'areaSqFt': 900,
        'bedrooms': 2,
        'bathrooms': 2,
        'amenities': 'gym|pool|lift',
        'furnished': 'Semi',
        'availableFrom': '2025-01-01',
        'listedBy': 'Owner',
        'tags': 'family|pet-friendly',
        'listingType': 'rent',
    }
    data.update(overrides)
    return data


@pytest.fixture
def create_property(client):
    def _create(owner, **overrides):
        resp = client.post('/api/properties', json=property_payload(**overrides), headers=owner['headers'])
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()
    return _create
