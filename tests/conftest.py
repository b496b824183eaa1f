"""
Pytest configuration and fixtures for testing the translator API.
"""

import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ['FLASK_ENV'] = 'testing'
os.environ['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'
os.environ['TEXT_HASH_SALT'] = 'test-salt'

from translator import create_app, db
from translator.models import User
from translator.services.rate_limit import FixedWindowRateLimiter
from translator.services.translation_cache import TranslationCache

from fakes import FakeProvider

fake = Faker()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def fake_provider(app):
    """Fresh stores and a fake engine for every test."""
    provider = FakeProvider()
    app.extensions['translation_provider'] = provider
    app.extensions['translate_rate_limiter'] = FixedWindowRateLimiter()
    app.extensions['translate_ip_rate_limiter'] = FixedWindowRateLimiter()
    app.extensions['translation_cache'] = TranslationCache(
        ttl_ms=app.config['TRANSLATION_CACHE_TTL_MS'],
        max_entries=app.config['TRANSLATION_CACHE_MAX_ENTRIES'],
    )
    return provider


@pytest.fixture(scope='function')
def client(app, fake_provider):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


def _create_user(password='testpassword123', **overrides):
    """Helper to create a user with sensible defaults."""
    email = overrides.pop('email', fake.unique.email())
    user = User(email=email, **overrides)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'email': user.email,
        'password': password,
    }


@pytest.fixture
def test_user(app, db_session):
    """Create a test user."""
    with app.app_context():
        return _create_user()


@pytest.fixture
def second_user(app, db_session):
    """Create a second test user for isolation tests."""
    with app.app_context():
        return _create_user(password='testpassword456')


def _get_token(app, email, password):
    """Login with a throwaway client (no cookie leaks) and return the token."""
    resp = app.test_client().post('/api/auth/login', json={
        'email': email,
        'password': password,
    })
    data = resp.get_json()
    if resp.status_code != 200 or not data or not data.get('token'):
        raise RuntimeError(f"Login failed: status={resp.status_code}, body={data}")
    return data['token']


@pytest.fixture
def auth_headers(app, test_user):
    """Get authentication headers for test user."""
    token = _get_token(app, test_user['email'], test_user['password'])
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def second_auth_headers(app, second_user):
    """Get authentication headers for second user."""
    token = _get_token(app, second_user['email'], second_user['password'])
    return {'Authorization': f'Bearer {token}'}
